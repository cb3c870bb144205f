import httpx
import pytest
import pytest_asyncio

from grubdash.config import Settings
from grubdash.main import create_app
from grubdash.models import Dish, Order


@pytest.fixture
def settings():
    return Settings(METRICS_ENABLED=False, OTEL_ENABLED=False, SEED_DATA_PATH=None)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def dish_store(app):
    return app.state.dishes


@pytest.fixture
def order_store(app):
    return app.state.orders


@pytest.fixture
def dish(dish_store):
    return dish_store.create(
        Dish(
            id="d1",
            name="Dolcelatte and pear pizza",
            description="Creamy gorgonzola with sliced pear",
            price=19,
            image_url="https://images.example.com/pear-pizza.jpg",
        )
    )


def make_order(order_store, order_id, status="pending"):
    return order_store.create(
        Order(
            id=order_id,
            deliverTo="308 Negra Arroyo Lane, Albuquerque, NM",
            mobileNumber="(505) 143-3369",
            status=status,
            dishes=[{"dishId": "d1", "quantity": 2}],
        )
    )


@pytest.fixture
def pending_order(order_store):
    return make_order(order_store, "o1")


@pytest.fixture
def preparing_order(order_store):
    return make_order(order_store, "o2", status="preparing")

"""
GrubDash — FastAPI application entrypoint

`create_app` is the composition root: it owns the dish and order stores for
the lifetime of the process and hands them to the routers through
`app.state`.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from grubdash import dishes, orders
from grubdash.config import Settings, get_settings
from grubdash.errors import register_error_handlers
from grubdash.models import Dish, Order
from grubdash.store import EntityStore, load_seed
from grubdash.telemetry import logger, setup_logging, setup_otel


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    providers = setup_otel(settings) if settings.OTEL_ENABLED else ()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "GrubDash service starting up",
            extra={"dishes": len(app.state.dishes), "orders": len(app.state.orders)},
        )
        yield
        logger.info("GrubDash service shutting down")
        for provider in providers:
            provider.shutdown()

    app = FastAPI(
        title="GrubDash",
        description="Dishes and orders with validation pipelines guarding every change.",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )

    seed_dishes, seed_orders = load_seed(settings.SEED_DATA_PATH) if settings.SEED_DATA_PATH else ([], [])
    app.state.settings = settings
    app.state.dishes = EntityStore[Dish]("Dish", seed_dishes)
    app.state.orders = EntityStore[Order]("Order", seed_orders)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    if settings.OTEL_ENABLED:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app, tracer_provider=providers[0])

    if settings.METRICS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    app.include_router(dishes.router)
    app.include_router(orders.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": settings.SERVICE_NAME}

    return app


app = create_app()

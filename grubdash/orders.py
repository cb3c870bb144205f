"""
GrubDash — Orders API

Flow for a replace (PUT):
  1. Resolve the order named in the path (404 otherwise)
  2. Require deliverTo, mobileNumber and status
  3. Reject unknown statuses and any request asking for `delivered`
  4. Reject a body id naming another order
  5. Require a non-empty dishes list with positive integer quantities
  6. Overwrite the stored order in place
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from grubdash import lifecycle
from grubdash.errors import ApiError, ValidationError
from grubdash.ids import next_id
from grubdash.models import Order
from grubdash.pipeline import (
    Context,
    Pipeline,
    entity_exists,
    id_matches_route,
    is_positive_integer,
    read_data,
    require_field,
)
from grubdash.store import EntityStore
from grubdash.telemetry import logger, tracer

router = APIRouter(prefix="/orders", tags=["orders"])

STATUS_MESSAGE = f"Order must have a status of {', '.join(lifecycle.ORDER_STATUSES)}"


def get_order_store(request: Request) -> EntityStore[Order]:
    return request.app.state.orders


# ─── Stages ────────────────────────────────────────────────────────────────────
def dishes_present(ctx: Context) -> Optional[ApiError]:
    dishes = ctx.data.get("dishes")
    if isinstance(dishes, list) and dishes:
        return None
    return ValidationError("Order must include at least one dish")


def quantities_valid(ctx: Context) -> Optional[ApiError]:
    for index, line in enumerate(ctx.data.get("dishes") or []):
        quantity = line.get("quantity") if isinstance(line, dict) else None
        if not is_positive_integer(quantity):
            return ValidationError(f"Dish {index} must have a quantity that is an integer greater than 0")
    return None


def status_valid(ctx: Context) -> Optional[ApiError]:
    if lifecycle.is_legal_status(ctx.data.get("status")):
        return None
    return ValidationError(STATUS_MESSAGE)


def status_not_delivered(ctx: Context) -> Optional[ApiError]:
    # Looks at the requested status, not the stored one.
    if lifecycle.is_terminal(ctx.data.get("status")):
        return ValidationError("A delivered order cannot be changed")
    return None


def status_pending(ctx: Context) -> Optional[ApiError]:
    if lifecycle.can_delete(ctx.entity.status):
        return None
    return ValidationError("An order cannot be deleted unless it is pending")


order_exists = entity_exists("Order")
order_id_matches = id_matches_route("Order")
contact_present = [require_field("Order", name, str) for name in ("deliverTo", "mobileNumber")]


# ─── Handlers ──────────────────────────────────────────────────────────────────
def _dump(order: Order) -> dict:
    data = order.model_dump()
    # Lines echo exactly the keys they were sent with.
    data["dishes"] = [line.model_dump(exclude_unset=True) for line in order.dishes]
    return data


def list_orders(ctx: Context) -> JSONResponse:
    return JSONResponse(content={"data": [_dump(o) for o in ctx.store.all()]})


def create_order(ctx: Context) -> JSONResponse:
    data = ctx.data
    status = data.get("status")
    if not lifecycle.is_legal_status(status):
        status = lifecycle.DELETABLE_STATUS

    with tracer.start_as_current_span("order.create") as span:
        order = Order(
            id=next_id(),
            deliverTo=data["deliverTo"],
            mobileNumber=data["mobileNumber"],
            status=status,
            dishes=data["dishes"],
        )
        ctx.store.create(order)

        span.set_attribute("order.id", order.id)
        span.set_attribute("order.dishes_count", len(order.dishes))
        logger.info(
            "Order created",
            extra={"order_id": order.id, "status": order.status, "dishes_count": len(order.dishes)},
        )

    return JSONResponse(status_code=201, content={"data": _dump(order)})


def read_order(ctx: Context) -> JSONResponse:
    return JSONResponse(content={"data": _dump(ctx.entity)})


def update_order(ctx: Context) -> JSONResponse:
    data = ctx.data
    with tracer.start_as_current_span("order.update") as span:
        previous = ctx.entity.status
        order = ctx.store.update(
            ctx.entity,
            {
                "deliverTo": data["deliverTo"],
                "mobileNumber": data["mobileNumber"],
                "status": data["status"],
                "dishes": data["dishes"],
            },
        )

        span.set_attribute("order.id", order.id)
        span.set_attribute("order.status", order.status)
        logger.info(
            "Order updated",
            extra={"order_id": order.id, "previous_status": previous, "status": order.status},
        )

    return JSONResponse(content={"data": _dump(order)})


def delete_order(ctx: Context) -> Response:
    with tracer.start_as_current_span("order.delete") as span:
        order = ctx.store.remove(ctx.index)

        span.set_attribute("order.id", order.id)
        logger.info("Order deleted", extra={"order_id": order.id})

    return Response(status_code=204)


list_pipeline = Pipeline("orders.list", [], list_orders)
create_pipeline = Pipeline(
    "orders.create",
    [*contact_present, dishes_present, quantities_valid],
    create_order,
)
read_pipeline = Pipeline("orders.read", [order_exists], read_order)
update_pipeline = Pipeline(
    "orders.update",
    [
        order_exists,
        *contact_present,
        require_field("Order", "status", str),
        status_valid,
        status_not_delivered,
        order_id_matches,
        dishes_present,
        quantities_valid,
    ],
    update_order,
)
delete_pipeline = Pipeline("orders.delete", [order_exists, status_pending], delete_order)


# ─── Routes ────────────────────────────────────────────────────────────────────
@router.get("")
async def list_route(store: EntityStore[Order] = Depends(get_order_store)):
    return list_pipeline.run(Context(store=store))


@router.post("")
async def create_route(request: Request, store: EntityStore[Order] = Depends(get_order_store)):
    return create_pipeline.run(Context(store=store, data=await read_data(request)))


@router.get("/{order_id}")
async def read_route(order_id: str, store: EntityStore[Order] = Depends(get_order_store)):
    return read_pipeline.run(Context(store=store, route_id=order_id))


@router.put("/{order_id}")
async def update_route(order_id: str, request: Request, store: EntityStore[Order] = Depends(get_order_store)):
    ctx = Context(store=store, data=await read_data(request), route_id=order_id)
    return update_pipeline.run(ctx)


@router.delete("/{order_id}")
async def delete_route(order_id: str, store: EntityStore[Order] = Depends(get_order_store)):
    return delete_pipeline.run(Context(store=store, route_id=order_id))

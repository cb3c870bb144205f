"""
GrubDash — Dishes API

Routes are thin: each builds a `Context` and hands it to its pipeline.
Dishes can be listed, created, read and replaced, never deleted.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from grubdash.errors import ApiError, ValidationError
from grubdash.ids import next_id
from grubdash.models import Dish
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

router = APIRouter(prefix="/dishes", tags=["dishes"])

# field name -> required type (None: checked by a dedicated stage)
DISH_FIELDS = {
    "name": str,
    "description": str,
    "price": None,
    "image_url": str,
}


def get_dish_store(request: Request) -> EntityStore[Dish]:
    return request.app.state.dishes


# ─── Stages ────────────────────────────────────────────────────────────────────
def price_is_valid(ctx: Context) -> Optional[ApiError]:
    if is_positive_integer(ctx.data.get("price")):
        return None
    return ValidationError("Dish must have a price that is an integer greater than 0")


dish_exists = entity_exists("Dish")
dish_id_matches = id_matches_route("Dish")
dish_fields_present = [require_field("Dish", name, kind) for name, kind in DISH_FIELDS.items()]


def _fields(data: dict) -> dict:
    fields = {name: data[name] for name in DISH_FIELDS}
    fields["price"] = int(fields["price"])
    return fields


# ─── Handlers ──────────────────────────────────────────────────────────────────
def list_dishes(ctx: Context) -> JSONResponse:
    return JSONResponse(content={"data": [d.model_dump() for d in ctx.store.all()]})


def create_dish(ctx: Context) -> JSONResponse:
    with tracer.start_as_current_span("dish.create") as span:
        dish = Dish(id=next_id(), **_fields(ctx.data))
        ctx.store.create(dish)

        span.set_attribute("dish.id", dish.id)
        span.set_attribute("dish.price", dish.price)
        logger.info("Dish created", extra={"dish_id": dish.id, "dish_name": dish.name})

    return JSONResponse(status_code=201, content={"data": dish.model_dump()})


def read_dish(ctx: Context) -> JSONResponse:
    return JSONResponse(content={"data": ctx.entity.model_dump()})


def update_dish(ctx: Context) -> JSONResponse:
    with tracer.start_as_current_span("dish.update") as span:
        dish = ctx.store.update(ctx.entity, _fields(ctx.data))

        span.set_attribute("dish.id", dish.id)
        logger.info("Dish updated", extra={"dish_id": dish.id})

    return JSONResponse(content={"data": dish.model_dump()})


list_pipeline = Pipeline("dishes.list", [], list_dishes)
create_pipeline = Pipeline(
    "dishes.create",
    [*dish_fields_present, price_is_valid],
    create_dish,
)
read_pipeline = Pipeline("dishes.read", [dish_exists], read_dish)
update_pipeline = Pipeline(
    "dishes.update",
    [dish_exists, dish_id_matches, *dish_fields_present, price_is_valid],
    update_dish,
)


# ─── Routes ────────────────────────────────────────────────────────────────────
@router.get("")
async def list_route(store: EntityStore[Dish] = Depends(get_dish_store)):
    return list_pipeline.run(Context(store=store))


@router.post("")
async def create_route(request: Request, store: EntityStore[Dish] = Depends(get_dish_store)):
    return create_pipeline.run(Context(store=store, data=await read_data(request)))


@router.get("/{dish_id}")
async def read_route(dish_id: str, store: EntityStore[Dish] = Depends(get_dish_store)):
    return read_pipeline.run(Context(store=store, route_id=dish_id))


@router.put("/{dish_id}")
async def update_route(dish_id: str, request: Request, store: EntityStore[Dish] = Depends(get_dish_store)):
    ctx = Context(store=store, data=await read_data(request), route_id=dish_id)
    return update_pipeline.run(ctx)

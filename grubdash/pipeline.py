"""
Validation pipeline.

A route is an ordered list of stages followed by a terminal handler. Each
stage inspects the request context and returns None to let the request
through, or an `ApiError` describing why it was stopped. `Pipeline.run`
walks the stages left to right, raises the first failure it meets and only
then calls the handler, so nothing mutates a store unless every stage passed.

Stages are plain functions of the context and hold no state of their own,
which keeps each rule testable on its own.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from fastapi import Request

from grubdash.errors import ApiError, NotFoundError, ValidationError
from grubdash.store import EntityStore
from grubdash.telemetry import logger, rejections_counter


@dataclass
class Context:
    """Per-request state shared by the stages and the handler of one route."""

    store: EntityStore
    data: dict[str, Any] = field(default_factory=dict)
    route_id: Optional[str] = None
    entity: Any = None
    index: Optional[int] = None


Stage = Callable[[Context], Optional[ApiError]]
Handler = Callable[[Context], Any]


class Pipeline:
    def __init__(self, name: str, stages: Sequence[Stage], handler: Handler):
        self.name = name
        self.stages = tuple(stages)
        self.handler = handler

    def check(self, ctx: Context) -> Optional[ApiError]:
        """Run the stages only; return the first failure or None."""
        for stage in self.stages:
            failure = stage(ctx)
            if failure is not None:
                logger.info(
                    "Request rejected",
                    extra={
                        "route": self.name,
                        "stage": getattr(stage, "__name__", repr(stage)),
                        "status": failure.status,
                        "error": failure.message,
                    },
                )
                rejections_counter.add(1, {"route": self.name, "status": failure.status})
                return failure
        return None

    def run(self, ctx: Context):
        failure = self.check(ctx)
        if failure is not None:
            raise failure
        return self.handler(ctx)


# ─── Request payload ───────────────────────────────────────────────────────────
async def read_data(request: Request) -> dict[str, Any]:
    """Return the `data` member of a `{"data": {...}}` body.

    An empty body, a missing `data` or a `data` that is not an object all
    read as `{}`; the presence stages then report what is missing.
    """
    body = await request.body()
    if not body:
        return {}
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    data = payload.get("data") if isinstance(payload, dict) else None
    return data if isinstance(data, dict) else {}


# ─── Field rules ───────────────────────────────────────────────────────────────
def is_present(value: Any) -> bool:
    # JSON falsy scalars; empty arrays and objects still count as present.
    if value is None or value is False:
        return False
    if isinstance(value, (str, int, float)) and not value:
        return False
    return True


def is_positive_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return value.is_integer() and value > 0
    return isinstance(value, int) and value > 0


def require_field(entity: str, name: str, kind: Optional[type] = None) -> Stage:
    """Stage failing with 400 when `name` is absent, falsy or not a `kind`."""

    def stage(ctx: Context) -> Optional[ApiError]:
        value = ctx.data.get(name)
        if is_present(value) and (kind is None or isinstance(value, kind)):
            return None
        return ValidationError(f"{entity} must include a {name}")

    stage.__name__ = f"require_{name}"
    return stage


def entity_exists(entity: str) -> Stage:
    """Stage resolving the route id against the context store (404 on miss)."""

    def stage(ctx: Context) -> Optional[ApiError]:
        found = ctx.store.find(ctx.route_id)
        if found is None:
            return NotFoundError(f"{entity} does not exist: {ctx.route_id}.")
        ctx.index, ctx.entity = found
        return None

    stage.__name__ = f"{entity.lower()}_exists"
    return stage


def id_matches_route(entity: str) -> Stage:
    """Stage rejecting a body `id` that names a different entity than the path."""

    def stage(ctx: Context) -> Optional[ApiError]:
        body_id = ctx.data.get("id")
        if is_present(body_id) and body_id != ctx.route_id:
            return ValidationError(
                f"{entity} id does not match route id. {entity}: {body_id}, Route: {ctx.route_id}"
            )
        return None

    stage.__name__ = f"{entity.lower()}_id_matches"
    return stage

"""
In-memory entity stores.

A store keeps its entities in insertion order. Entities are pydantic models
mutated in place on update, so references handed out by `find` stay live.
The stores do no locking; concurrent writers may interleave.
"""

import json
from pathlib import Path
from typing import Any, Generic, Iterable, Optional, Tuple, TypeVar

from pydantic import BaseModel

from grubdash.models import Dish, Order
from grubdash.telemetry import logger

E = TypeVar("E", bound=BaseModel)


class EntityStore(Generic[E]):
    def __init__(self, entity: str, items: Iterable[E] = ()):
        self.entity = entity
        self._items: list[E] = []
        for item in items:
            self.create(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: str) -> bool:
        return self.find(entity_id) is not None

    def all(self) -> list[E]:
        return list(self._items)

    def create(self, entity: E) -> E:
        if entity.id in self:
            raise ValueError(f"{self.entity} id already exists: {entity.id}")
        self._items.append(entity)
        return entity

    def find(self, entity_id: str) -> Optional[Tuple[int, E]]:
        """Return (index, entity) for `entity_id`, or None."""
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index, item
        return None

    def update(self, entity: E, fields: dict[str, Any]) -> E:
        """Overwrite `fields` on `entity`, all or nothing.

        The merged state is validated before any attribute changes, so a
        rejected value leaves the stored entity as it was.
        """
        fields = {name: value for name, value in fields.items() if name != "id"}
        merged = type(entity).model_validate({**entity.model_dump(), **fields})
        for name in fields:
            setattr(entity, name, getattr(merged, name))
        return entity

    def remove(self, index: int) -> E:
        return self._items.pop(index)


def load_seed(path: str | Path) -> Tuple[list[Dish], list[Order]]:
    """Read a `{"dishes": [...], "orders": [...]}` fixture file."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    dishes = [Dish.model_validate(d) for d in raw.get("dishes", [])]
    orders = [Order.model_validate(o) for o in raw.get("orders", [])]
    logger.info(
        "Seed data loaded",
        extra={"path": str(path), "dishes": len(dishes), "orders": len(orders)},
    )
    return dishes, orders

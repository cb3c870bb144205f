from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out-for-delivery"
    DELIVERED = "delivered"


class Dish(BaseModel):
    id: str
    name: str
    description: str
    price: int
    image_url: str


class OrderDish(BaseModel):
    # Clients may copy dish details into each line; keep whatever they send.
    model_config = ConfigDict(extra="allow")

    dishId: Any = None
    quantity: int


class Order(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    id: str
    deliverTo: str
    mobileNumber: str
    status: OrderStatus = OrderStatus.PENDING
    dishes: List[OrderDish]

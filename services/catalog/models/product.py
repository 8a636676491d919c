"""
Product catalog models.
"""

import math
from typing import Union

from pydantic import BaseModel, field_validator


class Product(BaseModel):
    """Catalog entry owned by the product store."""

    id: int
    name: str
    price: Union[int, float]

    @field_validator("price")
    @classmethod
    def price_must_be_finite_and_non_negative(cls, value: Union[int, float]) -> Union[int, float]:
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("price must be a finite number")
        if value < 0:
            raise ValueError("price must be at least 0")
        return value

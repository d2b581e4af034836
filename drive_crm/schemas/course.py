"""
Pydantic schemas for the course catalogue.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    total_hours: Decimal = Field(gt=0, decimal_places=2)
    base_price: Decimal = Field(ge=0, decimal_places=2)
    discounted_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)

    @model_validator(mode="after")
    def discount_not_above_base(self):
        if (
            self.discounted_price is not None
            and self.discounted_price > self.base_price
        ):
            raise ValueError("discounted_price cannot exceed base_price")
        return self


class CourseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    total_hours: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    base_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    discounted_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    is_active: bool | None = None


class CourseResponse(BaseModel):
    id: int
    name: str
    total_hours: Decimal
    base_price: Decimal
    discounted_price: Decimal | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}

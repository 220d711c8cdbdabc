"""
Review documents. Created once per completed order, never edited.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

MIN_COMMENT_LENGTH = 10
MAX_COMMENT_LENGTH = 500


class ReviewInput(BaseModel):
    order_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: str

    @field_validator("comment")
    @classmethod
    def _comment(cls, v: str) -> str:
        v = (v or "").strip()
        if len(v) < MIN_COMMENT_LENGTH:
            raise ValueError(f"comment must be at least {MIN_COMMENT_LENGTH} characters")
        if len(v) > MAX_COMMENT_LENGTH:
            raise ValueError(f"comment must be at most {MAX_COMMENT_LENGTH} characters")
        return v


class Review(BaseModel):
    id: str
    order_id: str
    customer_id: str
    customer_name: str = "Customer"
    cook_id: str
    meal_id: str
    meal_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    created_at: datetime

    def to_document(self) -> dict:
        return self.model_dump(mode="json")

from typing import Literal

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    id: str | None = None
    name: str = Field(..., min_length=1)
    phone: str | None = None
    role: Literal["BUILDER", "AUDITOR"]


class UserResponse(BaseModel):
    id: str
    name: str
    phone: str | None = None
    role: str
    created_at: str

    model_config = {"from_attributes": True}

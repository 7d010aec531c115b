from typing import Literal

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    location: str | None = None


class ProjectResponse(BaseModel):
    id: str
    name: str
    location: str | None = None
    created_at: str

    model_config = {"from_attributes": True}


class NodeCreate(BaseModel):
    parent_id: str | None = None
    level_type: Literal["PROJECT", "BLOCK", "FLOOR", "UNIT", "ROOM"]
    name: str = Field(..., min_length=1)
    order_index: int = 0


class NodeResponse(BaseModel):
    id: str
    project_id: str
    parent_id: str | None = None
    level_type: str
    name: str
    order_index: int

    model_config = {"from_attributes": True}


class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1)


class PointCreate(BaseModel):
    applicable_level_type: Literal["UNIT", "ROOM"]
    name: str = Field(..., min_length=1)
    is_mandatory: bool = False
    severity: Literal["LOW", "MEDIUM", "HIGH"]
    order_index: int = 0


class PointResponse(BaseModel):
    id: str
    template_id: str
    applicable_level_type: str
    name: str
    is_mandatory: bool
    severity: str
    order_index: int

    model_config = {"from_attributes": True}


class TemplateResponse(BaseModel):
    id: str
    project_id: str
    name: str
    points: list[PointResponse] = []

    model_config = {"from_attributes": True}

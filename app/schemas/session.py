from typing import Literal

from pydantic import BaseModel, Field


class SessionCreate(BaseModel):
    project_id: str = Field(..., min_length=1)
    auditor_id: str | None = None


class SessionResponse(BaseModel):
    id: str
    project_id: str
    auditor_id: str
    status: str
    created_at: str
    submitted_at: str | None = None

    model_config = {"from_attributes": True}


class ItemCreate(BaseModel):
    audit_session_id: str = Field(..., min_length=1)
    structure_node_id: str = Field(..., min_length=1)
    template_audit_point_id: str = Field(..., min_length=1)
    status: Literal["PASS", "FAIL"]
    notes: str | None = None


class ItemResponse(BaseModel):
    id: str
    audit_session_id: str
    structure_node_id: str
    template_audit_point_id: str
    status: str
    notes: str | None = None
    created_at: str

    model_config = {"from_attributes": True}


class MediaCreate(BaseModel):
    storage_key: str = Field(..., min_length=1)


class MediaResponse(BaseModel):
    id: str
    audit_item_id: str
    storage_key: str
    created_at: str

    model_config = {"from_attributes": True}


class SubmitResponse(BaseModel):
    ok: bool = True
    session_id: str
    submitted_at: str


"""API request/response Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from policywizard.models.errors import WizardError
from policywizard.models.policy import Model, Policy


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    version: str


class SessionCreateRequest(BaseModel):
    """Request body for POST /sessions."""

    policy: Policy | None = Field(None, description="Policy document to edit")
    metadata: dict[str, str] = {}


class SessionResponse(BaseModel):
    """Session metadata."""

    session_id: str
    policy_name: str
    created_at: datetime
    last_accessed_at: datetime
    model_count: int
    cube_count: int
    metadata: dict[str, str] = {}


class SessionListResponse(BaseModel):
    """Response body for GET /sessions."""

    sessions: list[SessionResponse]


class DraftResponse(BaseModel):
    """The model draft currently held by the session's factory."""

    model: Model
    position: int
    valid: bool
    errors: list[WizardError] = []


class ModelAddResponse(BaseModel):
    """Response body for POST /sessions/{id}/models."""

    model: Model
    model_count: int


class ModelPositionResponse(BaseModel):
    """Position predicates for a wizard slot."""

    position: int
    is_last: bool
    is_new: bool


class PanelRequest(BaseModel):
    """Request body for POST /sessions/{id}/panel."""

    active: bool = True


class PanelResponse(BaseModel):
    active: bool


class RemovalResponse(BaseModel):
    """A removal waiting for confirmation."""

    position: int
    model_name: str
    title: str
    message: str
    dependent_cubes: list[str] = []
    state: str


class ConfirmationRequest(BaseModel):
    """Request body for POST /sessions/{id}/confirmation."""

    confirmed: bool


class ConfirmationResponse(BaseModel):
    outcome: str
    model_count: int
    cube_count: int

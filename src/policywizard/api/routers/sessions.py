"""Session-scoped endpoints for the wizard's model step."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from policywizard.api.deps import get_session_manager
from policywizard.api.schemas import (
    ConfirmationRequest,
    ConfirmationResponse,
    DraftResponse,
    ModelAddResponse,
    ModelPositionResponse,
    PanelRequest,
    PanelResponse,
    RemovalResponse,
    SessionCreateRequest,
    SessionListResponse,
    SessionResponse,
)
from policywizard.models.policy import Model, Policy
from policywizard.service.model_service import (
    ModelNotFoundError,
    PendingRemoval,
    RemovalOutcome,
    StaleRemovalError,
)
from policywizard.service.session_manager import (
    SessionInfo,
    SessionManager,
    SessionNotFoundError,
    WizardSession,
)

logger = logging.getLogger("policywizard.api")

router = APIRouter()


# -- helpers -----------------------------------------------------------------


def _get_wizard(session_id: str, mgr: SessionManager) -> WizardSession:
    """Resolve session_id to its wizard state, raise 404 if missing/expired."""
    try:
        return mgr.get_wizard(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None


def _session_response(info: SessionInfo) -> SessionResponse:
    """Convert a SessionInfo dataclass to a Pydantic response."""
    return SessionResponse(**asdict(info))


def _draft_response(wizard: WizardSession) -> DraftResponse:
    result = wizard.factory.validate()
    return DraftResponse(
        model=wizard.factory.get_model(),
        position=wizard.factory.get_context().position,
        valid=result.valid,
        errors=result.errors,
    )


def _removal_response(wizard: WizardSession, pending: PendingRemoval) -> RemovalResponse:
    request = wizard.service.build_confirm_request(pending.dependents.names)
    return RemovalResponse(
        position=pending.position,
        model_name=pending.model.name,
        title=request.title,
        message=request.message,
        dependent_cubes=pending.dependents.names,
        state=pending.state.value,
    )


# -- session CRUD ------------------------------------------------------------


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    body: SessionCreateRequest | None = None,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionResponse:
    """Open a wizard session, optionally on an existing policy document."""
    policy = body.policy if body else None
    metadata = body.metadata if body else {}
    info = mgr.create_session(policy=policy, metadata=metadata)
    return _session_response(info)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionListResponse:
    """List all active sessions."""
    return SessionListResponse(sessions=[_session_response(s) for s in mgr.list_sessions()])


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionResponse:
    """Get info for a specific session."""
    try:
        info = mgr.get_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None
    return _session_response(info)


@router.delete("/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> None:
    """Close a session and discard its policy."""
    try:
        mgr.close_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None


@router.get("/{session_id}/policy", response_model=Policy)
async def get_policy(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> Policy:
    """Return the policy as currently edited."""
    return _get_wizard(session_id, mgr).policy


# -- model step --------------------------------------------------------------


@router.get("/{session_id}/draft", response_model=DraftResponse)
async def get_draft(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> DraftResponse:
    """Return the model draft and its validation state."""
    return _draft_response(_get_wizard(session_id, mgr))


@router.put("/{session_id}/draft", response_model=DraftResponse)
async def put_draft(
    session_id: str,
    body: Model,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> DraftResponse:
    """Replace the model draft with the submitted form contents."""
    wizard = _get_wizard(session_id, mgr)
    wizard.factory.set_model(body)
    return _draft_response(wizard)


@router.post("/{session_id}/models", response_model=ModelAddResponse, status_code=201)
async def add_model(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> ModelAddResponse:
    """Add the current draft to the policy."""
    wizard = _get_wizard(session_id, mgr)
    result = wizard.factory.validate()
    added = wizard.service.add_model()
    if added is None:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Model draft is not valid",
                "errors": [e.model_dump() for e in result.errors],
            },
        )
    return ModelAddResponse(model=added, model_count=len(wizard.policy.transformations))


@router.get("/{session_id}/models/{position}", response_model=ModelPositionResponse)
async def model_position(
    session_id: str,
    position: int,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> ModelPositionResponse:
    """Report whether *position* is the last model or the slot for a new one."""
    service = _get_wizard(session_id, mgr).service
    return ModelPositionResponse(
        position=position,
        is_last=service.is_last_model(position),
        is_new=service.is_new_model(position),
    )


@router.post("/{session_id}/panel", response_model=PanelResponse)
async def set_panel(
    session_id: str,
    body: PanelRequest | None = None,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> PanelResponse:
    """Show (or hide) the model creation panel."""
    service = _get_wizard(session_id, mgr).service
    if body is None or body.active:
        service.activate_model_creation_panel()
    else:
        service.deactivate_model_creation_panel()
    return PanelResponse(active=service.is_active_model_creation_panel())


# -- removal -----------------------------------------------------------------


@router.delete("/{session_id}/models/{position}", response_model=RemovalResponse, status_code=202)
async def request_model_removal(
    session_id: str,
    position: int,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> RemovalResponse:
    """Start removing a model; nothing changes until the removal is confirmed."""
    wizard = _get_wizard(session_id, mgr)
    try:
        pending = wizard.service.resolve_dependents(position)
    except ModelNotFoundError:
        raise HTTPException(status_code=404, detail=f"No model at position {position}") from None
    return _removal_response(wizard, pending)


@router.get("/{session_id}/confirmation", response_model=RemovalResponse)
async def get_confirmation(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> RemovalResponse:
    """Return the removal waiting for confirmation."""
    wizard = _get_wizard(session_id, mgr)
    pending = wizard.service.pending_removal
    if pending is None:
        raise HTTPException(status_code=404, detail="No removal is waiting for confirmation")
    return _removal_response(wizard, pending)


@router.post("/{session_id}/confirmation", response_model=ConfirmationResponse)
async def answer_confirmation(
    session_id: str,
    body: ConfirmationRequest,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> ConfirmationResponse:
    """Confirm or cancel the pending removal."""
    wizard = _get_wizard(session_id, mgr)
    pending = wizard.service.pending_removal
    if pending is None:
        raise HTTPException(status_code=409, detail="No removal is waiting for confirmation")

    if not body.confirmed:
        wizard.service.abort(pending)
        outcome = RemovalOutcome.CANCELLED
    else:
        try:
            wizard.service.commit(pending)
        except StaleRemovalError as exc:
            wizard.service.abort(pending)
            logger.warning("Discarding stale removal in session %s: %s", session_id, exc)
            raise HTTPException(status_code=409, detail=str(exc)) from None
        outcome = RemovalOutcome.CONFIRMED

    return ConfirmationResponse(
        outcome=outcome.value,
        model_count=len(wizard.policy.transformations),
        cube_count=len(wizard.policy.cubes),
    )

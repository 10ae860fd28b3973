"""Organization onboarding wizard: 5-step guided setup, held in memory.

Endpoints:
  POST   /api/wizard/              → open a session
  GET    /api/wizard/{id}          → current step, draft and errors
  PATCH  /api/wizard/{id}/fields   → edit draft fields
  POST   /api/wizard/{id}/next     → validate + advance (submits on review)
  POST   /api/wizard/{id}/back     → go back one step
  DELETE /api/wizard/{id}          → abandon, discarding the draft

Design:
  - Each session owns its own WizardController; nothing is persisted.
  - A session is discarded once the wizard completes or is abandoned.
  - Only the current step is validated when advancing.
  - The review step's "next" runs the submission saga
    (create organisation → admin user → subscription).
"""

import functools
import logging

from fastapi import APIRouter, Depends, status

from church_onboarding.auth.deps import require_permission
from church_onboarding.auth.permissions import PermissionSet
from church_onboarding.errors import PermissionDeniedError, RemoteOperationError
from church_onboarding.schemas.wizard import (
    FieldUpdateRequest,
    OpenWizardRequest,
    WizardView,
    make_view,
)
from church_onboarding.services.plans import fetch_subscription_plans
from church_onboarding.services.remote import RemoteExecutor, get_remote_executor
from church_onboarding.wizard.controller import WizardController, WizardStatus
from church_onboarding.wizard.draft import OrganizationDraft
from church_onboarding.wizard.sessions import WizardSession, WizardSessionStore, get_session_store
from church_onboarding.wizard.submission import SubmissionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

WIZARD_PERMISSION = "organizations.create"


def _owned_session(
    session_id: str,
    store: WizardSessionStore,
    caller: PermissionSet,
) -> WizardSession:
    session = store.get(session_id)
    if session.owner and session.owner != caller.subject:
        raise PermissionDeniedError("Wizard session belongs to another user")
    return session


# ── POST /api/wizard/ ────────────────────────────────────────

@router.post("/", response_model=WizardView, status_code=status.HTTP_201_CREATED)
async def open_wizard(
    body: OpenWizardRequest | None = None,
    store: WizardSessionStore = Depends(get_session_store),
    executor: RemoteExecutor = Depends(get_remote_executor),
    caller: PermissionSet = Depends(require_permission(WIZARD_PERMISSION)),
):
    """Open a fresh wizard at the first step, with the plan list loaded."""
    try:
        plans = await fetch_subscription_plans(executor)
    except RemoteOperationError as e:
        # Plan membership is then left unchecked; the remote rejects bad ids
        logger.warning("Opening wizard without plan list: %s", e.message)
        plans = None
    draft = OrganizationDraft(organization_id=body.organization_id if body else None)
    controller = WizardController(
        orchestrator=SubmissionOrchestrator(executor),
        plans=plans,
        draft=draft,
    )
    session = store.open(controller, owner=caller.subject)
    # Completion or abandonment ends the session
    controller.on_close = functools.partial(store.discard, session.id)
    return make_view(session.id, controller)


# ── GET /api/wizard/{id} ─────────────────────────────────────

@router.get("/{session_id}", response_model=WizardView)
async def get_wizard(
    session_id: str,
    store: WizardSessionStore = Depends(get_session_store),
    caller: PermissionSet = Depends(require_permission(WIZARD_PERMISSION)),
):
    session = _owned_session(session_id, store, caller)
    return make_view(session.id, session.controller)


# ── PATCH /api/wizard/{id}/fields ────────────────────────────

@router.patch("/{session_id}/fields", response_model=WizardView)
async def update_fields(
    session_id: str,
    body: FieldUpdateRequest,
    store: WizardSessionStore = Depends(get_session_store),
    caller: PermissionSet = Depends(require_permission(WIZARD_PERMISSION)),
):
    """Apply the edits as one update; an unknown key rejects them all.

    Each edited field has only its own error cleared.
    """
    session = _owned_session(session_id, store, caller)
    session.controller.update_fields(body.fields)
    return make_view(session.id, session.controller)


# ── POST /api/wizard/{id}/next ───────────────────────────────

@router.post("/{session_id}/next", response_model=WizardView)
async def next_step(
    session_id: str,
    store: WizardSessionStore = Depends(get_session_store),
    caller: PermissionSet = Depends(require_permission(WIZARD_PERMISSION)),
):
    """Advance one step, or submit from the review step.

    `advanced` is false when validation or submission failed; see `errors`.
    """
    session = _owned_session(session_id, store, caller)
    advanced = await session.controller.next()
    return make_view(session.id, session.controller, advanced=advanced)


# ── POST /api/wizard/{id}/back ───────────────────────────────

@router.post("/{session_id}/back", response_model=WizardView)
async def previous_step(
    session_id: str,
    store: WizardSessionStore = Depends(get_session_store),
    caller: PermissionSet = Depends(require_permission(WIZARD_PERMISSION)),
):
    """Go back one step; a no-op on the first step. Never validates."""
    session = _owned_session(session_id, store, caller)
    session.controller.back()
    return make_view(session.id, session.controller)


# ── DELETE /api/wizard/{id} ──────────────────────────────────

@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_wizard(
    session_id: str,
    store: WizardSessionStore = Depends(get_session_store),
    caller: PermissionSet = Depends(require_permission(WIZARD_PERMISSION)),
):
    session = _owned_session(session_id, store, caller)
    if session.controller.state.status is WizardStatus.OPEN:
        session.controller.close()
    store.discard(session.id)

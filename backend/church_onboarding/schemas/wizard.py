"""Pydantic schemas for the organization onboarding wizard API.

Field validation failures are returned inside `WizardView.errors` with a
200 response; they block navigation but are not HTTP errors.
"""

from pydantic import BaseModel, Field

from church_onboarding.wizard.controller import WizardController
from church_onboarding.wizard.steps import STEP_SEQUENCE, TOTAL_STEPS, WizardStep

MASKED = "********"


# ── Requests ────────────────────────────────────────────────

class OpenWizardRequest(BaseModel):
    """Pass organization_id when the organisation already exists remotely;
    submission then only creates the subscription."""
    organization_id: str | None = None


class FieldUpdateRequest(BaseModel):
    """Field edits applied in order. Keys may be snake_case or camelCase."""
    fields: dict[str, str] = Field(min_length=1)


# ── Responses ───────────────────────────────────────────────

class StepInfo(BaseModel):
    id: WizardStep
    title: str
    description: str
    fields: list[str]


class WizardView(BaseModel):
    session_id: str
    status: str
    current_step: WizardStep
    current_step_index: int
    total_steps: int = TOTAL_STEPS
    is_submitting: bool
    steps: list[StepInfo]
    draft: dict
    errors: dict[str, str] = {}
    advanced: bool | None = None
    organization_id: str | None = None
    subscription_id: str | None = None


STEPS_INFO = [
    StepInfo(id=step, title=step.label, description=step.description, fields=list(step.fields))
    for step in STEP_SEQUENCE
]


def make_view(session_id: str, controller: WizardController, advanced: bool | None = None) -> WizardView:
    """Build a WizardView from controller state. The password is never echoed."""
    draft = controller.draft.model_dump(mode="json")
    if draft.get("admin_password"):
        draft["admin_password"] = MASKED

    result = controller.result
    return WizardView(
        session_id=session_id,
        status=controller.state.status.value,
        current_step=controller.current_step,
        current_step_index=controller.state.current_step_index,
        is_submitting=controller.state.is_submitting,
        steps=STEPS_INFO,
        draft=draft,
        errors=controller.errors,
        advanced=advanced,
        organization_id=controller.draft.organization_id,
        subscription_id=result.subscription_id if result else None,
    )

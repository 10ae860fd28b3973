"""Wizard controller: step pointer, forward gating and final submission.

State machine over STEP_SEQUENCE:

  back()   index - 1, no-op on the first step, never validates
  next()   validate the current step only; advance by exactly one on an
           empty error map. On the review step, run the submission saga
           instead.

Terminal states are COMPLETED (success callbacks fired) and ABANDONED
(close() from any step; the draft is discarded). While a submission is
in flight every mutating call raises WizardBusyError.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from church_onboarding.errors import WizardBusyError, WizardClosedError
from church_onboarding.wizard.draft import (
    SUBMIT_ERROR_KEY,
    FieldStore,
    OrganizationDraft,
    ValidationErrors,
)
from church_onboarding.wizard.plans import SubscriptionPlan
from church_onboarding.wizard.steps import LAST_STEP, TOTAL_STEPS, WizardStep, step_at
from church_onboarding.wizard.submission import (
    SubmissionError,
    SubmissionOrchestrator,
    SubmissionResult,
)
from church_onboarding.wizard.validation import validate

logger = logging.getLogger(__name__)


class WizardStatus(str, enum.Enum):
    OPEN = "OPEN"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"


@dataclass
class WizardState:
    current_step_index: int = 0
    is_submitting: bool = False
    status: WizardStatus = WizardStatus.OPEN


class WizardController:
    def __init__(
        self,
        orchestrator: SubmissionOrchestrator,
        plans: list[SubscriptionPlan] | None = None,
        draft: OrganizationDraft | None = None,
        on_success: Callable[[SubmissionResult], None] | None = None,
        on_close: Callable[[], None] | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.orchestrator = orchestrator
        self.plans = plans
        self.store = FieldStore(draft)
        self.state = WizardState()
        self.result: SubmissionResult | None = None
        self.on_success = on_success
        self.on_close = on_close
        self._today = today

    # ── Read access ─────────────────────────────────────────

    @property
    def current_step(self) -> WizardStep:
        return step_at(self.state.current_step_index)

    @property
    def draft(self) -> OrganizationDraft:
        return self.store.draft

    @property
    def errors(self) -> ValidationErrors:
        return self.store.errors

    @property
    def is_last_step(self) -> bool:
        return self.current_step == LAST_STEP

    # ── Guards ──────────────────────────────────────────────

    def _ensure_open(self) -> None:
        if self.state.status != WizardStatus.OPEN:
            raise WizardClosedError(self.state.status.value)
        if self.state.is_submitting:
            raise WizardBusyError()

    # ── Operations ──────────────────────────────────────────

    def update_field(self, key: str, value: str) -> OrganizationDraft:
        self._ensure_open()
        return self.store.update_field(key, value)

    def update_fields(self, edits: dict[str, str]) -> OrganizationDraft:
        self._ensure_open()
        return self.store.update_fields(edits)

    def validate_current(self) -> ValidationErrors:
        return validate(self.current_step, self.draft, self.plans, self._today())

    def back(self) -> bool:
        """Move one step back. Returns False (no-op) on the first step."""
        self._ensure_open()
        if self.state.current_step_index == 0:
            return False
        self.state.current_step_index -= 1
        return True

    async def next(self) -> bool:
        """Advance one step, or submit on the last step.

        Returns True when the wizard moved forward or completed.
        """
        self._ensure_open()

        if self.is_last_step:
            return await self._submit()

        errors = self.validate_current()
        self.store.set_errors(errors)
        if errors:
            logger.debug(
                "Step %s blocked by %d field error(s)", self.current_step.value, len(errors)
            )
            return False

        self.state.current_step_index = min(self.state.current_step_index + 1, TOTAL_STEPS - 1)
        return True

    def close(self) -> None:
        """Abandon the wizard from any step, discarding the draft."""
        self._ensure_open()
        self.state.status = WizardStatus.ABANDONED
        self.store = FieldStore()
        logger.info("Wizard abandoned")
        if self.on_close:
            self.on_close()

    # ── Submission ──────────────────────────────────────────

    async def _submit(self) -> bool:
        errors = self.validate_current()
        self.store.set_errors(errors)
        if errors:
            return False

        self.state.is_submitting = True
        try:
            result = await self.orchestrator.submit(self.draft)
        except SubmissionError as e:
            logger.warning("Submission failed in %s: %s", e.phase.value, e.reason)
            self.store.attach_organization(e.organization_id)
            self.store.set_errors({SUBMIT_ERROR_KEY: e.user_message})
            return False
        finally:
            self.state.is_submitting = False

        self.store.attach_organization(result.organization_id)
        self.result = result
        self.state.status = WizardStatus.COMPLETED
        if self.on_success:
            self.on_success(result)
        if self.on_close:
            self.on_close()
        return True

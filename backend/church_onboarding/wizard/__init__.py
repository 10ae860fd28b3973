"""Organization onboarding wizard core (no HTTP, no rendering)."""

from church_onboarding.wizard.controller import WizardController, WizardState, WizardStatus  # noqa: F401
from church_onboarding.wizard.draft import (  # noqa: F401
    BillingCycle,
    FieldStore,
    OrganizationDraft,
    ValidationErrors,
)
from church_onboarding.wizard.plans import SubscriptionPlan  # noqa: F401
from church_onboarding.wizard.steps import STEP_SEQUENCE, WizardStep  # noqa: F401
from church_onboarding.wizard.submission import (  # noqa: F401
    SubmissionError,
    SubmissionOrchestrator,
    SubmissionResult,
)
from church_onboarding.wizard.validation import validate  # noqa: F401

"""Ordered step definitions for the organization onboarding wizard.

Steps are a tagged enumeration rather than bare integers; the position of
a step is derived from `STEP_SEQUENCE`, so "current step" can never point
outside the wizard.
"""

from __future__ import annotations

import enum


class WizardStep(str, enum.Enum):
    BASIC = "basic"
    ADDRESS = "address"
    ADMIN = "admin"
    SUBSCRIPTION = "subscription"
    REVIEW = "review"

    @property
    def label(self) -> str:
        return _STEP_META[self][0]

    @property
    def description(self) -> str:
        return _STEP_META[self][1]

    @property
    def fields(self) -> tuple[str, ...]:
        """Draft fields edited on this step (empty for the review step)."""
        return _STEP_META[self][2]


_STEP_META: dict[WizardStep, tuple[str, str, tuple[str, ...]]] = {
    WizardStep.BASIC: (
        "Basic Information",
        "Organization details and contact information",
        ("name", "email", "phone_country_code", "phone_number", "website"),
    ),
    WizardStep.ADDRESS: (
        "Address & Location",
        "Physical address and location details",
        ("address", "city", "state", "country", "zip_code"),
    ),
    WizardStep.ADMIN: (
        "Admin User",
        "Primary administrator account setup",
        (
            "admin_first_name",
            "admin_last_name",
            "admin_email",
            "admin_phone_country_code",
            "admin_phone",
            "admin_password",
        ),
    ),
    WizardStep.SUBSCRIPTION: (
        "Subscription Plan",
        "Choose subscription plan and billing",
        ("plan_id", "billing_cycle", "start_date"),
    ),
    WizardStep.REVIEW: (
        "Review & Create",
        "Review details and create organization",
        (),
    ),
}


STEP_SEQUENCE: tuple[WizardStep, ...] = (
    WizardStep.BASIC,
    WizardStep.ADDRESS,
    WizardStep.ADMIN,
    WizardStep.SUBSCRIPTION,
    WizardStep.REVIEW,
)

TOTAL_STEPS = len(STEP_SEQUENCE)
FIRST_STEP = STEP_SEQUENCE[0]
LAST_STEP = STEP_SEQUENCE[-1]


def step_at(index: int) -> WizardStep:
    if not 0 <= index < TOTAL_STEPS:
        raise IndexError(f"Step index out of range: {index}")
    return STEP_SEQUENCE[index]


def index_of(step: WizardStep) -> int:
    return STEP_SEQUENCE.index(step)


def next_step(step: WizardStep) -> WizardStep:
    """The step after `step`; the last step has no successor and returns itself."""
    return STEP_SEQUENCE[min(index_of(step) + 1, TOTAL_STEPS - 1)]


def previous_step(step: WizardStep) -> WizardStep:
    """The step before `step`; the first step returns itself."""
    return STEP_SEQUENCE[max(index_of(step) - 1, 0)]

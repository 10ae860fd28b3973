import pytest

from church_onboarding.wizard.draft import OrganizationDraft
from church_onboarding.wizard.steps import (
    FIRST_STEP,
    LAST_STEP,
    STEP_SEQUENCE,
    TOTAL_STEPS,
    WizardStep,
    index_of,
    next_step,
    previous_step,
    step_at,
)


@pytest.mark.unit
class TestStepSequence:
    def test_order(self):
        assert STEP_SEQUENCE == (
            WizardStep.BASIC,
            WizardStep.ADDRESS,
            WizardStep.ADMIN,
            WizardStep.SUBSCRIPTION,
            WizardStep.REVIEW,
        )
        assert TOTAL_STEPS == 5
        assert FIRST_STEP is WizardStep.BASIC
        assert LAST_STEP is WizardStep.REVIEW

    def test_labels(self):
        assert [s.label for s in STEP_SEQUENCE] == [
            "Basic Information",
            "Address & Location",
            "Admin User",
            "Subscription Plan",
            "Review & Create",
        ]

    def test_step_at_bounds(self):
        assert step_at(0) is WizardStep.BASIC
        assert step_at(4) is WizardStep.REVIEW
        with pytest.raises(IndexError):
            step_at(5)
        with pytest.raises(IndexError):
            step_at(-1)

    def test_neighbours_are_clamped(self):
        assert previous_step(WizardStep.BASIC) is WizardStep.BASIC
        assert next_step(WizardStep.REVIEW) is WizardStep.REVIEW
        assert next_step(WizardStep.ADMIN) is WizardStep.SUBSCRIPTION
        assert previous_step(WizardStep.ADMIN) is WizardStep.ADDRESS
        assert index_of(WizardStep.SUBSCRIPTION) == 3

    def test_fields_belong_to_one_step(self):
        owned = [f for step in STEP_SEQUENCE for f in step.fields]
        assert len(owned) == len(set(owned))
        assert set(owned) <= set(OrganizationDraft.model_fields)
        assert WizardStep.REVIEW.fields == ()

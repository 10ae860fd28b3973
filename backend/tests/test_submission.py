"""Submission saga: phase ordering, preconditions and compensation."""

import pytest

from church_onboarding.errors import RemoteOperationError
from church_onboarding.wizard.submission import (
    GENERIC_SUBMIT_MESSAGE,
    SubmissionError,
    SubmissionOrchestrator,
    SubmissionPhase,
    SubmissionPreconditionError,
)

from conftest import FakeExecutor


@pytest.mark.submission
@pytest.mark.asyncio
class TestPreconditions:
    async def test_no_plan_no_calls(self, valid_draft):
        executor = FakeExecutor()
        draft = valid_draft.model_copy(update={"plan_id": "", "organization_id": "org-77"})

        with pytest.raises(SubmissionPreconditionError) as exc:
            await SubmissionOrchestrator(executor).submit(draft)

        assert executor.calls == []
        assert exc.value.user_message == GENERIC_SUBMIT_MESSAGE
        assert exc.value.organization_id == "org-77"

    async def test_no_organization_without_provisioning(self, valid_draft):
        executor = FakeExecutor()

        with pytest.raises(SubmissionPreconditionError):
            await SubmissionOrchestrator(executor, provision_organization=False).submit(valid_draft)

        assert executor.calls == []


@pytest.mark.submission
@pytest.mark.asyncio
class TestHappyPath:
    async def test_existing_organization_single_call(self, valid_draft):
        executor = FakeExecutor()
        draft = valid_draft.model_copy(update={"organization_id": "org-77", "start_date": "2030-01-01"})

        result = await SubmissionOrchestrator(executor, provision_organization=True).submit(draft)

        assert executor.operation_names == ["CreateOrganizationSubscription"]
        variables = executor.calls[0][1]
        assert variables["organizationId"] == "org-77"
        assert variables["planId"] == "plan-basic"
        assert variables["input"]["startDate"] == "2030-01-01"
        assert variables["input"]["metadata"] == {
            "adminFirstName": "Ama",
            "adminLastName": "Mensah",
            "adminEmail": "ama@grace.org",
            "adminPhone": "(020) 555-0101",
            "billingCycle": "MONTHLY",
        }
        assert result.subscription_id == "sub-1"
        assert result.provisioned_organization is False

    async def test_provisioning_runs_phases_in_order(self, valid_draft):
        executor = FakeExecutor()

        result = await SubmissionOrchestrator(executor, provision_organization=True).submit(valid_draft)

        assert executor.operation_names == [
            "CreateOrganisation",
            "CreateSuperAdminUser",
            "CreateOrganizationSubscription",
        ]
        org_input = executor.called("CreateOrganisation")[0]["input"]
        assert org_input["name"] == "Grace Chapel"
        assert org_input["phoneNumber"] == "+233 024 123 4567"
        assert org_input["currency"] == "GHS"

        admin = executor.called("CreateSuperAdminUser")[0]
        assert admin["organisationId"] == "org-1"
        assert admin["password"] == "s3cure-pass"

        assert executor.called("CreateOrganizationSubscription")[0]["organizationId"] == "org-1"
        assert result.organization_id == "org-1"
        assert result.phases == [
            SubmissionPhase.CREATE_ORGANISATION,
            SubmissionPhase.CREATE_ADMIN_USER,
            SubmissionPhase.CREATE_SUBSCRIPTION,
        ]

    async def test_blank_start_date_defaults_to_today(self, valid_draft):
        executor = FakeExecutor()
        draft = valid_draft.model_copy(update={"organization_id": "org-77", "start_date": ""})

        await SubmissionOrchestrator(executor).submit(draft)

        assert executor.calls[0][1]["input"]["startDate"]


@pytest.mark.submission
@pytest.mark.asyncio
class TestCompensation:
    async def test_subscription_failure_removes_organisation(self, valid_draft):
        executor = FakeExecutor({
            "CreateOrganizationSubscription": RemoteOperationError("plan rejected"),
        })

        with pytest.raises(SubmissionError) as exc:
            await SubmissionOrchestrator(executor, provision_organization=True).submit(valid_draft)

        assert exc.value.phase is SubmissionPhase.CREATE_SUBSCRIPTION
        assert exc.value.organization_id is None
        assert executor.operation_names[-1] == "RemoveOrganisation"
        assert executor.called("RemoveOrganisation") == [{"id": "org-1"}]

    async def test_admin_failure_removes_organisation(self, valid_draft):
        executor = FakeExecutor({"CreateSuperAdminUser": RuntimeError("duplicate email")})

        with pytest.raises(SubmissionError) as exc:
            await SubmissionOrchestrator(executor, provision_organization=True).submit(valid_draft)

        assert exc.value.phase is SubmissionPhase.CREATE_ADMIN_USER
        assert executor.called("RemoveOrganisation") == [{"id": "org-1"}]
        assert not executor.called("CreateOrganizationSubscription")

    async def test_organisation_failure_needs_no_compensation(self, valid_draft):
        executor = FakeExecutor({"CreateOrganisation": RemoteOperationError("down")})

        with pytest.raises(SubmissionError) as exc:
            await SubmissionOrchestrator(executor, provision_organization=True).submit(valid_draft)

        assert exc.value.organization_id is None
        assert executor.operation_names == ["CreateOrganisation"]

    async def test_failed_compensation_keeps_organization_id(self, valid_draft):
        executor = FakeExecutor({
            "CreateOrganizationSubscription": RemoteOperationError("plan rejected"),
            "RemoveOrganisation": RemoteOperationError("cannot remove"),
        })

        with pytest.raises(SubmissionError) as exc:
            await SubmissionOrchestrator(executor, provision_organization=True).submit(valid_draft)

        assert exc.value.organization_id == "org-1"
        assert exc.value.user_message == GENERIC_SUBMIT_MESSAGE

    async def test_supplied_organization_is_never_removed(self, valid_draft):
        executor = FakeExecutor({
            "CreateOrganizationSubscription": RemoteOperationError("plan rejected"),
        })
        draft = valid_draft.model_copy(update={"organization_id": "org-77"})

        with pytest.raises(SubmissionError) as exc:
            await SubmissionOrchestrator(executor, provision_organization=True).submit(draft)

        assert not executor.called("RemoveOrganisation")
        assert exc.value.organization_id == "org-77"

    @pytest.mark.parametrize("response", [
        {},
        {"createOrganizationSubscription": None},
        {"createOrganizationSubscription": {"status": "ACTIVE"}},
    ])
    async def test_subscription_without_id_is_failure(self, valid_draft, response):
        executor = FakeExecutor({"CreateOrganizationSubscription": response})

        with pytest.raises(SubmissionError):
            await SubmissionOrchestrator(executor, provision_organization=True).submit(valid_draft)

        assert executor.called("RemoveOrganisation") == [{"id": "org-1"}]

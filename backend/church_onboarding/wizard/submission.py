"""Final submission of the onboarding wizard.

Creating a church organization with an active subscription takes dependent
remote calls. They run as a saga over an explicit transaction log:

  1. create organisation + super admin user  (only when the draft has no
     organization_id yet and provisioning is enabled)
  2. create organization subscription        (requires organization_id
     and plan_id; never issued otherwise)

If a later phase fails, every completed phase that owns a compensating
action is undone in reverse order (the organisation created in phase 1 is
removed). An organization_id supplied from outside the wizard is never
compensated.

All failures leave this module as `SubmissionError`, whose
`user_message` is the one generic message shown on the review step.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from church_onboarding.config import settings
from church_onboarding.services import operations
from church_onboarding.services.remote import RemoteExecutor
from church_onboarding.wizard.draft import OrganizationDraft, today_iso

logger = logging.getLogger(__name__)

GENERIC_SUBMIT_MESSAGE = "Failed to create subscription. Please try again."


class SubmissionPhase(str, enum.Enum):
    CREATE_ORGANISATION = "create_organisation"
    CREATE_ADMIN_USER = "create_admin_user"
    CREATE_SUBSCRIPTION = "create_subscription"


class SubmissionError(Exception):
    """A submission phase failed. `organization_id` is the id still live
    remotely after compensation (None when nothing is left behind)."""

    def __init__(
        self,
        phase: SubmissionPhase,
        reason: str,
        organization_id: str | None = None,
    ):
        self.phase = phase
        self.reason = reason
        self.organization_id = organization_id
        self.user_message = GENERIC_SUBMIT_MESSAGE
        super().__init__(f"{phase.value}: {reason}")


class SubmissionPreconditionError(SubmissionError):
    """organization_id or plan_id missing; no remote call was made."""


@dataclass
class CompletedPhase:
    phase: SubmissionPhase
    resource_id: str
    compensate: Callable[[], Awaitable[None]] | None = None


@dataclass
class SubmissionResult:
    organization_id: str
    subscription_id: str
    subscription: dict[str, Any]
    phases: list[SubmissionPhase] = field(default_factory=list)

    @property
    def provisioned_organization(self) -> bool:
        return SubmissionPhase.CREATE_ORGANISATION in self.phases


class SubmissionOrchestrator:
    def __init__(
        self,
        executor: RemoteExecutor,
        provision_organization: bool | None = None,
    ):
        self.executor = executor
        self.provision_organization = (
            settings.provision_organization
            if provision_organization is None
            else provision_organization
        )

    async def submit(self, draft: OrganizationDraft) -> SubmissionResult:
        log: list[CompletedPhase] = []
        organization_id = draft.organization_id

        if not draft.plan_id:
            raise SubmissionPreconditionError(
                SubmissionPhase.CREATE_SUBSCRIPTION,
                "plan_id is not set",
                organization_id=organization_id,
            )

        try:
            if not organization_id and self.provision_organization:
                organization_id = await self._create_organisation(draft, log)
                await self._create_admin_user(draft, organization_id, log)

            if not organization_id:
                raise SubmissionPreconditionError(
                    SubmissionPhase.CREATE_SUBSCRIPTION,
                    "organization_id is not set",
                )

            subscription = await self._create_subscription(draft, organization_id, log)
        except SubmissionError as e:
            e.organization_id = await self._compensate(log, draft.organization_id or organization_id)
            raise

        return SubmissionResult(
            organization_id=organization_id,
            subscription_id=subscription["id"],
            subscription=subscription,
            phases=[entry.phase for entry in log],
        )

    # ── Phases ──────────────────────────────────────────────

    async def _run(
        self,
        phase: SubmissionPhase,
        operation: str,
        variables: dict[str, Any],
        result_key: str,
    ) -> Any:
        """Issue one remote call; any failure becomes SubmissionError."""
        try:
            data = await self.executor.execute(operation, variables)
        except Exception as e:
            logger.exception("Submission phase %s failed", phase.value)
            raise SubmissionError(phase, str(e)) from e

        result = (data or {}).get(result_key)
        if not result:
            logger.warning("Submission phase %s returned no %s", phase.value, result_key)
            raise SubmissionError(phase, f"empty {result_key} response")
        return result

    async def _create_organisation(
        self, draft: OrganizationDraft, log: list[CompletedPhase]
    ) -> str:
        phone = draft.phone_number.strip()
        variables = {
            "input": {
                "name": draft.name.strip(),
                "email": draft.email.strip(),
                "phoneNumber": f"{draft.phone_country_code} {phone}" if phone else "",
                "website": draft.website.strip(),
                "address": draft.address.strip(),
                "city": draft.city.strip(),
                "state": draft.state.strip(),
                "country": draft.country.strip(),
                "zipCode": draft.zip_code.strip(),
                "currency": settings.organisation_currency,
                "timezone": settings.organisation_timezone,
            }
        }
        organisation = await self._run(
            SubmissionPhase.CREATE_ORGANISATION,
            operations.CREATE_ORGANISATION,
            variables,
            "createOrganisation",
        )
        organization_id = organisation.get("id") if isinstance(organisation, dict) else None
        if not organization_id:
            raise SubmissionError(SubmissionPhase.CREATE_ORGANISATION, "response lacks id")

        logger.info("Created organisation %s (%s)", organization_id, draft.name)
        log.append(CompletedPhase(
            phase=SubmissionPhase.CREATE_ORGANISATION,
            resource_id=organization_id,
            compensate=lambda: self._remove_organisation(organization_id),
        ))
        return organization_id

    async def _create_admin_user(
        self, draft: OrganizationDraft, organization_id: str, log: list[CompletedPhase]
    ) -> None:
        variables = {
            "email": draft.admin_email.strip(),
            "password": draft.admin_password,
            "firstName": draft.admin_first_name.strip(),
            "lastName": draft.admin_last_name.strip(),
            "organisationId": organization_id,
        }
        user = await self._run(
            SubmissionPhase.CREATE_ADMIN_USER,
            operations.CREATE_SUPER_ADMIN_USER,
            variables,
            "createSuperAdminUser",
        )
        user_id = user.get("id", "") if isinstance(user, dict) else str(user)
        # Removing the organisation takes its users with it
        log.append(CompletedPhase(phase=SubmissionPhase.CREATE_ADMIN_USER, resource_id=user_id))

    async def _create_subscription(
        self, draft: OrganizationDraft, organization_id: str, log: list[CompletedPhase]
    ) -> dict[str, Any]:
        variables = {
            "organizationId": organization_id,
            "planId": draft.plan_id,
            "input": {
                "startDate": draft.start_date.strip() or today_iso(),
                "metadata": {
                    "adminFirstName": draft.admin_first_name,
                    "adminLastName": draft.admin_last_name,
                    "adminEmail": draft.admin_email,
                    "adminPhone": draft.admin_phone,
                    "billingCycle": draft.billing_cycle,
                },
            },
        }
        subscription = await self._run(
            SubmissionPhase.CREATE_SUBSCRIPTION,
            operations.CREATE_ORGANIZATION_SUBSCRIPTION,
            variables,
            "createOrganizationSubscription",
        )
        if not isinstance(subscription, dict) or not subscription.get("id"):
            raise SubmissionError(SubmissionPhase.CREATE_SUBSCRIPTION, "response lacks id")

        logger.info(
            "Created subscription %s for organisation %s (plan %s)",
            subscription["id"], organization_id, draft.plan_id,
        )
        log.append(CompletedPhase(
            phase=SubmissionPhase.CREATE_SUBSCRIPTION,
            resource_id=subscription["id"],
        ))
        return subscription

    # ── Compensation ────────────────────────────────────────

    async def _remove_organisation(self, organization_id: str) -> None:
        await self.executor.execute(operations.REMOVE_ORGANISATION, {"id": organization_id})

    async def _compensate(
        self, log: list[CompletedPhase], organization_id: str | None
    ) -> str | None:
        """Undo completed phases in reverse. Returns the organization id
        that still exists remotely afterwards, if any."""
        remaining = organization_id
        for entry in reversed(log):
            if entry.compensate is None:
                continue
            try:
                await entry.compensate()
            except Exception:
                logger.exception(
                    "Compensation for %s %s failed; resource left in place",
                    entry.phase.value, entry.resource_id,
                )
                continue
            logger.info("Compensated %s %s", entry.phase.value, entry.resource_id)
            if entry.phase == SubmissionPhase.CREATE_ORGANISATION:
                remaining = None
        return remaining

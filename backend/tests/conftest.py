"""Pytest configuration and fixtures for the onboarding service tests.

Provides a scripted fake of the GraphQL remote layer, ready-made drafts,
and an HTTP client wired to the FastAPI app with dependencies overridden.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from church_onboarding.config import settings

# No Redis in the unit suite
settings.cache_enabled = False

from church_onboarding.auth.jwt import create_access_token  # noqa: E402
from church_onboarding.main import app  # noqa: E402
from church_onboarding.services.remote import get_remote_executor, operation_name  # noqa: E402
from church_onboarding.wizard.controller import WizardController  # noqa: E402
from church_onboarding.wizard.draft import OrganizationDraft  # noqa: E402
from church_onboarding.wizard.plans import SubscriptionPlan  # noqa: E402
from church_onboarding.wizard.sessions import WizardSessionStore, get_session_store  # noqa: E402
from church_onboarding.wizard.submission import SubmissionOrchestrator  # noqa: E402


# ── Fake remote layer ────────────────────────────────────────

PLAN_RECORDS = [
    {
        "id": "plan-basic",
        "name": "Basic",
        "currency": "GHS",
        "amount": 150.0,
        "interval": "MONTHLY",
        "features": ["Members", "Attendance"],
        "isActive": True,
    },
    {
        "id": "plan-premium",
        "name": "Premium",
        "currency": "GHS",
        "amount": 450.0,
        "interval": "MONTHLY",
        "features": ["Members", "Attendance", "Finance"],
        "isActive": True,
    },
    {
        "id": "plan-legacy",
        "name": "Legacy",
        "currency": "GHS",
        "amount": 99.0,
        "features": None,
        "isActive": False,
    },
]


class FakeExecutor:
    """Scripted stand-in for the GraphQL client.

    `responses` maps operation names (e.g. "CreateOrganisation") to a data
    dict, an exception instance to raise, or a callable taking variables.
    Every call is recorded in `calls` as (operation_name, variables).
    """

    def __init__(self, responses: dict | None = None):
        self.responses = {
            "GetSubscriptionPlans": {"subscriptionPlans": PLAN_RECORDS},
            "CreateOrganisation": {"createOrganisation": {"id": "org-1", "name": "Grace Chapel"}},
            "CreateSuperAdminUser": {"createSuperAdminUser": {"id": "user-1"}},
            "CreateOrganizationSubscription": {
                "createOrganizationSubscription": {"id": "sub-1", "status": "ACTIVE"}
            },
            "RemoveOrganisation": {"removeOrganisation": True},
        }
        self.responses.update(responses or {})
        self.calls: list[tuple[str, dict]] = []

    async def execute(self, operation: str, variables: dict | None = None) -> dict:
        name = operation_name(operation)
        self.calls.append((name, variables or {}))
        response = self.responses.get(name)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(variables or {})
        return response or {}

    def called(self, name: str) -> list[dict]:
        return [variables for op, variables in self.calls if op == name]

    @property
    def operation_names(self) -> list[str]:
        return [op for op, _ in self.calls]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def plans() -> list[SubscriptionPlan]:
    return [SubscriptionPlan.model_validate(r) for r in PLAN_RECORDS if r["isActive"]]


# ── Draft fixtures ───────────────────────────────────────────

VALID_FIELDS = {
    "name": "Grace Chapel",
    "email": "info@grace.org",
    "phone_number": "024 123 4567",
    "website": "https://grace.org",
    "address": "12 Independence Ave",
    "city": "Accra",
    "state": "Greater Accra",
    "country": "Ghana",
    "zip_code": "GA-123",
    "admin_first_name": "Ama",
    "admin_last_name": "Mensah",
    "admin_email": "ama@grace.org",
    "admin_phone": "(020) 555-0101",
    "admin_password": "s3cure-pass",
    "plan_id": "plan-basic",
    "billing_cycle": "MONTHLY",
}


@pytest.fixture
def valid_draft() -> OrganizationDraft:
    return OrganizationDraft(**VALID_FIELDS)


def make_controller(
    executor,
    draft: OrganizationDraft | None = None,
    plans: list[SubscriptionPlan] | None = None,
    provision_organization: bool = True,
    **callbacks,
) -> WizardController:
    return WizardController(
        orchestrator=SubmissionOrchestrator(executor, provision_organization=provision_organization),
        plans=plans,
        draft=draft,
        **callbacks,
    )


async def advance_to_review(controller: WizardController) -> None:
    while not controller.is_last_step:
        assert await controller.next(), controller.errors


# ── HTTP fixtures ────────────────────────────────────────────

@pytest.fixture
def session_store() -> WizardSessionStore:
    return WizardSessionStore(ttl_seconds=3600)


@pytest_asyncio.fixture
async def client(fake_executor, session_store) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the remote layer and session store overridden."""
    app.dependency_overrides[get_remote_executor] = lambda: fake_executor
    app.dependency_overrides[get_session_store] = lambda: session_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    token = create_access_token(
        user_id="user-admin",
        role="subscription_manager",
        permissions=["organizations.create", "organizations.read", "subscriptions.read"],
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def viewer_headers() -> dict:
    token = create_access_token(
        user_id="user-viewer",
        role="viewer",
        permissions=["organizations.read", "subscriptions.read"],
    )
    return {"Authorization": f"Bearer {token}"}

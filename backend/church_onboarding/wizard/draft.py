"""The organization draft and the field store that edits it.

`OrganizationDraft` is immutable: every edit produces a new draft via
`model_copy(update=...)`, so callers can compare before/after values
without worrying about another step having mutated a shared object.

Field names are snake_case in Python; `to_camel` aliases are used on the
wire (`adminFirstName`, `planId`, ...), matching the dashboard's GraphQL
variables.
"""

from __future__ import annotations

import enum
from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from church_onboarding.config import settings
from church_onboarding.errors import UnknownFieldError

# Reserved error key for the aggregated submission failure
SUBMIT_ERROR_KEY = "submit"

ValidationErrors = dict[str, str]


class BillingCycle(str, enum.Enum):
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


def today_iso() -> str:
    return date.today().isoformat()


class OrganizationDraft(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # Basic information
    name: str = ""
    email: str = ""
    phone_country_code: str = Field(default_factory=lambda: settings.default_phone_country_code)
    phone_number: str = ""
    website: str = ""

    # Address & location
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = Field(default_factory=lambda: settings.default_country)
    zip_code: str = ""

    # Admin user
    admin_first_name: str = ""
    admin_last_name: str = ""
    admin_email: str = ""
    admin_phone_country_code: str = Field(default_factory=lambda: settings.default_phone_country_code)
    admin_phone: str = ""
    admin_password: str = ""

    # Subscription plan
    plan_id: str = ""
    billing_cycle: str = BillingCycle.MONTHLY.value
    start_date: str = Field(default_factory=today_iso)

    # Set once the organization exists remotely (pre-supplied or phase 1)
    organization_id: str | None = None


DRAFT_FIELDS: frozenset[str] = frozenset(OrganizationDraft.model_fields)
READ_ONLY_FIELDS: frozenset[str] = frozenset({"organization_id"})
EDITABLE_FIELDS: frozenset[str] = DRAFT_FIELDS - READ_ONLY_FIELDS

_ALIASES: dict[str, str] = {
    to_camel(name): name for name in OrganizationDraft.model_fields
}


def resolve_field(key: str) -> str:
    """Map a snake_case name or camelCase alias to the draft field name."""
    name = _ALIASES.get(key, key)
    if name not in EDITABLE_FIELDS:
        raise UnknownFieldError(key)
    return name


class FieldStore:
    """Holds the current draft and the active per-field error map.

    Writes are never validated; an edit only ever clears the error recorded
    for the field being edited.
    """

    def __init__(self, draft: OrganizationDraft | None = None):
        self._draft = draft or OrganizationDraft()
        self._errors: ValidationErrors = {}

    @property
    def draft(self) -> OrganizationDraft:
        return self._draft

    @property
    def errors(self) -> ValidationErrors:
        return dict(self._errors)

    def get(self, key: str) -> str | None:
        name = _ALIASES.get(key, key)
        if name not in DRAFT_FIELDS:
            raise UnknownFieldError(key)
        return getattr(self._draft, name)

    def update_field(self, key: str, value: str) -> OrganizationDraft:
        return self.update_fields({key: value})

    def update_fields(self, edits: dict[str, str]) -> OrganizationDraft:
        """Apply several edits as one update. Every key is resolved first,
        so an unknown key leaves the draft untouched."""
        update = {resolve_field(key): value for key, value in edits.items()}
        self._draft = self._draft.model_copy(update=update)
        for name in update:
            self._errors.pop(name, None)
        return self._draft

    def set_errors(self, errors: ValidationErrors) -> None:
        self._errors = dict(errors)

    def attach_organization(self, organization_id: str | None) -> OrganizationDraft:
        """Record (or clear) the remote organization id. Not a user edit."""
        self._draft = self._draft.model_copy(update={"organization_id": organization_id})
        return self._draft

"""Per-step validation for the onboarding wizard.

`validate(step, draft)` is pure: it reads the draft and returns a map of
field name -> message. An empty map means the step may be left. Nothing
here raises for invalid input; errors are data that block navigation.

Rules by step:
  BASIC         name, email (shape), phone (optional), website (optional)
  ADDRESS       address, city, state, country
  ADMIN         first/last name, email (shape), phone (optional),
                password (min 8 chars)
  SUBSCRIPTION  plan (and membership in the catalogue when one is given),
                billing cycle, start date not in the past
  REVIEW        nothing
"""

from __future__ import annotations

import re
from datetime import date
from typing import Callable

from church_onboarding.wizard.draft import BillingCycle, OrganizationDraft, ValidationErrors
from church_onboarding.wizard.plans import SubscriptionPlan, find_plan
from church_onboarding.wizard.steps import WizardStep

# Regex patterns
EMAIL_REGEX = re.compile(r"\S+@\S+\.\S+")
PHONE_CHARS_REGEX = re.compile(r"^[\d\s\-\(\)]+$")
NON_DIGIT_REGEX = re.compile(r"\D")
WEBSITE_REGEX = re.compile(r"^(https?://)?[^\s/?#]+\.[^\s/?#]{2,}(/\S*)?$", re.IGNORECASE)

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 12
PASSWORD_MIN_LENGTH = 8


def validate_email_shape(value: str, required_message: str) -> str | None:
    if not value.strip():
        return required_message
    if not EMAIL_REGEX.search(value):
        return "Please enter a valid email address"
    return None


def validate_phone_number(phone: str) -> str | None:
    """Optional phone check: 7-12 digits once formatting is stripped."""
    if not phone.strip():
        return None

    digits = NON_DIGIT_REGEX.sub("", phone)
    if len(digits) < PHONE_MIN_DIGITS or len(digits) > PHONE_MAX_DIGITS:
        return f"Phone number must be between {PHONE_MIN_DIGITS}-{PHONE_MAX_DIGITS} digits"

    if not PHONE_CHARS_REGEX.match(phone):
        return "Phone number contains invalid characters"

    return None


def validate_website(website: str) -> str | None:
    if not website.strip():
        return None
    if not WEBSITE_REGEX.match(website.strip()):
        return "Please enter a valid website address"
    return None


def validate_start_date(value: str, today: date) -> str | None:
    if not value.strip():
        return None  # defaults to today at submission
    try:
        start = date.fromisoformat(value.strip())
    except ValueError:
        return "Please enter a valid start date (YYYY-MM-DD)"
    if start < today:
        return "Start date cannot be in the past"
    return None


def _require(errors: ValidationErrors, draft: OrganizationDraft, field: str, message: str) -> None:
    if not getattr(draft, field).strip():
        errors[field] = message


def _validate_basic(draft, plans, today) -> ValidationErrors:
    errors: ValidationErrors = {}
    _require(errors, draft, "name", "Organization name is required")

    email_error = validate_email_shape(draft.email, "Email address is required")
    if email_error:
        errors["email"] = email_error

    phone_error = validate_phone_number(draft.phone_number)
    if phone_error:
        errors["phone_number"] = phone_error

    website_error = validate_website(draft.website)
    if website_error:
        errors["website"] = website_error
    return errors


def _validate_address(draft, plans, today) -> ValidationErrors:
    errors: ValidationErrors = {}
    _require(errors, draft, "address", "Address is required")
    _require(errors, draft, "city", "City is required")
    _require(errors, draft, "state", "State/Region is required")
    _require(errors, draft, "country", "Country is required")
    return errors


def _validate_admin(draft, plans, today) -> ValidationErrors:
    errors: ValidationErrors = {}
    _require(errors, draft, "admin_first_name", "First name is required")
    _require(errors, draft, "admin_last_name", "Last name is required")

    email_error = validate_email_shape(draft.admin_email, "Admin email is required")
    if email_error:
        errors["admin_email"] = email_error

    phone_error = validate_phone_number(draft.admin_phone)
    if phone_error:
        errors["admin_phone"] = phone_error

    if not draft.admin_password.strip():
        errors["admin_password"] = "Password is required"
    elif len(draft.admin_password) < PASSWORD_MIN_LENGTH:
        errors["admin_password"] = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    return errors


def _validate_subscription(draft, plans, today) -> ValidationErrors:
    errors: ValidationErrors = {}
    if not draft.plan_id.strip():
        errors["plan_id"] = "Please select a subscription plan"
    elif plans and find_plan(plans, draft.plan_id) is None:
        errors["plan_id"] = "Selected plan is not available"

    if draft.billing_cycle not in {c.value for c in BillingCycle}:
        errors["billing_cycle"] = "Please select a billing cycle"

    start_error = validate_start_date(draft.start_date, today)
    if start_error:
        errors["start_date"] = start_error
    return errors


def _validate_review(draft, plans, today) -> ValidationErrors:
    return {}


_VALIDATORS: dict[WizardStep, Callable[..., ValidationErrors]] = {
    WizardStep.BASIC: _validate_basic,
    WizardStep.ADDRESS: _validate_address,
    WizardStep.ADMIN: _validate_admin,
    WizardStep.SUBSCRIPTION: _validate_subscription,
    WizardStep.REVIEW: _validate_review,
}


def validate(
    step: WizardStep,
    draft: OrganizationDraft,
    plans: list[SubscriptionPlan] | None = None,
    today: date | None = None,
) -> ValidationErrors:
    """Validate the fields owned by `step`. Returns an empty dict when valid."""
    return _VALIDATORS[step](draft, plans, today or date.today())

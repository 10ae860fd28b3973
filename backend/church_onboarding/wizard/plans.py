"""Subscription plans offered on the plan-selection step.

The wizard never fetches plans itself; callers hand it the list (see
`church_onboarding.services.plans` for the remote lookup).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SubscriptionPlan(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    currency: str = "GHS"
    amount: float = 0.0
    interval: str | None = None
    description: str | None = None
    features: list[str] = Field(default_factory=list)
    trial_period_days: int | None = None
    is_active: bool = True

    @field_validator("features", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []


def find_plan(plans: list[SubscriptionPlan] | None, plan_id: str) -> SubscriptionPlan | None:
    if not plans or not plan_id:
        return None
    for plan in plans:
        if plan.id == plan_id:
            return plan
    return None

"""Subscription plan lookup for the plan-selection step."""

import logging

from pydantic import ValidationError

from church_onboarding.config import settings
from church_onboarding.services import operations
from church_onboarding.services.remote import RemoteExecutor
from church_onboarding.utils.cache import cached, invalidate_cache
from church_onboarding.wizard.plans import SubscriptionPlan

logger = logging.getLogger(__name__)

PLAN_CACHE_PREFIX = "plans"


@cached(ttl=settings.plan_cache_ttl_seconds, prefix=PLAN_CACHE_PREFIX)
async def _fetch_plan_records(executor: RemoteExecutor) -> list[dict]:
    data = await executor.execute(operations.GET_SUBSCRIPTION_PLANS, {"filter": {"isActive": True}})
    records = data.get("subscriptionPlans") or []
    logger.info("Fetched %d subscription plan(s)", len(records))
    return records


async def fetch_subscription_plans(
    executor: RemoteExecutor,
    refresh: bool = False,
) -> list[SubscriptionPlan]:
    """Active plans, served from cache unless `refresh` is set."""
    if refresh and settings.cache_enabled:
        await invalidate_cache(f"{PLAN_CACHE_PREFIX}:*")
    plans = []
    for record in await _fetch_plan_records(executor):
        try:
            plan = SubscriptionPlan.model_validate(record)
        except ValidationError as e:
            logger.warning("Skipping malformed plan record: %s", e)
            continue
        if plan.is_active:
            plans.append(plan)
    return plans

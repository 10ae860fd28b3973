from fastapi import APIRouter, Depends

from church_onboarding.auth.deps import require_permission
from church_onboarding.auth.permissions import PermissionSet
from church_onboarding.services.plans import fetch_subscription_plans
from church_onboarding.services.remote import RemoteExecutor, get_remote_executor
from church_onboarding.wizard.plans import SubscriptionPlan

router = APIRouter()


@router.get("/", response_model=list[SubscriptionPlan], response_model_by_alias=False)
async def list_plans(
    refresh: bool = False,
    executor: RemoteExecutor = Depends(get_remote_executor),
    _: PermissionSet = Depends(require_permission("subscriptions.read")),
):
    """Active subscription plans for the plan-selection step."""
    return await fetch_subscription_plans(executor, refresh=refresh)

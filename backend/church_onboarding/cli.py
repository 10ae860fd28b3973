"""Management CLI for the onboarding service.

Usage:
    python -m church_onboarding.cli list-plans   # Active plans from the GraphQL API
    python -m church_onboarding.cli steps        # Wizard steps and the fields they own
"""

import asyncio
import sys

from church_onboarding.errors import RemoteOperationError
from church_onboarding.services.plans import fetch_subscription_plans
from church_onboarding.services.remote import get_remote_executor
from church_onboarding.wizard.steps import STEP_SEQUENCE


async def _list_plans() -> int:
    try:
        plans = await fetch_subscription_plans(get_remote_executor())
    except RemoteOperationError as e:
        print(f"  FAILED: {e.message}")
        return 1

    for plan in plans:
        interval = f"/{plan.interval.lower()}" if plan.interval else ""
        print(f"  {plan.id:<24} {plan.name:<24} {plan.currency} {plan.amount:,.2f}{interval}")
    print(f"\n{len(plans)} plan(s)")
    return 0


def list_plans() -> int:
    return asyncio.run(_list_plans())


def list_steps() -> int:
    for index, step in enumerate(STEP_SEQUENCE, start=1):
        print(f"  {index}. {step.label}")
        for field in step.fields:
            print(f"       - {field}")
    return 0


if __name__ == "__main__":
    cmd = sys.argv[1] if len(sys.argv) > 1 else ""
    if cmd == "list-plans":
        sys.exit(list_plans())
    elif cmd == "steps":
        sys.exit(list_steps())
    else:
        print("Usage: python -m church_onboarding.cli [list-plans|steps]")
        sys.exit(2)

"""Plan catalog: quotas, store product ids and entitlement priority."""

from typing import Final

from src.roomsync.models.enums import SubscriptionPlan

PRODUCT_ID_PREFIX: Final[str] = "com.zthreesolutions.tolerancetracker"

SUPER_ADMIN_QUOTA: Final[int] = 999

PLAN_QUOTAS: Final[dict[SubscriptionPlan, int]] = {
    SubscriptionPlan.NONE: 0,
    SubscriptionPlan.ROOM_01: 1,
    SubscriptionPlan.ROOM_02: 2,
    SubscriptionPlan.ROOM_03: 3,
    SubscriptionPlan.ROOM_04: 4,
    SubscriptionPlan.ROOM_05: 5,
    SubscriptionPlan.SUPER_ADMIN: SUPER_ADMIN_QUOTA,
}

PLAN_DISPLAY_NAMES: Final[dict[SubscriptionPlan, str]] = {
    SubscriptionPlan.NONE: "No Plan",
    SubscriptionPlan.ROOM_01: "1 Room Plan",
    SubscriptionPlan.ROOM_02: "2 Room Plan",
    SubscriptionPlan.ROOM_03: "3 Room Plan",
    SubscriptionPlan.ROOM_04: "4 Room Plan",
    SubscriptionPlan.ROOM_05: "5 Room Plan",
    SubscriptionPlan.SUPER_ADMIN: "Super Admin",
}

# Highest tier first: when several entitlements are active the first match wins.
ENTITLEMENT_PRIORITY: Final[tuple[tuple[str, SubscriptionPlan], ...]] = (
    ("5_room_access", SubscriptionPlan.ROOM_05),
    ("4_room_access", SubscriptionPlan.ROOM_04),
    ("3_room_access", SubscriptionPlan.ROOM_03),
    ("2_room_access", SubscriptionPlan.ROOM_02),
    ("1_room_access", SubscriptionPlan.ROOM_01),
)

PURCHASABLE_PLANS: Final[tuple[SubscriptionPlan, ...]] = (
    SubscriptionPlan.ROOM_01,
    SubscriptionPlan.ROOM_02,
    SubscriptionPlan.ROOM_03,
    SubscriptionPlan.ROOM_04,
    SubscriptionPlan.ROOM_05,
)


def quota_for(plan: SubscriptionPlan) -> int:
    return PLAN_QUOTAS[plan]


def display_name(plan: SubscriptionPlan) -> str:
    return PLAN_DISPLAY_NAMES[plan]


def product_id_for(plan: SubscriptionPlan) -> str | None:
    """Store product id, e.g. ``com.zthreesolutions.tolerancetracker.room03``."""
    if plan not in PURCHASABLE_PLANS:
        return None
    return f"{PRODUCT_ID_PREFIX}.room{plan.value[-2:]}"


def plan_for_product(product_id: str) -> SubscriptionPlan | None:
    for plan in PURCHASABLE_PLANS:
        if product_id_for(plan) == product_id:
            return plan
    return None


def plan_for_entitlements(entitlements: set[str] | frozenset[str]) -> SubscriptionPlan | None:
    """Map active entitlements to the highest-priority plan, or None if none match."""
    for entitlement, plan in ENTITLEMENT_PRIORITY:
        if entitlement in entitlements:
            return plan
    return None

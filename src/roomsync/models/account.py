"""Account directory models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.roomsync.models.base import utc_now
from src.roomsync.models.enums import SubscriptionPlan
from src.roomsync.models.plans import quota_for


class AuthMapping(SQLModel, table=True):
    """External identity subject (encoded) -> internal account id.

    No foreign key to accounts: the mapping is written before the account
    and may dangle if the second write fails.
    """

    __tablename__ = "auth_mappings"

    encoded_subject_id: str = Field(primary_key=True, max_length=255)
    account_id: UUID = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)


class Account(SQLModel, table=True):
    """Application-level user and its subscription state."""

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    email: str | None = Field(default=None, max_length=255)
    auth_subject_id: str | None = Field(default=None, max_length=255, index=True)

    # Subscription state
    subscription_plan: str = Field(default=SubscriptionPlan.NONE.value, max_length=20)
    room_quota: int = Field(default=0)
    has_active_entitlement: bool = Field(default=False)
    grace_period_end: datetime | None = Field(default=None, index=True)
    is_in_grace_period: bool = Field(default=False, index=True)

    is_super_admin: bool = Field(default=False)
    super_admin_activated_at: datetime | None = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def plan(self) -> SubscriptionPlan:
        return SubscriptionPlan(self.subscription_plan)

    def apply_plan(self, plan: SubscriptionPlan) -> None:
        """Set the plan and its derived quota together."""
        self.subscription_plan = plan.value
        self.room_quota = quota_for(plan)
        self.updated_at = utc_now()

    def clear_grace_period(self) -> None:
        self.grace_period_end = None
        self.is_in_grace_period = False
        self.updated_at = utc_now()

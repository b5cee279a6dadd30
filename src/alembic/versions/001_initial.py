"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-16 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # 1. Directory: sign-in mappings and accounts
    op.create_table(
        "auth_mappings",
        sa.Column(
            "encoded_subject_id", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False
        ),
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("encoded_subject_id"),
    )
    op.create_index("ix_auth_mappings_account_id", "auth_mappings", ["account_id"], unique=False)

    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("auth_subject_id", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column(
            "subscription_plan",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="none",
        ),
        sa.Column("room_quota", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "has_active_entitlement", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("grace_period_end", sa.DateTime(), nullable=True),
        sa.Column(
            "is_in_grace_period", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("is_super_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("super_admin_activated_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_accounts_auth_subject_id", "accounts", ["auth_subject_id"], unique=False)
    op.create_index("ix_accounts_grace_period_end", "accounts", ["grace_period_end"], unique=False)
    op.create_index(
        "ix_accounts_is_in_grace_period", "accounts", ["is_in_grace_period"], unique=False
    )

    # 2. Ledger: rooms, member lists and per-account access
    op.create_table(
        "rooms",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rooms_owner_id", "rooms", ["owner_id"], unique=False)

    op.create_table(
        "room_members",
        sa.Column("room_id", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("room_id", "account_id"),
    )
    op.create_index("ix_room_members_account_id", "room_members", ["account_id"], unique=False)

    op.create_table(
        "room_access",
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("via_super_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("legacy", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.PrimaryKeyConstraint("account_id", "room_id"),
    )
    op.create_index("ix_room_access_room_id", "room_access", ["room_id"], unique=False)

    # 3. Join codes
    op.create_table(
        "invitations",
        sa.Column("code", sqlmodel.sql.sqltypes.AutoString(length=16), nullable=False),
        sa.Column("room_id", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column(
            "status",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="created",
        ),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("phone_number", sqlmodel.sql.sqltypes.AutoString(length=32), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("accepted_by", sa.Uuid(), nullable=True),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("code"),
    )
    op.create_index("ix_invitations_room_id", "invitations", ["room_id"], unique=False)

    op.create_table(
        "demo_room_codes",
        sa.Column("room_id", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("code", sqlmodel.sql.sqltypes.AutoString(length=16), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("room_name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("room_id"),
    )
    op.create_index("ix_demo_room_codes_code", "demo_room_codes", ["code"], unique=True)

    # 4. Ownership transfers
    op.create_table(
        "transfer_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("room_name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("initiator_id", sa.Uuid(), nullable=False),
        sa.Column("recipient_id", sa.Uuid(), nullable=False),
        sa.Column("new_owner_id", sa.Uuid(), nullable=False),
        sa.Column(
            "status",
            sqlmodel.sql.sqltypes.AutoString(length=40),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transfer_requests_room_id", "transfer_requests", ["room_id"], unique=False)
    op.create_index(
        "ix_transfer_requests_initiator_id", "transfer_requests", ["initiator_id"], unique=False
    )
    op.create_index(
        "ix_transfer_requests_recipient_id", "transfer_requests", ["recipient_id"], unique=False
    )


def downgrade() -> None:
    op.drop_table("transfer_requests")
    op.drop_table("demo_room_codes")
    op.drop_table("invitations")
    op.drop_table("room_access")
    op.drop_table("room_members")
    op.drop_table("rooms")
    op.drop_table("accounts")
    op.drop_table("auth_mappings")

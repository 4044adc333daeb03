"""Initial schema for the doctor administration service.

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Running ``alembic upgrade head`` on a clean database applies the entire
schema in one step.

Tables created
--------------
- users            : Back-office accounts (admin, operational, user)
- doctors          : Registry of reviewed practitioners (optimistic ``version``)
- pending_doctors  : Applications awaiting review
- suspensions      : Suspension history per doctor (cascade on doctor delete)
- blacklist        : Credential snapshots barred from the registry
- admin_activities : Append-only audit trail
- notifications    : Dashboard alerts

Enum columns are stored as VARCHAR holding the member value, so adding a
member never needs a type migration.

Seed data
---------
- Initial admin user: controlled by SEED_ADMIN_PHONE / SEED_ADMIN_EMAIL.
"""
from __future__ import annotations

import os as _os
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_CREDENTIAL_LISTS = (
    "specializations",
    "licenses",
    "medical_degrees",
    "residencies",
    "fellowships",
    "board_certifications",
    "hospital_affiliations",
    "memberships",
    "languages",
)


def _profile_columns() -> list[sa.Column]:
    """Columns shared by ``doctors`` and ``pending_doctors``."""
    columns = [sa.Column("name", sa.String(200), nullable=False)]
    columns += [sa.Column(name, sa.JSON(), nullable=False) for name in _CREDENTIAL_LISTS]
    columns += [
        sa.Column("about", sa.Text(), nullable=True),
        sa.Column("experience", sa.String(255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("education", sa.Text(), nullable=True),
        sa.Column("dea_registration", sa.String(100), nullable=True),
        sa.Column("malpractice_insurance", sa.String(255), nullable=True),
        sa.Column("consultation_fee", sa.Float(), nullable=True),
    ]
    return columns


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # =======================================================================
    # users
    # =======================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("phone", sa.String(20), nullable=False, comment="Phone number with country code"),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_phone", "users", ["phone"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_is_active", "users", ["is_active"])
    op.create_index("ix_users_role_active", "users", ["role", "is_active"])

    # =======================================================================
    # doctors
    # =======================================================================
    op.create_table(
        "doctors",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        *_profile_columns(),
        sa.Column("department", sa.String(150), nullable=True),
        sa.Column("no_of_patients", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(16), nullable=False, server_default="approved"),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("verification_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sentiment", sa.String(16), nullable=False, server_default="positive"),
        sa.Column("sentiment_score", sa.Float(), nullable=False, server_default="0.8"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_doctors_email", "doctors", ["email"], unique=True)
    op.create_index("ix_doctors_phone", "doctors", ["phone"], unique=True)
    op.create_index("ix_doctors_status", "doctors", ["status"])
    op.create_index("ix_doctors_status_sentiment", "doctors", ["status", "sentiment"])

    # =======================================================================
    # pending_doctors
    # =======================================================================
    op.create_table(
        "pending_doctors",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        *_profile_columns(),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_pending_doctors_email", "pending_doctors", ["email"])
    op.create_index("ix_pending_doctors_phone", "pending_doctors", ["phone"])
    op.create_index("ix_pending_doctors_status", "pending_doctors", ["status"])

    # =======================================================================
    # suspensions
    # =======================================================================
    op.create_table(
        "suspensions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column(
            "doctor_id",
            sa.String(36),
            sa.ForeignKey("doctors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("reason", sa.String(255), nullable=False),
        sa.Column("detail", sa.Text(), nullable=True),
        sa.Column("suspension_type", sa.String(16), nullable=False, server_default="temporary"),
        sa.Column("severity", sa.String(16), nullable=False, server_default="major"),
        sa.Column("duration_days", sa.Integer(), nullable=True, comment="NULL means indefinite"),
        sa.Column("starts_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("suspended_by", sa.String(255), nullable=True),
        sa.Column("revoked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_suspensions_doctor_id", "suspensions", ["doctor_id"])
    op.create_index("ix_suspensions_doctor_revoked", "suspensions", ["doctor_id", "revoked"])

    # =======================================================================
    # blacklist
    # =======================================================================
    op.create_table(
        "blacklist",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("reason", sa.String(32), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("licenses", sa.JSON(), nullable=False),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("original_entity_type", sa.String(16), nullable=True),
        sa.Column("original_entity_id", sa.String(36), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("rejection_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("blacklisted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_blacklist_reason", "blacklist", ["reason"])
    op.create_index("ix_blacklist_email", "blacklist", ["email"])
    op.create_index("ix_blacklist_phone", "blacklist", ["phone"])
    op.create_index("ix_blacklist_is_active", "blacklist", ["is_active"])
    op.create_index("ix_blacklist_reason_active", "blacklist", ["reason", "is_active"])

    # =======================================================================
    # admin_activities
    # =======================================================================
    op.create_table(
        "admin_activities",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("admin_id", sa.String(64), nullable=False),
        sa.Column("admin_name", sa.String(255), nullable=False),
        sa.Column("admin_role", sa.String(20), nullable=False),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admin_activities_admin_id", "admin_activities", ["admin_id"])
    op.create_index("ix_admin_activities_action", "admin_activities", ["action"])
    op.create_index("ix_admin_activities_created_at", "admin_activities", ["created_at"])
    op.create_index("ix_admin_activities_admin_created", "admin_activities", ["admin_id", "created_at"])

    # =======================================================================
    # notifications
    # =======================================================================
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default="info"),
        sa.Column("category", sa.String(16), nullable=False, server_default="system"),
        sa.Column("priority", sa.String(16), nullable=False, server_default="medium"),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("related_entity_id", sa.String(36), nullable=True),
        sa.Column("related_entity_type", sa.String(50), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_category", "notifications", ["category"])
    op.create_index("ix_notifications_read", "notifications", ["read"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])

    # =======================================================================
    # SEED: initial admin user
    # =======================================================================
    users = sa.table(
        "users",
        sa.column("phone", sa.String),
        sa.column("email", sa.String),
        sa.column("role", sa.String),
        sa.column("is_active", sa.Boolean),
    )
    op.bulk_insert(
        users,
        [
            {
                "phone": _os.environ.get("SEED_ADMIN_PHONE", "+910000000000"),
                "email": _os.environ.get("SEED_ADMIN_EMAIL", "admin@example.com"),
                "role": "admin",
                "is_active": True,
            }
        ],
    )


def downgrade() -> None:
    """Drop everything in reverse dependency order."""
    op.drop_index("ix_notifications_created_at", table_name="notifications")
    op.drop_index("ix_notifications_read", table_name="notifications")
    op.drop_index("ix_notifications_category", table_name="notifications")
    op.drop_table("notifications")

    op.drop_index("ix_admin_activities_admin_created", table_name="admin_activities")
    op.drop_index("ix_admin_activities_created_at", table_name="admin_activities")
    op.drop_index("ix_admin_activities_action", table_name="admin_activities")
    op.drop_index("ix_admin_activities_admin_id", table_name="admin_activities")
    op.drop_table("admin_activities")

    op.drop_index("ix_blacklist_reason_active", table_name="blacklist")
    op.drop_index("ix_blacklist_is_active", table_name="blacklist")
    op.drop_index("ix_blacklist_phone", table_name="blacklist")
    op.drop_index("ix_blacklist_email", table_name="blacklist")
    op.drop_index("ix_blacklist_reason", table_name="blacklist")
    op.drop_table("blacklist")

    op.drop_index("ix_suspensions_doctor_revoked", table_name="suspensions")
    op.drop_index("ix_suspensions_doctor_id", table_name="suspensions")
    op.drop_table("suspensions")

    op.drop_index("ix_pending_doctors_status", table_name="pending_doctors")
    op.drop_index("ix_pending_doctors_phone", table_name="pending_doctors")
    op.drop_index("ix_pending_doctors_email", table_name="pending_doctors")
    op.drop_table("pending_doctors")

    op.drop_index("ix_doctors_status_sentiment", table_name="doctors")
    op.drop_index("ix_doctors_status", table_name="doctors")
    op.drop_index("ix_doctors_phone", table_name="doctors")
    op.drop_index("ix_doctors_email", table_name="doctors")
    op.drop_table("doctors")

    op.drop_index("ix_users_role_active", table_name="users")
    op.drop_index("ix_users_is_active", table_name="users")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_phone", table_name="users")
    op.drop_table("users")

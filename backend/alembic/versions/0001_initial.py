"""Initial schema: grades, employees, rules, wallets, requests, holidays, audit log.

Revision ID: 0001
Revises:
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_MAGNITUDE = sa.Numeric(12, 2)


def _timestamp(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "grade",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("annual_leave_limit", sa.Integer(), nullable=False),
        sa.Column("annual_expense_limit", _MAGNITUDE, nullable=False),
        sa.Column("discount_limit_percent", _MAGNITUDE, nullable=False),
        _timestamp(),
        sa.UniqueConstraint("name", name="uq_grade_name"),
    )
    op.create_index("ix_grade_created_at", "grade", ["created_at"])

    op.create_table(
        "employee",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), server_default="EMPLOYEE", nullable=False),
        sa.Column("grade_id", sa.Uuid(), sa.ForeignKey("grade.id"), nullable=False),
        sa.Column("manager_id", sa.Uuid(), sa.ForeignKey("employee.id"), nullable=True),
        _timestamp(),
        sa.UniqueConstraint("email", name="uq_employee_email"),
    )
    op.create_index("ix_employee_grade_id", "employee", ["grade_id"])
    op.create_index("ix_employee_manager_id", "employee", ["manager_id"])
    op.create_index("ix_employee_created_at", "employee", ["created_at"])

    op.create_table(
        "approval_rule",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("request_type", sa.String(length=50), nullable=False),
        sa.Column("grade_id", sa.Uuid(), sa.ForeignKey("grade.id"), nullable=False),
        sa.Column("condition", sa.JSON(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        _timestamp(),
        _timestamp("updated_at"),
    )
    op.create_index("ix_approval_rule_request_type", "approval_rule", ["request_type"])
    op.create_index("ix_approval_rule_grade_id", "approval_rule", ["grade_id"])
    op.create_index("ix_approval_rule_active", "approval_rule", ["active"])
    op.create_index("ix_approval_rule_created_at", "approval_rule", ["created_at"])
    op.create_index(
        "uq_rule_active_type_grade",
        "approval_rule",
        ["request_type", "grade_id"],
        unique=True,
        postgresql_where=sa.text("active"),
        sqlite_where=sa.text("active"),
    )

    op.create_table(
        "balance_wallet",
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("kind", sa.String(length=50), nullable=False),
        sa.Column("total_allocated", _MAGNITUDE, nullable=False),
        sa.Column("remaining", _MAGNITUDE, nullable=False),
        _timestamp("updated_at"),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.PrimaryKeyConstraint("employee_id", "kind"),
        sa.CheckConstraint("remaining >= 0", name="ck_wallet_remaining_non_negative"),
        sa.CheckConstraint("remaining <= total_allocated", name="ck_wallet_remaining_within_total"),
    )

    op.create_table(
        "approval_request",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("kind", sa.String(length=50), nullable=False),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id"), nullable=False),
        sa.Column("magnitude", _MAGNITUDE, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("leave_type", sa.String(length=100), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=50), server_default="PENDING", nullable=False),
        sa.Column("rule_id", sa.Uuid(), sa.ForeignKey("approval_rule.id"), nullable=True),
        sa.Column("approver_id", sa.Uuid(), sa.ForeignKey("employee.id"), nullable=True),
        sa.Column("approval_comment", sa.String(), nullable=True),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        _timestamp(),
    )
    op.create_index("ix_approval_request_status", "approval_request", ["status"])
    op.create_index("ix_approval_request_created_at", "approval_request", ["created_at"])
    op.create_index("ix_request_kind_status", "approval_request", ["kind", "status"])
    op.create_index("ix_request_employee_kind", "approval_request", ["employee_id", "kind"])

    op.create_table(
        "holiday",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        _timestamp(),
        sa.UniqueConstraint("date", name="uq_holiday_date"),
    )
    op.create_index("ix_holiday_created_at", "holiday", ["created_at"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("actor_id", sa.Uuid(), nullable=True),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        _timestamp(),
    )
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("holiday")
    op.drop_table("approval_request")
    op.drop_table("balance_wallet")
    op.drop_table("approval_rule")
    op.drop_table("employee")
    op.drop_table("grade")

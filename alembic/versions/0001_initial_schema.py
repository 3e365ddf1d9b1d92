"""Initial employee directory schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_Id = sa.BigInteger().with_variant(sa.Integer, "sqlite")
_SEQUENCES = ("access_card_id_seq", "employee_id_seq", "pay_stub_id_seq", "email_group_id_seq")


def _supports_sequences() -> bool:
    return op.get_context().dialect.supports_sequences


def upgrade() -> None:
    if _supports_sequences():
        for name in _SEQUENCES:
            op.execute(sa.schema.CreateSequence(sa.Sequence(name), if_not_exists=True))

    op.create_table(
        "access_card",
        sa.Column("id", _Id, sa.Sequence("access_card_id_seq"), primary_key=True),
        sa.Column("issued_date", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("firmware_version", sa.String(32), nullable=True),
    )
    op.create_table(
        "employee_data",
        sa.Column("id", _Id, sa.Sequence("employee_id_seq"), primary_key=True),
        sa.Column("ssn", sa.String(10), nullable=False, unique=True),
        sa.Column("emp_name", sa.String(150), nullable=True),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("type", sa.String(32), nullable=True),
        sa.Column(
            "access_card_id",
            _Id,
            sa.ForeignKey("access_card.id"),
            nullable=True,
            unique=True,
        ),
    )
    op.create_table(
        "pay_stub",
        sa.Column("id", _Id, sa.Sequence("pay_stub_id_seq"), primary_key=True),
        sa.Column("pay_period_start", sa.Date(), nullable=False),
        sa.Column("pay_period_end", sa.Date(), nullable=False),
        sa.Column("salary", sa.Float(), nullable=False),
        sa.Column("employee_id", _Id, sa.ForeignKey("employee_data.id"), nullable=False),
    )
    op.create_index("ix_pay_stub_employee_id", "pay_stub", ["employee_id"])
    op.create_table(
        "email_group",
        sa.Column("id", _Id, sa.Sequence("email_group_id_seq"), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False, unique=True),
    )
    op.create_table(
        "email_group_mapping",
        sa.Column(
            "employee_id", _Id, sa.ForeignKey("employee_data.id"), primary_key=True
        ),
        sa.Column(
            "email_group_id", _Id, sa.ForeignKey("email_group.id"), primary_key=True
        ),
    )


def downgrade() -> None:
    op.drop_table("email_group_mapping")
    op.drop_table("email_group")
    op.drop_index("ix_pay_stub_employee_id", table_name="pay_stub")
    op.drop_table("pay_stub")
    op.drop_table("employee_data")
    op.drop_table("access_card")
    if _supports_sequences():
        for name in reversed(_SEQUENCES):
            op.execute(sa.schema.DropSequence(sa.Sequence(name), if_exists=True))

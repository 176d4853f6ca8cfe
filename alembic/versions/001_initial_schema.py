"""Initial schema: companies, customers, engines, forms, records, audit log.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False, index=True
        ),
    ]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)
        )
    return columns


def upgrade() -> None:
    # ── Standalone tables (no FKs) ─────────────────────────────────────

    op.create_table(
        "audit_log",
        sa.Column("event_type", sa.String(100), nullable=False, index=True),
        sa.Column("entity_id", postgresql.UUID(as_uuid=True), index=True),
        sa.Column("actor_id", sa.String(100), comment="Dashboard username or 'system'"),
        sa.Column("actor_role", sa.String(50), comment="operator, system"),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text())),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "companies",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("image_url", sa.String(500), comment="Object storage URL of the logo"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "customers",
        sa.Column("name", sa.String(200), nullable=False, index=True),
        sa.Column("equipment", sa.String(200)),
        sa.Column("customer", sa.String(200), comment="Billing/parent customer name"),
        sa.Column("contact_person", sa.String(200)),
        sa.Column("address", sa.Text()),
        sa.Column("email", sa.String(255)),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # No FK: records outlive the template they were submitted against
    op.create_table(
        "form_records",
        sa.Column("company_form_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("job_order", sa.String(100), index=True),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # ── Tables referencing companies ───────────────────────────────────

    op.create_table(
        "engines",
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("companies.id", ondelete="SET NULL"),
            index=True,
        ),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("serial_no", sa.String(100), index=True),
        sa.Column("alt_brand_model", sa.String(100), comment="Alternator brand/model"),
        sa.Column("equip_model", sa.String(100)),
        sa.Column("equip_serial_no", sa.String(100)),
        sa.Column("alt_serial_no", sa.String(100)),
        sa.Column("location", sa.String(200)),
        sa.Column("rating", sa.String(50)),
        sa.Column("rpm", sa.String(20)),
        sa.Column("start_voltage", sa.String(20)),
        sa.Column("run_hours", sa.String(20)),
        sa.Column("fuel_pump_sn", sa.String(100)),
        sa.Column("fuel_pump_code", sa.String(100)),
        sa.Column("lube_oil", sa.String(100)),
        sa.Column("fuel_type", sa.String(50)),
        sa.Column("coolant_additive", sa.String(100)),
        sa.Column("turbo_model", sa.String(100)),
        sa.Column("turbo_sn", sa.String(100)),
        sa.Column("image_url", sa.String(500)),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "company_forms",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("form_type", sa.String(100), nullable=False, index=True),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("companies.id", ondelete="SET NULL"),
            index=True,
        ),
        sa.Column("fields", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("sections", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    # Drop in reverse dependency order
    op.drop_table("company_forms")
    op.drop_table("engines")
    op.drop_table("form_records")
    op.drop_table("customers")
    op.drop_table("companies")
    op.drop_table("audit_log")

"""initial_surgiops_schema

Creates the SurgiOps tables:
  - tenants
  - regions, hospital_systems, hospitals
  - rep_teams, territories
  - surgeons, procedures, surgery_cases
  - ai_insights, insight_generation_runs
  - sales_opportunities, sales_transactions

Tables created conditionally (IF NOT EXISTS semantics) to support idempotent
execution against databases that already received these tables via db.create_all()
in a development environment.

Revision ID: 7c1e2a9d4b10
Revises:
Create Date: 2026-10-17 09:12:40.118204
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = '7c1e2a9d4b10'
down_revision = None
branch_labels = None
depends_on = None


def _tenant_columns(soft_delete=True):
    """id, tenant_id and audit columns shared by every tenant table."""
    cols = [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("updated_by", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    ]
    if soft_delete:
        cols.append(sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()))
    return cols


def _tenant_indexes(table, soft_delete=True):
    op.create_index(f"ix_{table}_tenant_id", table, ["tenant_id"])
    op.create_index(f"ix_{table}_created_at", table, ["created_at"])
    if soft_delete:
        op.create_index(f"ix_{table}_is_active", table, ["is_active"])


def upgrade():
    bind = op.get_bind()
    inspector = sa_inspect(bind)
    existing = set(inspector.get_table_names())

    # ── Tenants ───────────────────────────────────────────────────────────
    if "tenants" not in existing:
        op.create_table(
            "tenants",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("slug", sa.String(length=100), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("slug"),
        )

    # ── Organization ──────────────────────────────────────────────────────
    if "regions" not in existing:
        op.create_table(
            "regions",
            *_tenant_columns(),
            sa.Column("name", sa.String(length=120), nullable=False),
            sa.Column("code", sa.String(length=20), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.UniqueConstraint("tenant_id", "code", name="uq_regions_tenant_code"),
        )
        _tenant_indexes("regions")

    if "hospital_systems" not in existing:
        op.create_table(
            "hospital_systems",
            *_tenant_columns(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("headquarters_address", sa.JSON(), nullable=True,
                      comment="{street, city, state, zip}"),
            sa.Column("contact_info", sa.JSON(), nullable=True, comment="{person, email, phone}"),
            sa.Column("region_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["region_id"], ["regions.id"]),
        )
        _tenant_indexes("hospital_systems")
        op.create_index("ix_hospital_systems_region_id", "hospital_systems", ["region_id"])

    if "hospitals" not in existing:
        op.create_table(
            "hospitals",
            *_tenant_columns(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("hospital_system_id", sa.Integer(), nullable=True),
            sa.Column("address", sa.JSON(), nullable=True, comment="{street, city, state, zip}"),
            sa.Column("contact_info", sa.JSON(), nullable=True, comment="{person, email, phone}"),
            sa.Column("region_id", sa.Integer(), nullable=True),
            sa.Column("bed_count", sa.Integer(), nullable=True),
            sa.Column("trauma_level", sa.String(length=20), nullable=True,
                      comment="Level 1 | Level 2 | Level 3 | Level 4 | None"),
            sa.ForeignKeyConstraint(["hospital_system_id"], ["hospital_systems.id"]),
            sa.ForeignKeyConstraint(["region_id"], ["regions.id"]),
        )
        _tenant_indexes("hospitals")
        op.create_index("ix_hospitals_hospital_system_id", "hospitals", ["hospital_system_id"])
        op.create_index("ix_hospitals_region_id", "hospitals", ["region_id"])

    if "rep_teams" not in existing:
        op.create_table(
            "rep_teams",
            *_tenant_columns(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("team_lead", sa.String(length=200), nullable=False),
            sa.Column("region_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["region_id"], ["regions.id"]),
        )
        _tenant_indexes("rep_teams")
        op.create_index("ix_rep_teams_region_id", "rep_teams", ["region_id"])

    if "territories" not in existing:
        op.create_table(
            "territories",
            *_tenant_columns(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("team_id", sa.Integer(), nullable=True),
            sa.Column("coverage_area", sa.Text(), nullable=False, server_default=""),
            sa.ForeignKeyConstraint(["team_id"], ["rep_teams.id"]),
        )
        _tenant_indexes("territories")
        op.create_index("ix_territories_team_id", "territories", ["team_id"])

    # ── Clinical ──────────────────────────────────────────────────────────
    if "surgeons" not in existing:
        op.create_table(
            "surgeons",
            *_tenant_columns(),
            sa.Column("first_name", sa.String(length=100), nullable=False),
            sa.Column("last_name", sa.String(length=100), nullable=False),
            sa.Column("npi", sa.String(length=20), nullable=True),
            sa.Column("specialties", sa.JSON(), nullable=True),
            sa.Column("hospital_id", sa.Integer(), nullable=False),
            sa.Column("contact_info", sa.JSON(), nullable=True, comment="{email, phone}"),
            sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"]),
        )
        _tenant_indexes("surgeons")
        op.create_index("ix_surgeons_hospital_id", "surgeons", ["hospital_id"])

    if "procedures" not in existing:
        op.create_table(
            "procedures",
            *_tenant_columns(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("code", sa.String(length=50), nullable=True),
            sa.Column("procedure_type", sa.String(length=30), nullable=False,
                      server_default="other",
                      comment="knee | hip | shoulder | spine | trauma | sports_medicine | other"),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("estimated_duration_minutes", sa.Integer(), nullable=True),
            sa.Column("complexity_score", sa.Integer(), nullable=True),
        )
        _tenant_indexes("procedures")

    if "surgery_cases" not in existing:
        op.create_table(
            "surgery_cases",
            *_tenant_columns(soft_delete=False),
            sa.Column("case_number", sa.String(length=40), nullable=False),
            sa.Column("surgeon_id", sa.Integer(), nullable=False),
            sa.Column("hospital_id", sa.Integer(), nullable=False),
            sa.Column("procedure_id", sa.Integer(), nullable=False),
            sa.Column("patient_identifier", sa.String(length=100), nullable=True),
            sa.Column("scheduled_at", sa.DateTime(), nullable=False),
            sa.Column("actual_start_time", sa.DateTime(), nullable=True),
            sa.Column("actual_end_time", sa.DateTime(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="scheduled",
                      comment="scheduled | in_progress | completed | cancelled | postponed | no_show"),
            sa.Column("operating_room", sa.String(length=50), nullable=True),
            sa.Column("estimated_cost", sa.Float(), nullable=True),
            sa.Column("actual_cost", sa.Float(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(["surgeon_id"], ["surgeons.id"]),
            sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"]),
            sa.ForeignKeyConstraint(["procedure_id"], ["procedures.id"]),
            sa.UniqueConstraint("case_number"),
            sa.CheckConstraint(
                "status IN ('scheduled','in_progress','completed','cancelled','postponed','no_show')",
                name="ck_surgery_case_status",
            ),
        )
        _tenant_indexes("surgery_cases", soft_delete=False)
        for col in ("surgeon_id", "hospital_id", "procedure_id", "scheduled_at"):
            op.create_index(f"ix_surgery_cases_{col}", "surgery_cases", [col])

    # ── AI insights ───────────────────────────────────────────────────────
    if "ai_insights" not in existing:
        op.create_table(
            "ai_insights",
            *_tenant_columns(soft_delete=False),
            sa.Column("insight_type", sa.String(length=40), nullable=False,
                      comment="operations | sales | inventory | general_business"),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("confidence_score", sa.Float(), nullable=True),
            sa.Column("hospital_id", sa.Integer(), nullable=True),
            sa.Column("surgeon_id", sa.Integer(), nullable=True),
            sa.Column("procedure_id", sa.Integer(), nullable=True),
            sa.Column("data_points", sa.JSON(), nullable=True),
            sa.Column("recommendations", sa.JSON(), nullable=True),
            sa.Column("is_actionable", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("is_viewed", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"]),
            sa.ForeignKeyConstraint(["surgeon_id"], ["surgeons.id"]),
            sa.ForeignKeyConstraint(["procedure_id"], ["procedures.id"]),
        )
        _tenant_indexes("ai_insights", soft_delete=False)
        op.create_index("ix_ai_insights_insight_type", "ai_insights", ["insight_type"])

    if "insight_generation_runs" not in existing:
        op.create_table(
            "insight_generation_runs",
            *_tenant_columns(soft_delete=False),
            sa.Column("external_run_id", sa.String(length=100), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
            sa.Column("mode", sa.String(length=20), nullable=False, server_default="polled",
                      comment="polled | fixed_delay"),
            sa.Column("insights_before", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("insights_after", sa.Integer(), nullable=True),
            sa.Column("poll_attempts", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("error_message", sa.Text(), nullable=True),
            sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
            sa.CheckConstraint(
                "status IN ('pending','running','completed','failed','unknown')",
                name="ck_insight_run_status",
            ),
        )
        _tenant_indexes("insight_generation_runs", soft_delete=False)
        op.create_index("ix_insight_generation_runs_external_run_id",
                        "insight_generation_runs", ["external_run_id"])

    # ── Sales ─────────────────────────────────────────────────────────────
    if "sales_opportunities" not in existing:
        op.create_table(
            "sales_opportunities",
            *_tenant_columns(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("stage", sa.String(length=30), nullable=False, server_default="lead"),
            sa.Column("estimated_value", sa.Float(), nullable=True),
            sa.Column("hospital_id", sa.Integer(), nullable=True),
            sa.Column("region_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"]),
            sa.ForeignKeyConstraint(["region_id"], ["regions.id"]),
        )
        _tenant_indexes("sales_opportunities")
        op.create_index("ix_sales_opportunities_region_id", "sales_opportunities", ["region_id"])

    if "sales_transactions" not in existing:
        op.create_table(
            "sales_transactions",
            *_tenant_columns(),
            sa.Column("amount", sa.Float(), nullable=False, server_default="0"),
            sa.Column("transaction_date", sa.DateTime(), nullable=False),
            sa.Column("product_name", sa.String(length=200), nullable=True),
            sa.Column("hospital_id", sa.Integer(), nullable=True),
            sa.Column("region_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"]),
            sa.ForeignKeyConstraint(["region_id"], ["regions.id"]),
        )
        _tenant_indexes("sales_transactions")
        op.create_index("ix_sales_transactions_region_id", "sales_transactions", ["region_id"])
        op.create_index("ix_sales_transactions_transaction_date",
                        "sales_transactions", ["transaction_date"])


def downgrade():
    for table in (
        "sales_transactions", "sales_opportunities",
        "insight_generation_runs", "ai_insights",
        "surgery_cases", "procedures", "surgeons",
        "territories", "rep_teams", "hospitals", "hospital_systems", "regions",
        "tenants",
    ):
        op.drop_table(table)

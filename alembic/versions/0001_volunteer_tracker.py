"""volunteer tracker baseline: volunteers, criteria, evaluations, alerts, vault

Revision ID: 0001_volunteer_tracker
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_volunteer_tracker'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "volunteers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("full_name", sa.String(160), nullable=False),
        sa.Column("phone", sa.String(40)),
        sa.Column("birth_date", sa.Date),
        sa.Column("join_date", sa.Date),
        sa.Column("role_type", sa.String(50)),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_frozen", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("freeze_reason", sa.Text),
        sa.Column("xp_points", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rank", sa.String(40), nullable=False, server_default="beginner"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        sa.CheckConstraint("xp_points >= 0", name="ck_volunteers_xp_non_negative"),
    )

    op.create_table(
        "evaluation_criteria",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(160), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("max_score", sa.Float, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_evaluation_criteria_category", "evaluation_criteria", ["category"])

    op.create_table(
        "evaluations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("volunteer_id", sa.Integer, sa.ForeignKey("volunteers.id"), nullable=False),
        sa.Column("eval_month", sa.Integer, nullable=False),
        sa.Column("eval_year", sa.Integer, nullable=False),
        sa.Column("total_score", sa.Float, nullable=False),
        sa.Column("percentage", sa.Float, nullable=False),
        sa.Column("dna_analysis", sa.String(40), nullable=False),
        sa.Column("has_award", sa.Boolean, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_evaluations_volunteer_id", "evaluations", ["volunteer_id"])

    op.create_table(
        "evaluation_details",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("evaluation_id", sa.Integer, sa.ForeignKey("evaluations.id"), nullable=False),
        sa.Column("criteria_id", sa.Integer, sa.ForeignKey("evaluation_criteria.id"), nullable=False),
        sa.Column("score", sa.Float, nullable=False),
        sa.UniqueConstraint("evaluation_id", "criteria_id", name="uq_evaluation_details_eval_criteria"),
    )
    op.create_index("ix_evaluation_details_evaluation_id", "evaluation_details", ["evaluation_id"])

    op.create_table(
        "alerts",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("volunteer_id", sa.Integer, sa.ForeignKey("volunteers.id"), nullable=False),
        sa.Column("alert_type", sa.String(50), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("is_resolved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("notified_at", sa.DateTime),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_alerts_volunteer_id", "alerts", ["volunteer_id"])

    op.create_table(
        "creative_vault",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("volunteer_id", sa.Integer, sa.ForeignKey("volunteers.id"), nullable=False),
        sa.Column("idea_text", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_creative_vault_volunteer_id", "creative_vault", ["volunteer_id"])


def downgrade() -> None:
    for t in ("creative_vault", "alerts", "evaluation_details", "evaluations",
              "evaluation_criteria", "volunteers"):
        op.drop_table(t)

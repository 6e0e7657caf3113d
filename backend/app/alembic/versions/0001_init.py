"""init schema

Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("email", sa.String(length=200), nullable=True),
        sa.Column("first_name", sa.String(length=120), nullable=True),
        sa.Column("last_name", sa.String(length=120), nullable=True),
        sa.Column("profile_image_url", sa.String(length=500), nullable=True),
        sa.Column("role", sa.String(length=40), nullable=False, server_default="contributor"),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "portfolios",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("budget", sa.BigInteger(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "programs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("portfolio_id", sa.String(length=36), sa.ForeignKey("portfolios.id"), nullable=False),
        sa.Column("owner_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("budget", sa.BigInteger(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_programs_portfolio_id", "programs", ["portfolio_id"])

    op.create_table(
        "phases",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("ix_phases_type_order", "phases", ["type", "order"])

    op.create_table(
        "statuses",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("color", sa.String(length=40), nullable=False, server_default="gray"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("ix_statuses_type_name", "statuses", ["type", "name"])

    op.create_table(
        "demands",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("program_id", sa.String(length=36), sa.ForeignKey("programs.id"), nullable=False),
        sa.Column("phase_id", sa.String(length=36), sa.ForeignKey("phases.id"), nullable=True),
        sa.Column("status_id", sa.String(length=36), sa.ForeignKey("statuses.id"), nullable=True),
        sa.Column("owner_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("priority", sa.String(length=10), nullable=False, server_default="medium"),
        sa.Column("requested_date", sa.DateTime(), nullable=False),
        sa.Column("estimated_effort", sa.Integer(), nullable=True),
        sa.Column("business_value", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_demands_program_id", "demands", ["program_id"])

    op.create_table(
        "projects",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("program_id", sa.String(length=36), sa.ForeignKey("programs.id"), nullable=False),
        # no FK: projects outlive the demand they came from
        sa.Column("demand_id", sa.String(length=36), nullable=True),
        sa.Column("phase_id", sa.String(length=36), sa.ForeignKey("phases.id"), nullable=True),
        sa.Column("status_id", sa.String(length=36), sa.ForeignKey("statuses.id"), nullable=True),
        sa.Column("owner_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("project_manager_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("priority", sa.String(length=10), nullable=False, server_default="medium"),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("budget", sa.BigInteger(), nullable=True),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_projects_progress_range"),
    )
    op.create_index("ix_projects_program_id", "projects", ["program_id"])
    op.create_index("ix_projects_demand_id", "projects", ["demand_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("program_id", sa.String(length=36), sa.ForeignKey("programs.id"), nullable=False),
        sa.Column("owner_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="in_development"),
        sa.Column("version", sa.String(length=40), nullable=False, server_default="1.0.0"),
        sa.Column("launch_date", sa.DateTime(), nullable=True),
        sa.Column("business_value", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_products_program_id", "products", ["program_id"])

    op.create_table(
        "project_products",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("project_id", sa.String(length=36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("product_id", sa.String(length=36), sa.ForeignKey("products.id"), nullable=False),
        sa.UniqueConstraint("project_id", "product_id", name="uq_project_products_project_product"),
    )
    op.create_index("ix_project_products_project_id", "project_products", ["project_id"])
    op.create_index("ix_project_products_product_id", "project_products", ["product_id"])

    op.create_table(
        "assignments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("project_id", sa.String(length=36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role", sa.String(length=60), nullable=False),
        sa.Column("assigned_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_assignments_project_id", "assignments", ["project_id"])
    op.create_index("ix_assignments_user_id", "assignments", ["user_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("entity_type", sa.String(length=40), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=False),
        sa.Column("change_type", sa.String(length=20), nullable=False),
        sa.Column("changed_by", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_log_entity", "audit_log", ["entity_type", "entity_id"])
    op.create_index("ix_audit_log_timestamp", "audit_log", ["timestamp"])


def downgrade():
    op.drop_index("ix_audit_log_timestamp", table_name="audit_log")
    op.drop_index("ix_audit_log_entity", table_name="audit_log")
    op.drop_table("audit_log")

    op.drop_index("ix_assignments_user_id", table_name="assignments")
    op.drop_index("ix_assignments_project_id", table_name="assignments")
    op.drop_table("assignments")

    op.drop_index("ix_project_products_product_id", table_name="project_products")
    op.drop_index("ix_project_products_project_id", table_name="project_products")
    op.drop_table("project_products")

    op.drop_index("ix_products_program_id", table_name="products")
    op.drop_table("products")

    op.drop_index("ix_projects_demand_id", table_name="projects")
    op.drop_index("ix_projects_program_id", table_name="projects")
    op.drop_table("projects")

    op.drop_index("ix_demands_program_id", table_name="demands")
    op.drop_table("demands")

    op.drop_index("ix_statuses_type_name", table_name="statuses")
    op.drop_table("statuses")

    op.drop_index("ix_phases_type_order", table_name="phases")
    op.drop_table("phases")

    op.drop_index("ix_programs_portfolio_id", table_name="programs")
    op.drop_table("programs")

    op.drop_table("portfolios")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

"""Initial migration - Create users, certificates and programs tables

Revision ID: 001
Revises:
Create Date: 2026-01-02
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, certificates and programs tables."""
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), default=True),
        sa.Column("is_superuser", sa.Boolean(), default=False),
        sa.Column("created_at", sa.DateTime(), default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Create certificates table; intern_id is the natural key
    op.create_table(
        "certificates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("intern_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("domain", sa.String(255), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("starting_date", sa.String(10), nullable=False),
        sa.Column("completion_date", sa.String(10), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("contact_no", sa.String(32), nullable=True),
        sa.Column("mentor_name", sa.String(255), nullable=True),
        sa.Column("mentor_email", sa.String(255), nullable=True),
        sa.Column("mentor_contact_no", sa.String(32), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), default=sa.func.now()),
    )
    op.create_index("ix_certificates_intern_id", "certificates", ["intern_id"], unique=True)
    op.create_index("ix_certificates_status", "certificates", ["status"])
    op.create_index("ix_certificates_created_at", "certificates", ["created_at"])

    # Create programs table
    op.create_table(
        "programs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("level", sa.String(64), nullable=False),
        sa.Column("duration", sa.String(64), nullable=False),
        sa.Column("rating", sa.Float(), default=0),
        sa.Column("skills", sa.JSON(), nullable=True),
        sa.Column("thumbnail", sa.String(1024), nullable=True),
        sa.Column("details_link", sa.String(1024), nullable=True),
        sa.Column("overview", sa.Text(), nullable=True),
        sa.Column("detailed_summary", sa.Text(), nullable=True),
        sa.Column("course_topics", sa.JSON(), nullable=True),
        sa.Column("technologies", sa.JSON(), nullable=True),
        sa.Column("original_price", sa.Float(), default=2000),
        sa.Column("discounted_price", sa.Float(), default=1499),
        sa.Column("modules", sa.Integer(), default=6),
        sa.Column("hours", sa.Integer(), default=8),
        sa.Column("certificate_image", sa.String(1024), nullable=True),
        sa.Column("additional_images", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), default=sa.func.now()),
    )
    op.create_index("ix_programs_category", "programs", ["category"])
    op.create_index("ix_programs_level", "programs", ["level"])
    op.create_index("ix_programs_details_link", "programs", ["details_link"])
    op.create_index("ix_programs_status", "programs", ["status"])
    op.create_index("ix_programs_created_at", "programs", ["created_at"])


def downgrade() -> None:
    """Drop users, certificates and programs tables."""
    for index in (
        "ix_programs_created_at",
        "ix_programs_status",
        "ix_programs_details_link",
        "ix_programs_level",
        "ix_programs_category",
    ):
        op.drop_index(index, table_name="programs")
    op.drop_table("programs")

    op.drop_index("ix_certificates_created_at", table_name="certificates")
    op.drop_index("ix_certificates_status", table_name="certificates")
    op.drop_index("ix_certificates_intern_id", table_name="certificates")
    op.drop_table("certificates")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

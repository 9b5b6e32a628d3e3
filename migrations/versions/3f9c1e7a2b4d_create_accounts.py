"""Create accounts table.

Revision ID: 3f9c1e7a2b4d
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1e7a2b4d"
down_revision = None
branch_labels = None
depends_on = None

account_role_enum = sa.Enum("admin", "user", "student", name="account_role_enum")


def upgrade():
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("organization_name", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column(
            "role",
            account_role_enum,
            nullable=False,
            server_default="user",
        ),
        sa.Column(
            "is_email_verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("email_verification_token", sa.String(length=128), nullable=True),
        sa.Column("email_verification_expiry", sa.DateTime(), nullable=True),
        sa.Column("reset_password_token", sa.String(length=128), nullable=True),
        sa.Column("reset_password_expiry", sa.DateTime(), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)
    op.create_index(
        "ix_accounts_email_verification_token",
        "accounts",
        ["email_verification_token"],
    )
    op.create_index(
        "ix_accounts_reset_password_token",
        "accounts",
        ["reset_password_token"],
    )


def downgrade():
    op.drop_index("ix_accounts_reset_password_token", table_name="accounts")
    op.drop_index("ix_accounts_email_verification_token", table_name="accounts")
    op.drop_index("ix_accounts_email", table_name="accounts")
    op.drop_table("accounts")
    account_role_enum.drop(op.get_bind(), checkfirst=True)

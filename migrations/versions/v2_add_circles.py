"""Add fasting circles

Revision ID: v2
Revises: v1
Create Date: 2026-10-17 12:00:00

Circles, their members and chat messages
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'v2'
down_revision = 'v1'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create circles table
    op.create_table(
        "circles",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("creator_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("invite_code", sa.String(length=6), nullable=False),
        sa.Column("max_members", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_circles_creator_id"), "circles", ["creator_id"], unique=False)
    op.create_index(op.f("ix_circles_invite_code"), "circles", ["invite_code"], unique=True)

    # Create circle_members table
    op.create_table(
        "circle_members",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("circle_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="member"),
        sa.Column("joined_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["circle_id"], ["circles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("circle_id", "user_id", name="uq_circle_member"),
    )
    op.create_index(op.f("ix_circle_members_circle_id"), "circle_members", ["circle_id"], unique=False)
    op.create_index(op.f("ix_circle_members_user_id"), "circle_members", ["user_id"], unique=False)

    # Create circle_messages table
    op.create_table(
        "circle_messages",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("circle_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False, server_default="text"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("metadata_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["circle_id"], ["circles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_circle_messages_circle_id"), "circle_messages", ["circle_id"], unique=False)
    op.create_index(op.f("ix_circle_messages_user_id"), "circle_messages", ["user_id"], unique=False)
    op.create_index(op.f("ix_circle_messages_created_at"), "circle_messages", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_table("circle_messages")
    op.drop_table("circle_members")
    op.drop_table("circles")

"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False))
    return columns


def upgrade():
    op.create_table(
        "categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        *_timestamps(updated=False),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("image", sa.String(512), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("long_description", sa.Text, nullable=True),
        sa.Column("roast_level", sa.String(64), nullable=True),
        sa.Column("origin", sa.String(128), nullable=True),
        sa.Column("flavor_notes", sa.JSON, nullable=True),
        sa.Column("weight", sa.String(32), nullable=True),
        sa.Column("category_id", sa.String(36), sa.ForeignKey("categories.id"), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("first_name", sa.String(128), nullable=True),
        sa.Column("last_name", sa.String(128), nullable=True),
        sa.Column("phone_text", sa.String(32), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "cart_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
        sa.CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
    )
    op.create_index("ix_cart_items_user_id", "cart_items", ["user_id"], unique=False)

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint("amount > 0", name="ck_wallet_transactions_amount_positive"),
    )
    op.create_index("ix_wallet_transactions_user_created", "wallet_transactions", ["user_id", "created_at"], unique=False)

    op.create_table(
        "gift_cards",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(19), nullable=False, unique=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("recipient_email", sa.String(255), nullable=True),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("design", sa.String(64), nullable=True),
        *_timestamps(updated=False),
        sa.CheckConstraint("balance >= 0 AND balance <= amount", name="ck_gift_cards_balance_range"),
        sa.CheckConstraint("amount > 0", name="ck_gift_cards_amount_positive"),
    )
    op.create_index("ix_gift_cards_user_id", "gift_cards", ["user_id"], unique=False)

    op.create_table(
        "pickups",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("pickup_date", sa.Date, nullable=False),
        sa.Column("pickup_time", sa.String(16), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        *_timestamps(),
    )
    op.create_index("ix_pickups_user_status", "pickups", ["user_id", "status"], unique=False)

    op.create_table(
        "pickup_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("pickup_id", sa.String(36), sa.ForeignKey("pickups.id"), nullable=False),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint("quantity > 0", name="ck_pickup_items_quantity_positive"),
    )
    op.create_index("ix_pickup_items_pickup_id", "pickup_items", ["pickup_id"], unique=False)


def downgrade():
    op.drop_table("pickup_items")
    op.drop_table("pickups")
    op.drop_table("gift_cards")
    op.drop_table("wallet_transactions")
    op.drop_table("cart_items")
    op.drop_table("profiles")
    op.drop_table("products")
    op.drop_table("categories")

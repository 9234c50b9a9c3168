"""payment transaction uniqueness, gateway order binding, bundles

Revision ID: 8b42e6d1c5f3
Revises: 3f1c9a7d2b10
Create Date: 2026-10-21 16:40:09.532871

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8b42e6d1c5f3'
down_revision: Union[str, Sequence[str], None] = '3f1c9a7d2b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    # a gateway payment id may settle only one order
    op.drop_constraint("uq_payment_order_txn", "payment", type_="unique")
    op.create_unique_constraint("uq_payment_transaction_id", "payment", ["transaction_id"])

    op.add_column("order", sa.Column("gateway_order_id", sa.String(), nullable=True))
    op.create_index("ix_order_gateway_order_id", "order", ["gateway_order_id"])

    op.create_table(
        "bundle",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("bundle_price", sa.Float(), nullable=False),
        sa.Column("compare_price", sa.Float(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_bundle_slug", "bundle", ["slug"], unique=True)

    op.create_table(
        "bundle_item",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("bundle_id", sa.Integer(), sa.ForeignKey("bundle.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("product.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_bundle_item_bundle_id", "bundle_item", ["bundle_id"])


def downgrade():
    op.drop_index("ix_bundle_item_bundle_id", table_name="bundle_item")
    op.drop_table("bundle_item")
    op.drop_index("ix_bundle_slug", table_name="bundle")
    op.drop_table("bundle")

    op.drop_index("ix_order_gateway_order_id", table_name="order")
    op.drop_column("order", "gateway_order_id")

    op.drop_constraint("uq_payment_transaction_id", "payment", type_="unique")
    op.create_unique_constraint("uq_payment_order_txn", "payment", ["order_id", "transaction_id"])

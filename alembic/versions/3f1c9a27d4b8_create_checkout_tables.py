"""create checkout tables

Revision ID: 3f1c9a27d4b8
Revises:
Create Date: 2026-10-17 09:12:40.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a27d4b8'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

order_status = sa.Enum('PENDING', 'CONFIRMED', 'COMPLETED', 'CANCELLED', name='orderstatus')
payment_status = sa.Enum('PENDING', 'SUCCEEDED', 'FAILED', name='paymentstatus')


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_email', 'user', ['email'])

    op.create_table(
        'book',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('isbn', sa.String(), nullable=True),
        sa.Column('price', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('stock >= 0', name='ck_book_stock_non_negative'),
    )

    op.create_table(
        'cartitem',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('book.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'book_id', name='uq_cartitem_user_book'),
        sa.CheckConstraint('quantity >= 1', name='ck_cartitem_quantity_positive'),
    )
    op.create_index('ix_cartitem_user_id', 'cartitem', ['user_id'])

    op.create_table(
        'order',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('order_date', sa.DateTime(), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('status', order_status, nullable=False),
        sa.Column('created_date', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_order_user_id', 'order', ['user_id'])
    op.create_index('ix_order_status', 'order', ['status'])

    op.create_table(
        'orderitem',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('book.id'), nullable=False),
        sa.Column('book_title', sa.String(), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity >= 1', name='ck_orderitem_quantity_positive'),
    )
    op.create_index('ix_orderitem_order_id', 'orderitem', ['order_id'])

    op.create_table(
        'payment',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('status', payment_status, nullable=False),
        sa.Column('method', sa.String(), nullable=False),
        sa.Column('intent_id', sa.String(), nullable=True),
        sa.Column('client_secret', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_payment_order_id', 'payment', ['order_id'])
    op.create_index('ix_payment_intent_id', 'payment', ['intent_id'])


def downgrade() -> None:
    op.drop_table('payment')
    op.drop_table('orderitem')
    op.drop_table('order')
    op.drop_table('cartitem')
    op.drop_table('book')
    op.drop_table('user')
    payment_status.drop(op.get_bind(), checkfirst=True)
    order_status.drop(op.get_bind(), checkfirst=True)

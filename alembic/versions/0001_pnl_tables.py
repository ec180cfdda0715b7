"""Add P&L source tables: deals and business_costs

Revision ID: 0001_pnl_tables
Revises:
Create Date: 2025-03-01

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_pnl_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    existing = set(inspector.get_table_names())

    if 'deals' not in existing:
        op.create_table(
            'deals',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('company_name', sa.String(length=200), nullable=False),
            sa.Column('revenue_inc_vat', sa.Numeric(precision=12, scale=2), nullable=False),
            sa.Column('revenue_net', sa.Numeric(precision=12, scale=2), nullable=False),
            sa.Column('operating_expense', sa.Numeric(precision=12, scale=2), server_default='0', nullable=False),
            sa.Column('leads_sold', sa.Integer(), server_default='0', nullable=False),
            sa.Column('lead_sale_price', sa.Numeric(precision=12, scale=2), server_default='0', nullable=False),
            sa.Column('setter_commission_percent', sa.Numeric(precision=5, scale=2), server_default='0', nullable=False),
            sa.Column('sales_rep_commission_percent', sa.Numeric(precision=5, scale=2), server_default='0', nullable=False),
            sa.Column('setter_cost', sa.Numeric(precision=12, scale=2), server_default='0', nullable=False),
            sa.Column('sales_rep_cost', sa.Numeric(precision=12, scale=2), server_default='0', nullable=False),
            sa.Column('lead_fulfillment_cost', sa.Numeric(precision=12, scale=2), server_default='0', nullable=False),
            sa.Column('close_date', sa.Date(), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('created_by', sa.String(length=64), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_deals_id', 'deals', ['id'], unique=False)
        op.create_index('ix_deals_close_date', 'deals', ['close_date'], unique=False)

    if 'business_costs' not in existing:
        op.create_table(
            'business_costs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
            sa.Column('cost_type', sa.String(length=20), nullable=False),
            sa.Column('frequency', sa.String(length=20), nullable=True),
            sa.Column('category', sa.String(length=50), nullable=False),
            sa.Column('effective_date', sa.Date(), nullable=False),
            sa.Column('end_date', sa.Date(), nullable=True),
            sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
            sa.Column('created_by', sa.String(length=64), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_business_costs_id', 'business_costs', ['id'], unique=False)
        op.create_index('ix_business_costs_cost_type', 'business_costs', ['cost_type'], unique=False)
        op.create_index('ix_business_costs_category', 'business_costs', ['category'], unique=False)
        op.create_index('ix_business_costs_effective_date', 'business_costs', ['effective_date'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_business_costs_effective_date', table_name='business_costs')
    op.drop_index('ix_business_costs_category', table_name='business_costs')
    op.drop_index('ix_business_costs_cost_type', table_name='business_costs')
    op.drop_index('ix_business_costs_id', table_name='business_costs')
    op.drop_table('business_costs')
    op.drop_index('ix_deals_close_date', table_name='deals')
    op.drop_index('ix_deals_id', table_name='deals')
    op.drop_table('deals')

"""
initial marketplace schema: users, auctions, auction_images

Revision ID: 20261019_initial
Revises: None
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('pw_hash', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'auctions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('starting_price', sa.Float(), nullable=False),
        sa.Column('reserve_price', sa.Float(), nullable=True),
        sa.Column('current_bid', sa.Float(), nullable=False),
        sa.Column('current_bidder_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('seller_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('condition', sa.String(), nullable=True),
        sa.Column('is_closed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_auctions_id', 'auctions', ['id'])
    op.create_index('ix_auctions_title', 'auctions', ['title'])
    op.create_index('ix_auctions_seller_id', 'auctions', ['seller_id'])

    op.create_table(
        'auction_images',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('auction_id', sa.Integer(), sa.ForeignKey('auctions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('original_filename', sa.String(), nullable=True),
    )
    op.create_index('ix_auction_images_id', 'auction_images', ['id'])
    op.create_index('ix_auction_images_auction_id', 'auction_images', ['auction_id'])


def downgrade() -> None:
    op.drop_index('ix_auction_images_auction_id', table_name='auction_images')
    op.drop_index('ix_auction_images_id', table_name='auction_images')
    op.drop_table('auction_images')
    op.drop_index('ix_auctions_seller_id', table_name='auctions')
    op.drop_index('ix_auctions_title', table_name='auctions')
    op.drop_index('ix_auctions_id', table_name='auctions')
    op.drop_table('auctions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

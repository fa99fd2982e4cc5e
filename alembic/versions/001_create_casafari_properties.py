"""create_casafari_properties

Revision ID: 001
Revises:
Create Date: 2025-11-05 02:04:32

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


TABLE = 'casafari_properties'


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table(TABLE):
        return

    op.create_table(TABLE,
    sa.Column('id', sa.Integer(), nullable=False),
    # Identificadores del API externo
    sa.Column('casafari_id', sa.String(length=255), nullable=False),
    sa.Column('reference', sa.String(length=255), nullable=True),
    # Tipo y estado
    sa.Column('property_type', sa.String(length=255), nullable=True),
    sa.Column('listing_type', sa.String(length=255), nullable=True),
    sa.Column('status', sa.String(length=255), server_default='active', nullable=False),
    # Ubicacion
    sa.Column('address', sa.String(length=255), nullable=True),
    sa.Column('city', sa.String(length=255), nullable=True),
    sa.Column('region', sa.String(length=255), nullable=True),
    sa.Column('postal_code', sa.String(length=255), nullable=True),
    sa.Column('country', sa.String(length=2), nullable=True),
    sa.Column('latitude', sa.Numeric(precision=10, scale=7), nullable=True),
    sa.Column('longitude', sa.Numeric(precision=10, scale=7), nullable=True),
    # Detalles
    sa.Column('price', sa.Numeric(precision=15, scale=2), nullable=True),
    sa.Column('currency', sa.String(length=3), server_default='EUR', nullable=False),
    sa.Column('bedrooms', sa.Integer(), nullable=True),
    sa.Column('bathrooms', sa.Integer(), nullable=True),
    sa.Column('area_total', sa.Numeric(precision=10, scale=2), nullable=True),
    sa.Column('area_built', sa.Numeric(precision=10, scale=2), nullable=True),
    sa.Column('area_unit', sa.String(length=10), server_default='m2', nullable=False),
    sa.Column('year_built', sa.Integer(), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    # Media y datos adicionales
    sa.Column('photos', sa.JSON(), nullable=True),
    sa.Column('main_photo_url', sa.String(length=2048), nullable=True),
    sa.Column('features', sa.JSON(), nullable=True),
    sa.Column('raw_data', sa.JSON(), nullable=True),
    # Tracking del sync
    sa.Column('last_synced_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_casafari_properties_id'), TABLE, ['id'], unique=False)
    op.create_index(op.f('ix_casafari_properties_casafari_id'), TABLE, ['casafari_id'], unique=True)
    for column in ('property_type', 'status', 'city', 'country', 'price', 'is_active', 'deleted_at'):
        op.create_index(op.f(f'ix_casafari_properties_{column}'), TABLE, [column], unique=False)
    op.create_index('ix_casafari_properties_type_city_active', TABLE, ['property_type', 'city', 'is_active'], unique=False)
    op.create_index('ix_casafari_properties_price_bedrooms_active', TABLE, ['price', 'bedrooms', 'is_active'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table(TABLE):
        op.drop_table(TABLE)

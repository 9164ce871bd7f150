"""create address hierarchy and fleet entity tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

BRAZILIAN_STATES: list[tuple[str, str]] = [
    ("AC", "Acre"),
    ("AL", "Alagoas"),
    ("AP", "Amapá"),
    ("AM", "Amazonas"),
    ("BA", "Bahia"),
    ("CE", "Ceará"),
    ("DF", "Distrito Federal"),
    ("ES", "Espírito Santo"),
    ("GO", "Goiás"),
    ("MA", "Maranhão"),
    ("MT", "Mato Grosso"),
    ("MS", "Mato Grosso do Sul"),
    ("MG", "Minas Gerais"),
    ("PA", "Pará"),
    ("PB", "Paraíba"),
    ("PR", "Paraná"),
    ("PE", "Pernambuco"),
    ("PI", "Piauí"),
    ("RJ", "Rio de Janeiro"),
    ("RN", "Rio Grande do Norte"),
    ("RS", "Rio Grande do Sul"),
    ("RO", "Rondônia"),
    ("RR", "Roraima"),
    ("SC", "Santa Catarina"),
    ("SP", "São Paulo"),
    ("SE", "Sergipe"),
    ("TO", "Tocantins"),
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    states = op.create_table(
        "states",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=2), nullable=False, comment="Two-letter state code"),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.bulk_insert(states, [{"code": code, "name": name} for code, name in BRAZILIAN_STATES])

    op.create_table(
        "cities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("state_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["state_id"], ["states.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cities_name_state", "cities", ["name", "state_id"], unique=False)

    op.create_table(
        "neighborhoods",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("city_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["city_id"], ["cities.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_neighborhoods_name_city", "neighborhoods", ["name", "city_id"], unique=False)

    op.create_table(
        "streets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "postal_code",
            sa.String(length=16),
            nullable=True,
            comment="Part of the natural key; NULL when unknown",
        ),
        sa.Column("neighborhood_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["neighborhood_id"], ["neighborhoods.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_streets_name_neighborhood", "streets", ["name", "neighborhood_id"], unique=False)
    op.create_index("ix_streets_postal_code", "streets", ["postal_code"], unique=False)

    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("organization_id", sa.Integer(), nullable=False, comment="Owning organization (tenant)"),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "national_id",
            sa.String(length=11),
            nullable=False,
            comment="11-digit national id, digits only",
        ),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=32), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, comment="Driver or Affiliated (owns the vehicle)"),
        sa.Column("registration_status", sa.String(length=32), nullable=False),
        sa.Column("registered_on", sa.Date(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("organization_id", "national_id", name="uq_drivers_organization_national_id"),
    )
    op.create_index("ix_drivers_organization_id", "drivers", ["organization_id"], unique=False)
    op.create_index("ix_drivers_role", "drivers", ["role"], unique=False)

    op.create_table(
        "driver_addresses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("driver_id", sa.Integer(), nullable=False),
        sa.Column("street_id", sa.Integer(), nullable=False),
        sa.Column("number", sa.String(length=20), nullable=True),
        sa.Column("complement", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["driver_id"], ["drivers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["street_id"], ["streets.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_driver_addresses_driver_id", "driver_addresses", ["driver_id"], unique=False)

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("organization_id", sa.Integer(), nullable=False, comment="Owning organization (tenant)"),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("tax_id", sa.String(length=14), nullable=False, comment="14-digit company tax id, digits only"),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("organization_id", "tax_id", name="uq_customers_organization_tax_id"),
    )
    op.create_index("ix_customers_organization_id", "customers", ["organization_id"], unique=False)

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("organization_id", sa.Integer(), nullable=False, comment="Owning organization (tenant)"),
        sa.Column(
            "plate",
            sa.String(length=7),
            nullable=False,
            comment="Upper-case alphanumeric plate, at most 7 characters",
        ),
        sa.Column("make", sa.String(length=120), nullable=False),
        sa.Column("model", sa.String(length=120), nullable=False),
        sa.Column("year", sa.String(length=4), nullable=False),
        sa.Column("color", sa.String(length=60), nullable=False),
        sa.Column(
            "vehicle_class",
            sa.String(length=60),
            nullable=False,
            comment="Operational class, e.g. VAN or LIGHT TRUCK",
        ),
        sa.Column("fuel", sa.String(length=60), nullable=False),
        sa.Column("weight", sa.String(length=60), nullable=False),
        sa.Column("volume", sa.String(length=60), nullable=False),
        sa.Column("has_tracker", sa.Boolean(), nullable=False),
        sa.Column("tracker_make", sa.String(length=120), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("driver_id", sa.Integer(), nullable=True),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["driver_id"], ["drivers.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("organization_id", "plate", name="uq_vehicles_organization_plate"),
    )
    op.create_index("ix_vehicles_organization_id", "vehicles", ["organization_id"], unique=False)
    op.create_index("ix_vehicles_driver_id", "vehicles", ["driver_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_vehicles_driver_id", table_name="vehicles")
    op.drop_index("ix_vehicles_organization_id", table_name="vehicles")
    op.drop_table("vehicles")
    op.drop_index("ix_customers_organization_id", table_name="customers")
    op.drop_table("customers")
    op.drop_index("ix_driver_addresses_driver_id", table_name="driver_addresses")
    op.drop_table("driver_addresses")
    op.drop_index("ix_drivers_role", table_name="drivers")
    op.drop_index("ix_drivers_organization_id", table_name="drivers")
    op.drop_table("drivers")
    op.drop_index("ix_streets_postal_code", table_name="streets")
    op.drop_index("ix_streets_name_neighborhood", table_name="streets")
    op.drop_table("streets")
    op.drop_index("ix_neighborhoods_name_city", table_name="neighborhoods")
    op.drop_table("neighborhoods")
    op.drop_index("ix_cities_name_state", table_name="cities")
    op.drop_table("cities")
    op.drop_table("states")

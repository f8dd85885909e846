"""create_observations

Revision ID: 0001_create_observations
Revises:
Create Date: 2026-10-17

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_create_observations"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create medicare_ip_geo_service table."""
    op.create_table(
        "medicare_ip_geo_service",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("rndrng_prvdr_geo_lvl", sa.String(50), nullable=False),
        sa.Column("rndrng_prvdr_geo_cd", sa.String(20), nullable=True),
        sa.Column("rndrng_prvdr_geo_desc", sa.String(255), nullable=False),
        sa.Column("drg_cd", sa.Integer(), nullable=False),
        sa.Column("drg_desc", sa.String(255), nullable=False),
        sa.Column("tot_dschrgs", sa.Integer(), nullable=False),
        sa.Column("avg_submtd_cvrd_chrg", sa.Float(), nullable=False),
        sa.Column("avg_tot_pymt_amt", sa.Float(), nullable=False),
        sa.Column("avg_mdcr_pymt_amt", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    # Geography cascade and record lookups filter on (level, description)
    op.create_index(
        "idx_geo_level_desc",
        "medicare_ip_geo_service",
        ["rndrng_prvdr_geo_lvl", "rndrng_prvdr_geo_desc"],
    )
    op.create_index("idx_drg_cd", "medicare_ip_geo_service", ["drg_cd"])


def downgrade() -> None:
    """Drop medicare_ip_geo_service table."""
    op.drop_index("idx_drg_cd", table_name="medicare_ip_geo_service")
    op.drop_index("idx_geo_level_desc", table_name="medicare_ip_geo_service")
    op.drop_table("medicare_ip_geo_service")

"""SQLAlchemy model for Medicare inpatient observations.

One row per (geography, DRG) observation from the CMS "Medicare Inpatient
Hospitals - by Geography and Service" public use file. Column names follow
the source dataset; attribute names are the readable equivalents.
"""

from sqlalchemy import Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from drg_explorer.database import Base


class Observation(Base):
    """A single geography/DRG observation.

    Rows are only ever written by the import script, which replaces the
    whole table in one transaction. The API never mutates them.
    """

    __tablename__ = "medicare_ip_geo_service"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Geography
    geo_level: Mapped[str] = mapped_column("rndrng_prvdr_geo_lvl", String(50), nullable=False)
    geo_code: Mapped[str | None] = mapped_column("rndrng_prvdr_geo_cd", String(20), nullable=True)
    geo_description: Mapped[str] = mapped_column(
        "rndrng_prvdr_geo_desc", String(255), nullable=False
    )

    # Diagnosis-related group
    drg_code: Mapped[int] = mapped_column("drg_cd", Integer, nullable=False)
    drg_description: Mapped[str] = mapped_column("drg_desc", String(255), nullable=False)

    # Measures
    total_discharges: Mapped[int] = mapped_column("tot_dschrgs", Integer, nullable=False)
    avg_submitted_charge: Mapped[float] = mapped_column(
        "avg_submtd_cvrd_chrg", Float, nullable=False
    )
    avg_total_payment: Mapped[float] = mapped_column("avg_tot_pymt_amt", Float, nullable=False)
    avg_medicare_payment: Mapped[float] = mapped_column(
        "avg_mdcr_pymt_amt", Float, nullable=False
    )

    __table_args__ = (
        Index("idx_geo_level_desc", "rndrng_prvdr_geo_lvl", "rndrng_prvdr_geo_desc"),
        Index("idx_drg_cd", "drg_cd"),
    )

    def __repr__(self) -> str:
        return (
            f"<Observation(id={self.id}, geo_level={self.geo_level!r}, "
            f"geo_description={self.geo_description!r}, drg_code={self.drg_code})>"
        )

"""Builders for source rows and archives shared across test modules."""

import csv
import io
import zipfile
from pathlib import Path

from drg_explorer.services.etl import COLUMN_MAP

SOURCE_COLUMNS = list(COLUMN_MAP)

HIP_KNEE = "MAJOR HIP AND KNEE JOINT REPLACEMENT OR REATTACHMENT OF LOWER EXTREMITY WITHOUT MCC"
HIP_FEMUR = "HIP AND FEMUR PROCEDURES EXCEPT MAJOR JOINT WITH MCC"
HEART_FAILURE = "HEART FAILURE AND SHOCK WITH MCC"
HEART_TRANSPLANT = "HEART TRANSPLANT"


def make_raw_row(
    level: str = "National",
    code: str = "",
    geo: str = "National",
    drg: str = "001",
    drg_desc: str = HEART_TRANSPLANT,
    discharges: str = "10",
    submitted: str = "500000.00",
    total_pay: str = "100000.00",
    medicare_pay: str = "90000.00",
) -> dict[str, str]:
    """Build one source row keyed by the CMS CSV headers."""
    return {
        "Rndrng_Prvdr_Geo_Lvl": level,
        "Rndrng_Prvdr_Geo_Cd": code,
        "Rndrng_Prvdr_Geo_Desc": geo,
        "DRG_Cd": drg,
        "DRG_Desc": drg_desc,
        "Tot_Dschrgs": discharges,
        "Avg_Submtd_Cvrd_Chrg": submitted,
        "Avg_Tot_Pymt_Amt": total_pay,
        "Avg_Mdcr_Pymt_Amt": medicare_pay,
    }


def rows_to_csv(rows: list[dict[str, str]]) -> str:
    """Serialize source rows as CSV text with the CMS header."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=SOURCE_COLUMNS)
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue()


def write_archive(path: Path, member: str, rows: list[dict[str, str]]) -> Path:
    """Write a ZIP archive holding ``rows`` as ``member``."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(member, rows_to_csv(rows))
    return path

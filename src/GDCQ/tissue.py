"""
Tissue classification domain model.

Defines the TissueType record and the two static barcode definition tables
that translate the 2-digit tissue code embedded in a barcode into a
human-readable tissue definition:

- TCGA table: tissue code, short letter code, tissue definition.
- TARGET table: tissue code, tissue definition.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class TissueType:
    """
    One row of a barcode definition table.

    Attributes:
        tissue_code: Two-digit code as it appears in the barcode (e.g. '01').
        tissue_definition: Human-readable definition (e.g. 'Primary solid Tumor').
        short_letter_code: Abbreviation used by TCGA (e.g. 'TP'); None for TARGET.
    """

    tissue_code: str
    tissue_definition: str
    short_letter_code: typing.Optional[str] = None


TCGA_TISSUE_TYPES: typing.Tuple[TissueType, ...] = (
    TissueType("01", "Primary solid Tumor", "TP"),
    TissueType("02", "Recurrent Solid Tumor", "TR"),
    TissueType("03", "Primary Blood Derived Cancer - Peripheral Blood", "TB"),
    TissueType("04", "Recurrent Blood Derived Cancer - Bone Marrow", "TRBM"),
    TissueType("05", "Additional - New Primary", "TAP"),
    TissueType("06", "Metastatic", "TM"),
    TissueType("07", "Additional Metastatic", "TAM"),
    TissueType("08", "Human Tumor Original Cells", "THOC"),
    TissueType("09", "Primary Blood Derived Cancer - Bone Marrow", "TBM"),
    TissueType("10", "Blood Derived Normal", "NB"),
    TissueType("11", "Solid Tissue Normal", "NT"),
    TissueType("12", "Buccal Cell Normal", "NBC"),
    TissueType("13", "EBV Immortalized Normal", "NEBV"),
    TissueType("14", "Bone Marrow Normal", "NBM"),
    TissueType("20", "Control Analyte", "CELLC"),
    TissueType("40", "Recurrent Blood Derived Cancer - Peripheral Blood", "TRB"),
    TissueType("50", "Cell Lines", "CELL"),
    TissueType("60", "Primary Xenograft Tissue", "XP"),
    TissueType("61", "Cell Line Derived Xenograft Tissue", "XCL"),
)

TARGET_TISSUE_TYPES: typing.Tuple[TissueType, ...] = (
    TissueType("01", "Primary solid Tumor"),
    TissueType("02", "Recurrent Solid Tumor"),
    TissueType("03", "Primary Blood Derived Cancer - Peripheral Blood"),
    TissueType("04", "Recurrent Blood Derived Cancer - Bone Marrow"),
    TissueType("05", "Additional - New Primary"),
    TissueType("06", "Metastatic"),
    TissueType("07", "Additional Metastatic"),
    TissueType("08", "Tissue disease-specific post-adjuvant therapy"),
    TissueType("09", "Primary Blood Derived Cancer - Bone Marrow"),
    TissueType("10", "Blood Derived Normal"),
    TissueType("11", "Solid Tissue Normal"),
    TissueType("12", "Buccal Cell Normal"),
    TissueType("13", "EBV Immortalized Normal"),
    TissueType("14", "Bone Marrow Normal"),
    TissueType("15", "Fibroblasts from Bone Marrow Normal"),
    TissueType("16", "Mononuclear Cells from Bone Marrow Normal"),
    TissueType("17", "Lymphatic Tissue Normal (including centroblasts)"),
    TissueType("20", "Control Analyte"),
    TissueType("40", "Recurrent Blood Derived Cancer - Peripheral Blood"),
    TissueType("41", "Blood Derived Cancer- Bone Marrow, Post-treatment"),
    TissueType("42", "Blood Derived Cancer- Peripheral Blood, Post-treatment"),
    TissueType("50", "Cell line from patient tumor"),
    TissueType("60", "Xenograft from patient not grown as intermediate on plastic tissue culture dish"),
    TissueType("61", "Xenograft grown in mice from established cell lines"),
    TissueType("99", "Granulocytes after a Ficoll separation"),
)

TISSUE_TABLES: dict[str, typing.Tuple[TissueType, ...]] = {
    "TCGA": TCGA_TISSUE_TYPES,
    "TARGET": TARGET_TISSUE_TYPES,
}

# Every label accepted as a sample type, across both tables
SAMPLE_TYPE_VOCABULARY: typing.FrozenSet[str] = frozenset(
    tissue.tissue_definition
    for table in TISSUE_TABLES.values()
    for tissue in table
)


def barcode_definition(table: str = "TCGA") -> pd.DataFrame:
    """
    Return a fresh DataFrame view of one barcode definition table.

    The TCGA frame has columns tissue_code, short_letter_code and
    tissue_definition; the TARGET frame omits short_letter_code.
    Callers may modify the returned frame; the module tables stay untouched.
    """
    try:
        rows = TISSUE_TABLES[table.upper()]
    except KeyError:
        raise ValueError(f"Unknown barcode definition table: {table!r}")
    columns = ["tissue_code", "tissue_definition"]
    if table.upper() == "TCGA":
        columns = ["tissue_code", "short_letter_code", "tissue_definition"]
    return pd.DataFrame(
        [{column: getattr(row, column) for column in columns} for row in rows],
        columns=columns,
    )

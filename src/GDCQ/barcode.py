"""
Barcode extraction and decoding.

Barcodes are pulled out of each hit's nested case records with a regular
expression chosen by data category, then decomposed by fixed character
offsets according to one of two grammars:

    TARGET-20-PARUDL-03A-01R        (TARGET, long form)
           ^^ ^^^^^^ ^^   ^
           |  |      |    nucleic_acid_code [23:24]
           |  |      tissue_code            [17:19]
           |  case_unique_id                [10:16]
           code                             [7:9]

    TCGA-OR-A5LR-01A-11D-A29H-01    (TCGA, short form)
    patient [0:12], sample [0:16], tissue_code [13:15]

The tissue code is joined against the grammar's barcode definition table.
"""

from __future__ import annotations

import logging
import re
import typing
from dataclasses import replace
from enum import Enum

import pandas as pd

from .criteria import CASE_LEVEL_CATEGORIES
from .errors import UnknownTissueCodeError, UnrecognizedBarcodeGrammarError
from .hit import Hit
from .tissue import barcode_definition

LOGGER = logging.getLogger(__name__)

_A = "[A-Za-z0-9]"

# Patient / case level barcodes (Clinical and Biospecimen files)
CASE_BARCODE_PATTERN = re.compile(
    rf"TCGA-{_A}{{2}}-{_A}{{4}}|TARGET-{_A}{{2}}-{_A}{{6}}"
)
# Aliquot level barcodes (every other category)
ALIQUOT_BARCODE_PATTERN = re.compile(
    rf"{_A}{{4}}-{_A}{{2}}-{_A}{{4}}-{_A}{{3}}-{_A}{{2,3}}-{_A}{{4}}-{_A}{{2}}"
    rf"|{_A}{{6}}-{_A}{{2}}-{_A}{{6}}-{_A}{{3}}-{_A}{{3}}"
)


class BarcodeGrammar(Enum):
    """Known barcode families, keyed by prefix."""

    TARGET = "TARGET"
    TCGA = "TCGA"

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def fields(self) -> dict[str, typing.Tuple[int, int]]:
        return _GRAMMAR_FIELDS[self]


_GRAMMAR_FIELDS: dict[BarcodeGrammar, dict[str, typing.Tuple[int, int]]] = {
    BarcodeGrammar.TARGET: {
        "code": (7, 9),
        "case_unique_id": (10, 16),
        "tissue_code": (17, 19),
        "nucleic_acid_code": (23, 24),
    },
    BarcodeGrammar.TCGA: {
        "patient": (0, 12),
        "sample": (0, 16),
        "tissue_code": (13, 15),
    },
}


def extraction_pattern(data_category: str) -> re.Pattern[str]:
    if data_category in CASE_LEVEL_CATEGORIES:
        return CASE_BARCODE_PATTERN
    return ALIQUOT_BARCODE_PATTERN


def _iter_strings(node: typing.Any) -> typing.Iterator[str]:
    # depth-first, in document order
    if isinstance(node, str):
        yield node
    elif isinstance(node, dict):
        for value in node.values():
            yield from _iter_strings(value)
    elif isinstance(node, (list, tuple)):
        for item in node:
            yield from _iter_strings(item)


def extract_barcode(case: typing.Any, pattern: re.Pattern[str]) -> typing.Optional[str]:
    """First substring of any string inside `case` that matches `pattern`."""
    for text in _iter_strings(case):
        m = pattern.search(text)
        if m:
            return m.group(0)
    return None


def extract_barcodes(cases: typing.Iterable[typing.Any], pattern: re.Pattern[str]) -> typing.Tuple[str, ...]:
    """One barcode per case record; cases without a match are dropped."""
    barcodes = (extract_barcode(case, pattern) for case in cases)
    return tuple(b for b in barcodes if b is not None)


def detect_grammar(barcodes: typing.Sequence[str]) -> typing.Optional[BarcodeGrammar]:
    """
    The grammar shared by every barcode of the batch.

    Returns None for an empty batch and raises UnrecognizedBarcodeGrammarError
    when the barcodes do not all start with the same known prefix.
    """
    if not barcodes:
        return None
    for grammar in BarcodeGrammar:
        if all(barcode.startswith(grammar.prefix) for barcode in barcodes):
            return grammar
    raise UnrecognizedBarcodeGrammarError(barcodes)


def expand_barcode_info(barcodes: typing.Sequence[str], drop_unknown: bool = False) -> pd.DataFrame:
    """
    Decode a uniform batch of barcodes into a DataFrame.

    One row per input barcode, indexed by its position in `barcodes`, with
    the grammar's fields plus the joined tissue_definition (and
    short_letter_code for TCGA). Barcodes that carry no tissue code keep
    their row with a missing tissue_definition.

    Raises UnknownTissueCodeError for tissue codes missing from the table,
    unless `drop_unknown` is set, in which case those rows are left out.
    """
    grammar = detect_grammar(barcodes)
    if grammar is None:
        return pd.DataFrame(columns=["barcode", "tissue_code", "tissue_definition"])

    frame = pd.DataFrame({"barcode": list(barcodes)})
    frame["position"] = range(len(frame))
    for name, (start, stop) in grammar.fields.items():
        frame[name] = frame["barcode"].str.slice(start, stop)

    definitions = barcode_definition(grammar.value)
    has_code = frame["tissue_code"].str.len() == 2
    unknown = has_code & ~frame["tissue_code"].isin(definitions["tissue_code"])
    if unknown.any():
        if not drop_unknown:
            raise UnknownTissueCodeError(
                sorted(set(frame.loc[unknown, "tissue_code"])),
                frame.loc[unknown, "barcode"],
            )
        LOGGER.debug(f"Dropping {int(unknown.sum())} barcodes with unknown tissue codes")
        frame = frame[~unknown]

    merged = frame.merge(definitions, on="tissue_code", how="left", sort=False)
    # the join may reorder rows; restore the original barcode order
    merged = merged.sort_values("position", kind="stable").set_index("position")
    merged.index.name = None
    return merged


class BarcodeDecoder:
    """
    Attaches barcodes and tissue definitions to hits.

    - extract one barcode per case record (pattern chosen by category)
    - drop hits with no barcode at all
    - decode the primary barcodes as one batch and join the tissue table
    """

    def __init__(self, drop_unknown_tissue: bool = False):
        self.drop_unknown_tissue = drop_unknown_tissue

    def decode(self, hits: typing.Sequence[Hit], data_category: str) -> list[Hit]:
        pattern = extraction_pattern(data_category)
        with_barcodes: list[Hit] = []
        for hit in hits:
            barcodes = extract_barcodes(hit.cases, pattern)
            if not barcodes:
                LOGGER.debug(f"No barcode found in the cases of {hit.file_name!r}; dropping it")
                continue
            with_barcodes.append(replace(hit, barcodes=barcodes))

        info = expand_barcode_info(
            [hit.barcode for hit in with_barcodes], drop_unknown=self.drop_unknown_tissue
        )
        decoded: list[Hit] = []
        for position, definition in info["tissue_definition"].items():
            decoded.append(
                replace(
                    with_barcodes[position],
                    tissue_definition=None if pd.isna(definition) else str(definition),
                )
            )
        return decoded

"""
Error taxonomy and non-fatal notices for GDC queries.

Fatal conditions are exceptions deriving from `GDCQueryError`. Validation
errors additionally derive from `ValueError` and carry the rejected value
plus the list of values that would have been accepted.

Non-fatal conditions are `Notice` value objects. They are never raised:
`emit_notice` logs them and records them as warnings on a stairval notepad.
"""

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass

from stairval.notepad import Notepad

LOGGER = logging.getLogger(__name__)


class GDCQueryError(RuntimeError):
    """Base class for every fatal query error."""


class InvalidCriteriaError(GDCQueryError, ValueError):
    """A query argument that is not in the list of acceptable values."""

    argument = "query"

    def __init__(self, value: typing.Any, valid_values: typing.Iterable[str]):
        self.value = value
        self.valid_values = list(valid_values)
        listing = "".join(f"\n  => {valid}" for valid in self.valid_values)
        super().__init__(
            f"Please set a valid {self.argument} argument from the list below:{listing}"
        )


class InvalidProjectError(InvalidCriteriaError):
    argument = "project"


class InvalidCategoryError(InvalidCriteriaError):
    argument = "data_category"


class InvalidBarcodeDefinitionError(InvalidCriteriaError):
    argument = "sample_type"


class InvalidPlatformError(InvalidCriteriaError):
    argument = "platform"


class InvalidDataTypeError(InvalidCriteriaError):
    argument = "data_type"


class InvalidWorkflowTypeError(InvalidCriteriaError):
    argument = "workflow_type"


class EmptyResultError(GDCQueryError):
    def __init__(self):
        super().__init__("Sorry, no results were found for this query")


class UnrecognizedBarcodeGrammarError(GDCQueryError):
    """The extracted barcodes do not all belong to one known barcode family."""

    def __init__(self, barcodes: typing.Sequence[str]):
        self.barcodes = list(barcodes)
        sample = ", ".join(repr(b) for b in self.barcodes[:5])
        super().__init__(
            f"Cannot decode a batch of {len(self.barcodes)} barcodes that do not share "
            f"a single known prefix family (TCGA or TARGET): {sample}"
        )


class UnknownTissueCodeError(GDCQueryError):
    def __init__(self, codes: typing.Iterable[str], barcodes: typing.Iterable[str]):
        self.codes = list(codes)
        self.barcodes = list(barcodes)
        super().__init__(
            f"Tissue codes {self.codes} are not in the barcode definition table "
            f"(barcodes: {self.barcodes})"
        )


class RepositoryTransportError(GDCQueryError):
    def __init__(self, url: str, reason: Exception | str):
        self.url = url
        super().__init__(f"Failed GET {url}: {reason}")


class DeprecatedEntryPointError(GDCQueryError):
    def __init__(self, name: str, replacement: str):
        self.replacement = replacement
        super().__init__(
            f"TCGA data moved from the DCC server to the GDC server. "
            f"{name} is no longer available, please use {replacement}"
        )


# ------------------------------------------------------------------------------
# Notices
# ------------------------------------------------------------------------------


class Notice:
    """A non-fatal condition worth reporting to the user."""

    @property
    def message(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class IgnoredPlatformNotice(Notice):
    platform: str

    @property
    def message(self) -> str:
        return (
            f"Platform information is only available for legacy database. "
            f"Platform {self.platform!r} will be ignored"
        )


@dataclass(frozen=True)
class UnmatchedExperimentalStrategyNotice(Notice):
    requested: typing.Tuple[str, ...]
    valid_values: typing.Tuple[str, ...]

    @property
    def message(self) -> str:
        listing = "".join(f"\n  => {valid}" for valid in self.valid_values)
        return (
            f"The argument experimental_strategy {list(self.requested)} does not match "
            f"any of the results; results were not filtered by it. Possible values:{listing}"
        )


@dataclass(frozen=True)
class DuplicateCaseNotice(Notice):
    cases: typing.Tuple[str, ...]

    @property
    def message(self) -> str:
        return (
            f"There are more than one file for the same case {list(self.cases)}. "
            f"Please verify query results."
        )


def emit_notice(notice: Notice, notepad: Notepad) -> None:
    LOGGER.warning(notice.message)
    notepad.add_warning(notice.message)

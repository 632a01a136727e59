"""
Result filter pipeline.

Hits pass through a fixed sequence of stages. A stage whose criterion is
UNSET leaves the hits alone; otherwise it keeps the hits its matcher accepts.
What happens when a non-empty input has no match at all depends on the
stage's FailurePolicy:

    HARD   -> raise the stage's InvalidCriteriaError listing observed values
    SOFT   -> report the stage's notice and keep every hit
    SILENT -> keep nothing, without complaint

Stages never add or reorder hits.
"""

from __future__ import annotations

import logging
import re
import typing
from dataclasses import dataclass
from enum import Enum, auto

from .criteria import UNSET, QueryCriteria
from .errors import (
    InvalidCriteriaError,
    InvalidDataTypeError,
    InvalidPlatformError,
    InvalidWorkflowTypeError,
    Notice,
    UnmatchedExperimentalStrategyNotice,
)
from .hit import Hit

LOGGER = logging.getLogger(__name__)

Values = typing.Tuple[str, ...]
Matcher = typing.Callable[[Values], typing.Callable[[Hit], bool]]

# Logical file type labels -> regular expressions searched in file names
FILE_TYPE_PATTERNS = {
    "normalized_results": r"normalized_results",
    "results": r"(?<!normalized_)results",
    "nocnv_hg18": r"nocnv_hg18",
    "nocnv_hg18.seg": r"nocnv_hg18",
    "cnv_hg18": r"(?<!nocnv_)hg18\.seg",
    "hg18.seg": r"(?<!nocnv_)hg18\.seg",
    "nocnv_hg19": r"nocnv_hg19",
    "nocnv_hg19.seg": r"nocnv_hg19",
    "cnv_hg19": r"(?<!nocnv_)hg19\.seg",
    "hg19.seg": r"(?<!nocnv_)hg19\.seg",
}


class FailurePolicy(Enum):
    HARD = auto()
    SOFT = auto()
    SILENT = auto()


def file_type_pattern(label: str) -> re.Pattern[str]:
    """Pattern for a file type label; unknown labels match literally."""
    return re.compile(FILE_TYPE_PATTERNS.get(label, re.escape(label)))


def observed_values(hits: typing.Iterable[Hit], attribute: str) -> list[str]:
    """Distinct non-empty values of `attribute`, in first-seen order."""
    seen: dict[str, None] = {}
    for hit in hits:
        value = getattr(hit, attribute)
        if value is not None and value != "":
            seen.setdefault(str(value), None)
    return list(seen)


def _lower(value: typing.Optional[str]) -> str:
    return "" if value is None else str(value).lower()


# Matchers: requested values -> predicate over hits


def _ci_member(attribute: str) -> Matcher:
    def matcher(values: Values) -> typing.Callable[[Hit], bool]:
        wanted = {v.lower() for v in values}
        return lambda hit: _lower(getattr(hit, attribute)) in wanted
    return matcher


def _exact_member(attribute: str) -> Matcher:
    def matcher(values: Values) -> typing.Callable[[Hit], bool]:
        wanted = set(values)
        return lambda hit: getattr(hit, attribute) in wanted
    return matcher


def _barcode_prefix(values: Values) -> typing.Callable[[Hit], bool]:
    # prefix length is taken from the first requested barcode
    width = len(values[0])
    wanted = set(values)
    return lambda hit: hit.barcode is not None and hit.barcode[:width] in wanted


def _access_substring(values: Values) -> typing.Callable[[Hit], bool]:
    wanted = [v.lower() for v in values]
    return lambda hit: any(w in _lower(hit.access) for w in wanted)


def _file_name_pattern(values: Values) -> typing.Callable[[Hit], bool]:
    patterns = [file_type_pattern(v) for v in values]
    return lambda hit: any(p.search(hit.file_name or "") for p in patterns)


@dataclass(frozen=True)
class FilterStage:
    """
    One step of the pipeline.

    Attributes:
        name: Label used in logs.
        criterion: QueryCriteria attribute holding the requested value(s).
        attribute: Hit attribute whose observed values are listed on failure.
        matcher: Builds the keep-predicate from the requested values.
        policy: What to do when nothing matches.
        error: Raised under FailurePolicy.HARD.
        notice: Reported under FailurePolicy.SOFT.
        legacy_only: Skip the stage unless querying the legacy repository.
    """

    name: str
    criterion: str
    attribute: str
    matcher: Matcher
    policy: FailurePolicy
    error: typing.Optional[typing.Type[InvalidCriteriaError]] = None
    notice: typing.Optional[typing.Callable[[Values, Values], Notice]] = None
    legacy_only: bool = False

    def is_active(self, criteria: QueryCriteria) -> bool:
        if self.legacy_only and not criteria.legacy:
            return False
        return getattr(criteria, self.criterion) is not UNSET

    def apply(
        self,
        hits: typing.Sequence[Hit],
        criteria: QueryCriteria,
        report: typing.Callable[[Notice], None],
    ) -> list[Hit]:
        if not self.is_active(criteria):
            return list(hits)
        requested = getattr(criteria, self.criterion)
        values: Values = requested if isinstance(requested, tuple) else (requested,)
        keep = self.matcher(values)
        kept = [hit for hit in hits if keep(hit)]
        if hits and not kept:
            if self.policy is FailurePolicy.HARD:
                raise self.error(requested, observed_values(hits, self.attribute))
            if self.policy is FailurePolicy.SOFT:
                report(self.notice(values, tuple(observed_values(hits, self.attribute))))
                return list(hits)
        return kept


FILTER_STAGES: typing.Tuple[FilterStage, ...] = (
    FilterStage("platform", "platform", "platform", _ci_member("platform"),
                FailurePolicy.HARD, error=InvalidPlatformError, legacy_only=True),
    FilterStage("sample type", "sample_type", "tissue_definition", _ci_member("tissue_definition"),
                FailurePolicy.SILENT),
    FilterStage("barcode", "barcode", "barcode", _barcode_prefix,
                FailurePolicy.SILENT),
    FilterStage("access", "access", "access", _access_substring,
                FailurePolicy.SILENT),
    FilterStage("experimental strategy", "experimental_strategy", "experimental_strategy",
                _ci_member("experimental_strategy"),
                FailurePolicy.SOFT, notice=UnmatchedExperimentalStrategyNotice),
    FilterStage("data type", "data_type", "data_type", _ci_member("data_type"),
                FailurePolicy.HARD, error=InvalidDataTypeError),
    FilterStage("workflow type", "workflow_type", "workflow_type", _exact_member("workflow_type"),
                FailurePolicy.HARD, error=InvalidWorkflowTypeError),
    FilterStage("file type", "file_type", "file_name", _file_name_pattern,
                FailurePolicy.SILENT),
)


class FilterPipeline:
    def __init__(self, stages: typing.Sequence[FilterStage] = FILTER_STAGES):
        self.stages = tuple(stages)

    def run(
        self,
        hits: typing.Sequence[Hit],
        criteria: QueryCriteria,
        report: typing.Callable[[Notice], None],
    ) -> list[Hit]:
        current = list(hits)
        for stage in self.stages:
            before = len(current)
            current = stage.apply(current, criteria, report)
            if stage.is_active(criteria):
                LOGGER.debug(f"Filter {stage.name!r}: {before} -> {len(current)} hits")
        return current

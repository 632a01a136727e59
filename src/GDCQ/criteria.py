"""
Query criteria domain model.

Every optional filter argument is tri-state on input: not supplied, an
explicit False, or a value. The first two collapse into the single `UNSET`
sentinel, which every downstream stage reads as "ignore this filter".
"""

from __future__ import annotations

import typing
from dataclasses import dataclass, fields

# Categories whose files are attached to whole cases rather than aliquots
CASE_LEVEL_CATEGORIES = frozenset({"Clinical", "Biospecimen"})


class _Unset:
    """Marker for an optional criterion that was not supplied (or was False)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Unset, ())


UNSET = _Unset()

OptionalText = typing.Union[str, _Unset]
OptionalTexts = typing.Union[typing.Tuple[str, ...], _Unset]


def unset_if_false(value: typing.Any) -> typing.Any:
    """
    Collapse an optional argument to UNSET or a usable value.

    - None (not supplied) -> UNSET
    - False -> UNSET
    - '' or an empty sequence -> UNSET
    - a sequence whose items are all False -> UNSET
    - anything else is returned unchanged
    """
    if value is None or value is False or value is UNSET:
        return UNSET
    if isinstance(value, str):
        return value if value.strip() else UNSET
    if isinstance(value, (list, tuple, set, frozenset)):
        if not value or all(item is False for item in value):
            return UNSET
    return value


def _as_text(value: typing.Any) -> OptionalText:
    value = unset_if_false(value)
    return value if value is UNSET else str(value).strip()


def _as_texts(value: typing.Any) -> OptionalTexts:
    """Normalize a string or a sequence of strings into a tuple of strings."""
    value = unset_if_false(value)
    if value is UNSET:
        return UNSET
    if isinstance(value, str):
        return (value.strip(),)
    items = tuple(str(item).strip() for item in value if item is not False)
    return items or UNSET


@dataclass(frozen=True)
class QueryCriteria:
    """
    Everything a caller asked for, after normalization.

    Attributes:
        project: One or more project identifiers (e.g. ('TCGA-ACC',)).
        data_category: GDC data category (e.g. 'Copy Number Variation').
        data_type: Data type filter, or UNSET.
        workflow_type: Workflow type filter, or UNSET.
        legacy: True to search the legacy repository.
        access: Access level filter ('open' or 'controlled'), or UNSET.
        platform: Platform filter (legacy repository only), or UNSET.
        file_type: Logical file type label (e.g. 'hg19.seg'), or UNSET.
        barcode: Barcode prefixes, or UNSET.
        experimental_strategy: Experimental strategies, or UNSET.
        sample_type: Tissue definitions, or UNSET.
    """

    project: typing.Tuple[str, ...]
    data_category: str
    data_type: OptionalText = UNSET
    workflow_type: OptionalText = UNSET
    legacy: bool = False
    access: OptionalText = UNSET
    platform: OptionalText = UNSET
    file_type: OptionalText = UNSET
    barcode: OptionalTexts = UNSET
    experimental_strategy: OptionalTexts = UNSET
    sample_type: OptionalTexts = UNSET

    def __post_init__(self):
        if not self.project or not all(self.project):
            raise ValueError(f"At least one project is required, got {self.project!r}")
        if not self.data_category:
            raise ValueError("data_category is required")

    @classmethod
    def from_arguments(
        cls,
        project: typing.Union[str, typing.Sequence[str]],
        data_category: str,
        data_type: typing.Any = None,
        workflow_type: typing.Any = None,
        legacy: bool = False,
        access: typing.Any = None,
        platform: typing.Any = None,
        file_type: typing.Any = None,
        barcode: typing.Any = None,
        experimental_strategy: typing.Any = None,
        sample_type: typing.Any = None,
    ) -> "QueryCriteria":
        projects = (project,) if isinstance(project, str) else tuple(project)
        return cls(
            project=tuple(p.strip() for p in projects),
            data_category=str(data_category).strip(),
            data_type=_as_text(data_type),
            workflow_type=_as_text(workflow_type),
            legacy=bool(legacy),
            access=_as_text(access),
            platform=_as_text(platform),
            file_type=_as_text(file_type),
            barcode=_as_texts(barcode),
            experimental_strategy=_as_texts(experimental_strategy),
            sample_type=_as_texts(sample_type),
        )

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not UNSET

    @property
    def is_case_level(self) -> bool:
        return self.data_category in CASE_LEVEL_CATEGORIES

    def as_dict(self) -> dict[str, typing.Any]:
        """Echo every criterion, with UNSET reported as None and tuples as lists."""
        echoed: dict[str, typing.Any] = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if value is UNSET:
                value = None
            elif isinstance(value, tuple):
                value = list(value)
            echoed[field.name] = value
        return echoed

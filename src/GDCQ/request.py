"""
Search request construction.

A request is a pure function of (projects, category, legacy, size): the
endpoint is chosen by the legacy flag, the expansion clause by the category
dispatch table below, and the filter expression is compact JSON,
percent-encoded as a whole.

Environment
-----------
GDC_BASE_URL : Optional base URL override (default "https://api.gdc.cancer.gov")
"""

from __future__ import annotations

import json
import os
import typing
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote as _urlencode

from .criteria import CASE_LEVEL_CATEGORIES, QueryCriteria

GDC_BASE_URL = os.getenv("GDC_BASE_URL", "https://api.gdc.cancer.gov").rstrip("/")


def files_endpoint(legacy: bool, base_url: str = GDC_BASE_URL) -> str:
    return f"{base_url}/legacy/files/?" if legacy else f"{base_url}/files/?"


class ExpansionSet(Enum):
    """The three `expand=` clauses, from narrowest to broadest."""

    PROTEIN_LEGACY = "cases.samples.portions,cases.project,center,analysis"
    CASE_LEVEL = "cases,cases.project,center,analysis"
    ALIQUOT = "cases.samples.portions.analytes.aliquots,cases.project,center,analysis"


# (category, legacy) -> expansion; anything missing falls back to ALIQUOT
EXPANSION_BY_CATEGORY: dict[typing.Tuple[str, bool], ExpansionSet] = {
    ("Protein expression", True): ExpansionSet.PROTEIN_LEGACY,
    **{
        (category, legacy): ExpansionSet.CASE_LEVEL
        for category in CASE_LEVEL_CATEGORIES
        for legacy in (False, True)
    },
}


def select_expansion(data_category: str, legacy: bool) -> ExpansionSet:
    return EXPANSION_BY_CATEGORY.get((data_category, bool(legacy)), ExpansionSet.ALIQUOT)


def build_filters(projects: typing.Sequence[str], data_category: str) -> str:
    """
    Percent-encoded filter expression:
    projects AND data category, both as `in` clauses.
    """
    expression = {
        "op": "and",
        "content": [
            {"op": "in", "content": {"field": "cases.project.project_id", "value": list(projects)}},
            {"op": "in", "content": {"field": "files.data_category", "value": [data_category]}},
        ],
    }
    return _urlencode(json.dumps(expression, separators=(",", ":")), safe="")


@dataclass(frozen=True)
class GDCRequest:
    """Endpoint plus ordered query parameters of one search request."""

    endpoint: str
    params: typing.Tuple[typing.Tuple[str, str], ...]

    @property
    def query_string(self) -> str:
        return "&".join(f"{key}={value}" for key, value in self.params)

    @property
    def url(self) -> str:
        return self.endpoint + self.query_string


def build_request(
    projects: typing.Sequence[str],
    data_category: str,
    legacy: bool,
    size: int,
    base_url: str = GDC_BASE_URL,
) -> GDCRequest:
    return GDCRequest(
        endpoint=files_endpoint(legacy, base_url),
        params=(
            ("pretty", "true"),
            ("expand", select_expansion(data_category, legacy).value),
            ("size", str(int(size))),
            ("filters", build_filters(projects, data_category)),
            ("format", "JSON"),
        ),
    )


class RequestBuilder:
    """
    Builds the single search request for a set of criteria.

    The page size is the number of files the catalog reports for each
    (project, category) pair, summed, so that one page holds every hit.
    """

    def __init__(self, catalog, base_url: str = GDC_BASE_URL):
        self._catalog = catalog
        self._base_url = base_url

    def build(self, criteria: QueryCriteria) -> GDCRequest:
        size = sum(
            self._catalog.file_count(project, criteria.data_category, criteria.legacy)
            for project in criteria.project
        )
        return build_request(
            criteria.project,
            criteria.data_category,
            criteria.legacy,
            size,
            base_url=self._base_url,
        )

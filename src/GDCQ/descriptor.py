"""
Query descriptor domain model.

Defines QueryDescriptor: the immutable result of a query, bundling the
normalized criteria with the surviving hits and any notices raised.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass

import pandas as pd

from .criteria import QueryCriteria
from .errors import EmptyResultError, Notice
from .hit import Hit

RESULT_COLUMNS = [
    "file_id",
    "file_name",
    "data_category",
    "data_type",
    "access",
    "experimental_strategy",
    "workflow_type",
    "platform",
    "cases",
    "tissue_definition",
]


@dataclass(frozen=True)
class QueryDescriptor:
    """
    Attributes:
        criteria: The criteria the query ran with.
        results: Surviving hits, in repository order.
        notices: Non-fatal notices reported while the query ran.
    """

    criteria: QueryCriteria
    results: typing.Tuple[Hit, ...]
    notices: typing.Tuple[Notice, ...] = ()

    @property
    def project(self) -> typing.Tuple[str, ...]:
        return self.criteria.project

    @property
    def data_category(self) -> str:
        return self.criteria.data_category

    @property
    def legacy(self) -> bool:
        return self.criteria.legacy

    def summary(self) -> dict[str, typing.Any]:
        return self.criteria.as_dict()

    def to_frame(self) -> pd.DataFrame:
        """One row per hit; `cases` holds the primary barcode."""
        rows = [
            {
                "file_id": hit.file_id,
                "file_name": hit.file_name,
                "data_category": hit.data_category,
                "data_type": hit.data_type,
                "access": hit.access,
                "experimental_strategy": hit.experimental_strategy,
                "workflow_type": hit.workflow_type,
                "platform": hit.platform,
                "cases": hit.barcode,
                "tissue_definition": hit.tissue_definition,
            }
            for hit in self.results
        ]
        return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def assemble_descriptor(
    criteria: QueryCriteria,
    hits: typing.Sequence[Hit],
    notices: typing.Sequence[Notice] = (),
) -> QueryDescriptor:
    if not hits:
        raise EmptyResultError()
    return QueryDescriptor(criteria=criteria, results=tuple(hits), notices=tuple(notices))

"""
GDC query entry points.

`gdc_query` is the primary entry point: it validates the criteria, builds and
runs one search request, decodes barcodes, filters the hits and returns a
QueryDescriptor. `GDCQuery` holds the collaborators (catalog, client,
decoder, filter pipeline) so they can be swapped out.
"""

from __future__ import annotations

import logging
import typing

from stairval.notepad import Notepad, create_notepad

from .barcode import BarcodeDecoder
from .catalog import GDCCatalog
from .client import RepositoryClient
from .criteria import QueryCriteria
from .descriptor import QueryDescriptor, assemble_descriptor
from .errors import DeprecatedEntryPointError, DuplicateCaseNotice, Notice, emit_notice
from .filters import FilterPipeline
from .hit import Hit
from .request import RequestBuilder
from .validation import CriteriaValidator

LOGGER = logging.getLogger(__name__)


def find_duplicate_cases(hits: typing.Iterable[Hit]) -> list[str]:
    """Primary barcodes that occur on more than one hit, in first-seen order."""
    counts: dict[str, int] = {}
    for hit in hits:
        if hit.barcode is not None:
            counts[hit.barcode] = counts.get(hit.barcode, 0) + 1
    return [barcode for barcode, count in counts.items() if count > 1]


class GDCQuery:
    def __init__(
        self,
        catalog=None,
        client: typing.Optional[RepositoryClient] = None,
        decoder: typing.Optional[BarcodeDecoder] = None,
        pipeline: typing.Optional[FilterPipeline] = None,
    ):
        self._client = client or RepositoryClient()
        self._catalog = catalog or GDCCatalog(self._client)
        self._decoder = decoder or BarcodeDecoder()
        self._pipeline = pipeline or FilterPipeline()

    def run(self, criteria: QueryCriteria, notepad: typing.Optional[Notepad] = None) -> QueryDescriptor:
        """
        Process:
        1) validate criteria against the catalogs
        2) build the request, sized to hold every file
        3) fetch hits and decode their barcodes
        4) run the filter pipeline
        5) report duplicated cases
        6) assemble the descriptor (fails when nothing is left)
        """
        if notepad is None:
            notepad = create_notepad("gdc-query")
        notices: list[Notice] = []

        def report(notice: Notice) -> None:
            notices.append(notice)
            emit_notice(notice, notepad)

        CriteriaValidator(self._catalog).validate(criteria, report)

        request = RequestBuilder(self._catalog).build(criteria)
        LOGGER.debug(f"Request URL: {request.url}")
        LOGGER.info("Accessing GDC. This might take a while...")
        records = self._client.fetch(request)

        hits = [Hit.from_json(record) for record in records]
        hits = self._decoder.decode(hits, criteria.data_category)
        hits = self._pipeline.run(hits, criteria, report)

        duplicates = find_duplicate_cases(hits)
        if duplicates:
            report(DuplicateCaseNotice(tuple(duplicates)))

        descriptor = assemble_descriptor(criteria, hits, notices)
        LOGGER.info(f"Query matched {len(descriptor.results)} files")
        return descriptor


def gdc_query(
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
    *,
    drop_unknown_tissue: bool = False,
    notepad: typing.Optional[Notepad] = None,
    catalog=None,
    client: typing.Optional[RepositoryClient] = None,
) -> QueryDescriptor:
    """
    Query GDC for files of a project and data category, then narrow them.

    Optional filters may be omitted or passed as False; both mean "do not
    filter". `platform` is only honored together with `legacy=True`.

    Parameters
    ----------
    project : str or sequence of str
        Project identifier(s), e.g. 'TCGA-ACC'.
    data_category : str
        Data category valid for the project, e.g. 'Copy Number Variation'.
    barcode : sequence of str, optional
        Barcode prefixes; all are compared at the length of the first one.
    sample_type : sequence of str, optional
        Tissue definitions, e.g. ['Primary solid Tumor'].
    drop_unknown_tissue : bool
        Silently drop hits whose tissue code is not in the definition table
        instead of failing.

    Returns
    -------
    QueryDescriptor

    Raises
    ------
    InvalidCriteriaError
        Subclass naming the invalid argument and listing valid values.
    EmptyResultError
        If no file survives the filters.
    RepositoryTransportError
        If GDC cannot be reached.
    """
    criteria = QueryCriteria.from_arguments(
        project,
        data_category,
        data_type=data_type,
        workflow_type=workflow_type,
        legacy=legacy,
        access=access,
        platform=platform,
        file_type=file_type,
        barcode=barcode,
        experimental_strategy=experimental_strategy,
        sample_type=sample_type,
    )
    query = GDCQuery(
        catalog=catalog,
        client=client,
        decoder=BarcodeDecoder(drop_unknown_tissue=drop_unknown_tissue),
    )
    return query.run(criteria, notepad)


def tcga_query(*args, **kwargs):
    raise DeprecatedEntryPointError("tcga_query", "gdc_query")


def tcga_query_maf(*args, **kwargs):
    raise DeprecatedEntryPointError("tcga_query_maf", "query_maf")

"""
Mutation annotation (MAF) cohort helper.

Composes `gdc_query` with two caller-supplied collaborators:
  - downloader(descriptor, directory): materializes the files on disk
  - reader(paths): parses the downloaded MAF files into a table

Only the query and the on-disk layout live here.
"""

from __future__ import annotations

import pathlib
import typing

from .descriptor import QueryDescriptor
from .query import gdc_query

MAF_DATA_CATEGORY = "Simple Nucleotide Variation"
MAF_DATA_TYPE = "Masked Somatic Mutation"


def materialized_paths(descriptor: QueryDescriptor, directory: str = "GDCdata") -> list[pathlib.Path]:
    """
    Where the downloader puts each file:
    <directory>/<project>/<legacy|harmonized>/<category>/<data type>/<file id>/<file name>
    Spaces in category and data type become underscores. Unique, in hit order.
    Files are placed under the first project of the query.
    """
    project = descriptor.project[0]
    repository = "legacy" if descriptor.legacy else "harmonized"
    paths: dict[pathlib.Path, None] = {}
    for hit in descriptor.results:
        path = (
            pathlib.Path(directory)
            / project
            / repository
            / (hit.data_category or "").replace(" ", "_")
            / (hit.data_type or "").replace(" ", "_")
            / hit.file_id
            / hit.file_name
        )
        paths.setdefault(path, None)
    return list(paths)


def query_maf(
    tumor: str,
    downloader: typing.Callable[[QueryDescriptor, str], typing.Any],
    reader: typing.Callable[[typing.Sequence[pathlib.Path]], typing.Any],
    directory: str = "GDCdata",
    **query_options,
):
    """
    Query, download and read the open masked somatic mutation files of one
    TCGA tumor (e.g. 'ACC' for project 'TCGA-ACC').
    """
    if not tumor or not tumor.strip():
        raise ValueError("Please, set tumor argument (e.g. 'ACC')")
    descriptor = gdc_query(
        f"TCGA-{tumor.strip().upper()}",
        MAF_DATA_CATEGORY,
        data_type=MAF_DATA_TYPE,
        **query_options,
    )
    downloader(descriptor, directory)
    return reader(materialized_paths(descriptor, directory))

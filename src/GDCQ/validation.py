"""
Up-front checks on query criteria, run before anything is fetched.
"""

from __future__ import annotations

import typing

from .criteria import UNSET, QueryCriteria
from .errors import (
    IgnoredPlatformNotice,
    InvalidBarcodeDefinitionError,
    InvalidCategoryError,
    InvalidProjectError,
    Notice,
)
from .tissue import SAMPLE_TYPE_VOCABULARY

ReportNotice = typing.Callable[[Notice], None]


class CriteriaValidator:
    def __init__(self, catalog):
        self._catalog = catalog

    def validate_project(self, project: str) -> None:
        project_ids = self._catalog.project_ids()
        if project not in project_ids:
            raise InvalidProjectError(project, sorted(set(project_ids)))

    def validate_category(self, project: str, data_category: str, legacy: bool) -> None:
        categories = self._catalog.data_categories(project, legacy)
        if data_category not in categories:
            raise InvalidCategoryError(data_category, sorted(set(categories)))

    @staticmethod
    def validate_sample_type(values: typing.Iterable[str]) -> None:
        """Every sample type must be a tissue definition from a barcode table (any case)."""
        known = {definition.lower() for definition in SAMPLE_TYPE_VOCABULARY}
        for value in values:
            if value.lower() not in known:
                raise InvalidBarcodeDefinitionError(value, sorted(SAMPLE_TYPE_VOCABULARY))

    def validate(self, criteria: QueryCriteria, report: ReportNotice) -> None:
        """
        Run every check in order:
          - each project exists
          - the category exists for each project in the selected repository
          - sample types are known tissue definitions
          - a platform outside the legacy repository is reported, then ignored
        """
        for project in criteria.project:
            self.validate_project(project)
            self.validate_category(project, criteria.data_category, criteria.legacy)
        if criteria.sample_type is not UNSET:
            self.validate_sample_type(criteria.sample_type)
        if criteria.platform is not UNSET and not criteria.legacy:
            report(IgnoredPlatformNotice(criteria.platform))

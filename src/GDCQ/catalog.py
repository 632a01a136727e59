"""
Project, category and file-count catalogs.

`GDCCatalog` answers the three questions the query needs before it runs:
which projects exist, which data categories a project has in a repository,
and how many files a (project, category) pair holds. Any object with the
same three methods can stand in for it (tests use an in-memory one).
"""

from __future__ import annotations

import typing
from urllib.parse import quote as _urlencode

from .client import RepositoryClient
from .request import GDC_BASE_URL


class Catalog(typing.Protocol):
    def project_ids(self) -> typing.List[str]: ...

    def data_categories(self, project: str, legacy: bool) -> typing.List[str]: ...

    def file_count(self, project: str, data_category: str, legacy: bool) -> int: ...


class GDCCatalog:
    """Catalog backed by the GDC `projects` endpoints. Nothing is cached."""

    def __init__(self, client: typing.Optional[RepositoryClient] = None, base_url: str = GDC_BASE_URL):
        self._client = client or RepositoryClient()
        self._base_url = base_url

    def project_ids(self) -> typing.List[str]:
        payload = self._client.get_json(f"{self._base_url}/projects?size=1000&format=JSON")
        hits = (payload.get("data") or {}).get("hits") or []
        return [hit["project_id"] for hit in hits if hit.get("project_id")]

    def project_summary(self, project: str, legacy: bool) -> typing.List[dict]:
        """Per-category entries (data_category, file_count, case_count) for a project."""
        prefix = f"{self._base_url}/legacy/projects/" if legacy else f"{self._base_url}/projects/"
        url = (
            f"{prefix}{_urlencode(project, safe='')}"
            "?expand=summary,summary.data_categories&pretty=true"
        )
        payload = self._client.get_json(url)
        summary = (payload.get("data") or {}).get("summary") or {}
        return list(summary.get("data_categories") or [])

    def data_categories(self, project: str, legacy: bool) -> typing.List[str]:
        return [
            entry["data_category"]
            for entry in self.project_summary(project, legacy)
            if entry.get("data_category")
        ]

    def file_count(self, project: str, data_category: str, legacy: bool) -> int:
        return sum(
            int(entry.get("file_count") or 0)
            for entry in self.project_summary(project, legacy)
            if entry.get("data_category") == data_category
        )

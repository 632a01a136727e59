"""
Hit domain model.

Defines the Hit dataclass: one file record returned by the GDC search API,
plus the barcodes and tissue definition decoded from its nested cases.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Hit:
    """
    Represents one file returned by the repository.

    Attributes:
        file_id: GDC file UUID.
        file_name: Name of the file.
        data_category, data_type, access, experimental_strategy, platform:
            Scalar file fields; None when the repository omits them.
        workflow_type: analysis.workflow_type of the file, if any.
        cases: Raw nested case records, in repository order.
        barcodes: One barcode per case record that contains one.
        tissue_definition: Decoded from the primary barcode's tissue code.
    """

    file_id: str
    file_name: str
    data_category: typing.Optional[str] = None
    data_type: typing.Optional[str] = None
    access: typing.Optional[str] = None
    experimental_strategy: typing.Optional[str] = None
    workflow_type: typing.Optional[str] = None
    platform: typing.Optional[str] = None
    cases: typing.Tuple[dict, ...] = field(default=(), repr=False)
    barcodes: typing.Tuple[str, ...] = ()
    tissue_definition: typing.Optional[str] = None

    @classmethod
    def from_json(cls, record: dict) -> "Hit":
        analysis = record.get("analysis") or {}
        return cls(
            file_id=str(record.get("file_id", record.get("id", ""))),
            file_name=str(record.get("file_name", "")),
            data_category=record.get("data_category"),
            data_type=record.get("data_type"),
            access=record.get("access"),
            experimental_strategy=record.get("experimental_strategy"),
            workflow_type=analysis.get("workflow_type") if isinstance(analysis, dict) else None,
            platform=record.get("platform"),
            cases=tuple(record.get("cases") or ()),
        )

    @property
    def barcode(self) -> typing.Optional[str]:
        """The primary barcode: the one found in the first matching case."""
        return self.barcodes[0] if self.barcodes else None

import pytest

from GDCQ.criteria import QueryCriteria
from GDCQ.hit import Hit


class FakeCatalog:
    """In-memory stand-in for GDCCatalog."""

    def __init__(self, projects=None, categories=None, file_counts=None):
        self.projects = projects or ["TCGA-ACC", "TARGET-AML"]
        self.categories = categories or {
            ("TCGA-ACC", False): ["Copy Number Variation", "Clinical", "Transcriptome Profiling"],
            ("TCGA-ACC", True): ["Copy number variation", "Gene expression", "Protein expression"],
            ("TARGET-AML", False): ["Transcriptome Profiling"],
        }
        self.file_counts = file_counts or {}

    def project_ids(self):
        return list(self.projects)

    def data_categories(self, project, legacy):
        return list(self.categories.get((project, legacy), []))

    def file_count(self, project, data_category, legacy):
        return self.file_counts.get((project, data_category, legacy), 10)


class FakeClient:
    """Returns canned hit records instead of calling GDC."""

    def __init__(self, records):
        self.records = records
        self.requests = []

    def fetch(self, request):
        self.requests.append(request)
        return list(self.records)


def make_record(
    barcode,
    file_name="sample.txt",
    file_id=None,
    data_type="Copy Number Segment",
    access="open",
    experimental_strategy="Genotyping Array",
    workflow_type="DNAcopy",
    platform=None,
    data_category="Copy Number Variation",
):
    """A GDC hit record whose single case carries `barcode` as an aliquot submitter id."""
    record = {
        "file_id": file_id or f"id-{barcode}-{file_name}",
        "file_name": file_name,
        "data_category": data_category,
        "data_type": data_type,
        "access": access,
        "experimental_strategy": experimental_strategy,
        "analysis": {"workflow_type": workflow_type},
        "cases": [
            {
                "case_id": "9f1c2a4e-0000-4000-8000-000000000000",
                "submitter_id": barcode[:12],
                "samples": [
                    {
                        "submitter_id": barcode[:16],
                        "portions": [{"analytes": [{"aliquots": [{"submitter_id": barcode}]}]}],
                    }
                ],
            }
        ],
    }
    if platform is not None:
        record["platform"] = platform
    return record


def make_hit(barcode="TCGA-OR-A5LR-01A-11D-A29H-01", tissue_definition="Primary solid Tumor", **fields):
    """A Hit that has already been through barcode decoding."""
    defaults = dict(
        file_id=f"id-{barcode}",
        file_name="sample.txt",
        data_category="Copy Number Variation",
        data_type="Copy Number Segment",
        access="open",
        experimental_strategy="Genotyping Array",
        workflow_type="DNAcopy",
        platform=None,
    )
    defaults.update(fields)
    return Hit(barcodes=(barcode,), tissue_definition=tissue_definition, **defaults)


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def criteria() -> QueryCriteria:
    return QueryCriteria.from_arguments("TCGA-ACC", "Copy Number Variation")

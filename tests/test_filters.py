"""
Tests for the result filter pipeline.

Each stage is checked on its own for its failure policy:
- HARD stages raise with the observed values,
- the SOFT stage reports a notice and keeps everything,
- SILENT stages only narrow.
"""

import pytest
from conftest import make_hit

from GDCQ.criteria import QueryCriteria
from GDCQ.errors import (
    InvalidDataTypeError,
    InvalidPlatformError,
    InvalidWorkflowTypeError,
    UnmatchedExperimentalStrategyNotice,
)
from GDCQ.filters import (
    FILTER_STAGES,
    FailurePolicy,
    FilterPipeline,
    file_type_pattern,
    observed_values,
)


def _run(hits, **options):
    notices = []
    criteria = QueryCriteria.from_arguments("TCGA-ACC", "Copy Number Variation", **options)
    kept = FilterPipeline().run(hits, criteria, notices.append)
    return kept, notices


def test_stage_order_and_policies():
    assert [stage.name for stage in FILTER_STAGES] == [
        "platform",
        "sample type",
        "barcode",
        "access",
        "experimental strategy",
        "data type",
        "workflow type",
        "file type",
    ]
    policies = {stage.name: stage.policy for stage in FILTER_STAGES}
    assert policies["platform"] is FailurePolicy.HARD
    assert policies["experimental strategy"] is FailurePolicy.SOFT
    assert policies["file type"] is FailurePolicy.SILENT


def test_unset_criteria_leave_hits_unchanged():
    hits = [make_hit("TCGA-OR-A5LR-01A-11D-A29H-01"), make_hit("TCGA-OR-A5J1-11A-11D-A29H-01")]
    kept, notices = _run(hits, data_type=False, sample_type=False, barcode=False)
    assert kept == hits
    assert notices == []


def test_platform_case_insensitive_on_legacy():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", platform="IlluminaHiSeq_RNASeq"),
        make_hit("TCGA-OR-A5J1-01A-11D-A29H-01", platform="SOLiD_DNASeq"),
    ]
    kept, _ = _run(hits, legacy=True, platform="illuminahiseq_rnaseq")
    assert kept == [hits[0]]


def test_invalid_platform_lists_valid_values():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", platform="IlluminaHiSeq_RNASeq"),
        make_hit("TCGA-OR-A5J1-01A-11D-A29H-01", platform="SOLiD_DNASeq"),
        make_hit("TCGA-OR-A5K0-01A-11D-A29H-01", platform="SOLiD_DNASeq"),
    ]
    with pytest.raises(InvalidPlatformError) as info:
        _run(hits, legacy=True, platform="Affymetrix")
    assert info.value.valid_values == ["IlluminaHiSeq_RNASeq", "SOLiD_DNASeq"]
    assert "=> SOLiD_DNASeq" in str(info.value)


def test_platform_ignored_outside_legacy():
    hits = [make_hit(platform="IlluminaHiSeq_RNASeq")]
    kept, _ = _run(hits, platform="Affymetrix")
    assert kept == hits


def test_sample_type_narrows_case_insensitively():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", tissue_definition="Primary solid Tumor"),
        make_hit("TCGA-OR-A5J1-11A-11D-A29H-01", tissue_definition="Solid Tissue Normal"),
    ]
    kept, _ = _run(hits, sample_type=["primary SOLID tumor"])
    assert kept == [hits[0]]
    assert all(h.tissue_definition.lower() == "primary solid tumor" for h in kept)


def test_barcode_prefix_uses_first_prefix_length():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01"),
        make_hit("TCGA-OR-A5J1-01A-11D-A29H-01"),
        make_hit("TCGA-OR-A5K0-01A-11D-A29H-01"),
    ]
    kept, _ = _run(hits, barcode=["TCGA-OR-A5LR", "TCGA-OR-A5K0"])
    assert kept == [hits[0], hits[2]]
    # a longer second prefix is compared at the first prefix's length and never matches
    kept, _ = _run(hits, barcode=["TCGA-OR-A5LR", "TCGA-OR-A5K0-01A"])
    assert kept == [hits[0]]


def test_access_substring_match():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", access="open"),
        make_hit("TCGA-OR-A5J1-01A-11D-A29H-01", access="controlled"),
    ]
    kept, _ = _run(hits, access="CONTROL")
    assert kept == [hits[1]]


def test_experimental_strategy_unmatched_is_a_notice():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", experimental_strategy="RNA-Seq"),
        make_hit("TCGA-OR-A5J1-01A-11D-A29H-01", experimental_strategy="WXS"),
    ]
    kept, notices = _run(hits, experimental_strategy="Methylation Array")
    assert kept == hits
    assert len(notices) == 1
    assert isinstance(notices[0], UnmatchedExperimentalStrategyNotice)
    assert notices[0].valid_values == ("RNA-Seq", "WXS")


def test_experimental_strategy_partial_match_narrows():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", experimental_strategy="RNA-Seq"),
        make_hit("TCGA-OR-A5J1-01A-11D-A29H-01", experimental_strategy="WXS"),
    ]
    kept, notices = _run(hits, experimental_strategy=["rna-seq", "Bisulfite-Seq"])
    assert kept == [hits[0]]
    assert notices == []


def test_invalid_data_type():
    hits = [make_hit(data_type="Copy Number Segment"), make_hit(data_type="Masked Copy Number Segment")]
    with pytest.raises(InvalidDataTypeError) as info:
        _run(hits, data_type="Gene Expression Quantification")
    assert info.value.valid_values == ["Copy Number Segment", "Masked Copy Number Segment"]
    kept, _ = _run(hits, data_type="masked copy number segment")
    assert kept == [hits[1]]


def test_invalid_workflow_type_lists_every_observed_workflow():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", workflow_type="HTSeq - Counts"),
        make_hit("TCGA-OR-A5J1-01A-11D-A29H-01", workflow_type="HTSeq - FPKM"),
        make_hit("TCGA-OR-A5K0-01A-11D-A29H-01", workflow_type="HTSeq - Counts"),
    ]
    with pytest.raises(InvalidWorkflowTypeError) as info:
        _run(hits, workflow_type="NonExistentWorkflow")
    assert info.value.valid_values == ["HTSeq - Counts", "HTSeq - FPKM"]
    assert info.value.value == "NonExistentWorkflow"


def test_workflow_type_is_exact():
    hits = [make_hit(workflow_type="HTSeq - Counts")]
    with pytest.raises(InvalidWorkflowTypeError):
        _run(hits, workflow_type="htseq - counts")


def test_file_type_hg19_seg_excludes_nocnv():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", file_name="sample.hg19.seg.txt"),
        make_hit("TCGA-OR-A5J1-01A-11D-A29H-01", file_name="sample.nocnv_hg19.seg.txt"),
    ]
    kept, _ = _run(hits, file_type="hg19.seg")
    assert kept == [hits[0]]
    kept, _ = _run(hits, file_type="nocnv_hg19.seg")
    assert kept == [hits[1]]


@pytest.mark.parametrize(
    "label, name, expected",
    [
        ("results", "a.rsem.genes.results", True),
        ("results", "a.rsem.genes.normalized_results", False),
        ("normalized_results", "a.rsem.genes.normalized_results", True),
        ("cnv_hg18", "a.hg18.seg.txt", True),
        ("cnv_hg18", "a.nocnv_hg18.seg.txt", False),
        ("idat", "a_Grn.idat", True),
        ("a.b", "axb", False),
    ],
)
def test_file_type_patterns(label, name, expected):
    assert bool(file_type_pattern(label).search(name)) is expected


def test_pipeline_is_monotonic_and_order_preserving():
    hits = [
        make_hit("TCGA-OR-A5LR-01A-11D-A29H-01", access="open", file_name="1.hg19.seg.txt"),
        make_hit("TCGA-OR-A5J1-11A-11D-A29H-01", access="controlled", tissue_definition="Solid Tissue Normal"),
        make_hit("TCGA-OR-A5K0-01A-11D-A29H-01", access="open", file_name="3.hg19.seg.txt"),
        make_hit("TCGA-OR-A5K1-01A-11D-A29H-01", access="open", file_name="4.nocnv_hg19.seg.txt"),
    ]
    criteria = QueryCriteria.from_arguments(
        "TCGA-ACC",
        "Copy Number Variation",
        sample_type=["Primary solid Tumor"],
        access="open",
        file_type="hg19.seg",
    )
    current = hits
    for stage in FILTER_STAGES:
        after = stage.apply(current, criteria, lambda notice: None)
        assert len(after) <= len(current)
        assert all(hit in current for hit in after)
        assert after == [hit for hit in current if hit in after]
        current = after
    assert current == [hits[0], hits[2]]


def test_hard_stage_does_not_fire_on_empty_input():
    hits = [make_hit(access="open")]
    kept, _ = _run(hits, access="controlled", workflow_type="NonExistentWorkflow")
    assert kept == []


def test_observed_values_first_seen_order():
    hits = [make_hit(platform=None), make_hit(platform="B"), make_hit(platform="A"), make_hit(platform="B")]
    assert observed_values(hits, "platform") == ["B", "A"]

from pathlib import Path

import pytest

from factories import make_document
from ragtime.models.analysis import AnalysisReport, EmbeddingStatistics, PipelineVerdict, Section, SectionState
from ragtime.utils.settings.core import AnalysisSettings, ApiSettings, LambdaSettings


def test_storage_location_requires_bucket_and_key():
    assert str(make_document().storage_location) == "s3://b/k"
    assert make_document(s3_key=None).storage_location is None
    assert make_document(s3_bucket="").storage_location is None


def test_processing_seconds():
    assert make_document().processing_seconds == 42
    assert make_document(updated_at="2025-08-22T10:00:00Z").processing_seconds is None


def test_processing_seconds_mixes_naive_and_aware_timestamps():
    assert make_document(created_at="2025-08-22T10:00:00").processing_seconds == 42
    assert make_document(updated_at="2025-08-22T12:00:42+02:00").processing_seconds == 42
    assert make_document(created_at="2025-08-22T10:00:00", updated_at="2025-08-22T10:00:42").processing_seconds == 42


def test_document_ignores_unknown_fields():
    document = make_document(gsi2_pk="test-tenant#PROCESSED")

    assert not hasattr(document, "gsi2_pk")


def test_chunk_count_only_when_embeddings_known():
    report = AnalysisReport(document=make_document(), verdict=PipelineVerdict.INCOMPLETE)
    assert report.chunk_count is None

    report.embeddings = Section.empty(EmbeddingStatistics())
    assert report.chunk_count == 0

    report.embeddings = Section.failed("timeout")
    assert report.chunk_count is None


def test_section_ok_states():
    assert Section.present(1).ok
    assert Section.empty(0).ok
    assert not Section.absent().ok
    assert Section.missing_reference().state == SectionState.MISSING_REFERENCE


def test_analysis_defaults(monkeypatch):
    for name in ("ANALYSIS_SOURCE", "ANALYSIS_SECTION_TIMEOUT", "ANALYSIS_PREVIEW_THRESHOLD"):
        monkeypatch.delenv(name, raising=False)

    settings = AnalysisSettings(_env_file=None)

    assert settings.source == "remote"
    assert settings.section_timeout == 15.0
    assert settings.preview_threshold == 10
    assert settings.degrade_on_server_error is True


def test_analysis_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ANALYSIS_SOURCE", "direct")
    monkeypatch.setenv("ANALYSIS_SECTION_TIMEOUT", "2.5")

    settings = AnalysisSettings()

    assert settings.source == "direct"
    assert settings.section_timeout == 2.5


def test_invalid_analysis_source_rejected(monkeypatch):
    monkeypatch.setenv("ANALYSIS_SOURCE", "carrier-pigeon")

    with pytest.raises(ValueError):
        AnalysisSettings()


def test_settings_from_env_file_keep_prefix(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("RAGTIME_TENANT_ID", raising=False)
    env_file = tmp_path / "local.env"
    env_file.write_text("RAGTIME_TENANT_ID=acme\nRAGTIME_TIMEOUT=5\n")

    settings = ApiSettings.from_env_file(env_file)

    assert settings.tenant_id == "acme"
    assert settings.timeout == 5.0


def test_lambda_settings_leave_region_to_aws_settings(monkeypatch):
    monkeypatch.setenv("DOCUMENTS_TABLE_NAME", "ragtime-documents")
    monkeypatch.setenv("AWS_REGION", "eu-central-1")

    settings = LambdaSettings()

    assert settings.documents_table_name == "ragtime-documents"
    assert set(LambdaSettings.model_fields) == {
        "documents_table_name",
        "database_secret_name",
        "database_cluster_endpoint",
        "database_name",
    }

"""Tests for cfn_metrics_advisor.scanner."""

from pathlib import Path

import pytest

from cfn_metrics_advisor import scanner
from cfn_metrics_advisor.config import Settings
from cfn_metrics_advisor.errors import TemplateError
from cfn_metrics_advisor.scanner import (
    discover_template_files,
    looks_like_cloudformation,
    scan_directory,
)


class TestDiscovery:
    def test_default_patterns(self, tmp_repo: Path) -> None:
        files = discover_template_files(tmp_repo)
        rel = [p.relative_to(tmp_repo).as_posix() for p in files]
        assert rel == sorted(rel)
        assert "stack.yaml" in rel
        assert "infra/table.json" in rel
        assert "README.md" not in rel

    def test_exclude_patterns(self, tmp_repo: Path) -> None:
        files = discover_template_files(tmp_repo, exclude=["**/node_modules/**", "infra/"])
        rel = {p.relative_to(tmp_repo).as_posix() for p in files}
        assert "node_modules/pkg/template.yaml" not in rel
        assert "infra/table.json" not in rel
        assert "stack.yaml" in rel

    def test_oversized_files_skipped(self, tmp_repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(scanner, "MAX_FILE_SIZE_BYTES", 80)
        rel = {p.relative_to(tmp_repo).as_posix() for p in discover_template_files(tmp_repo)}
        assert "stack.yaml" not in rel
        assert "broken.yaml" in rel


class TestLooksLikeCloudFormation:
    @pytest.mark.parametrize(
        "doc, expected",
        [
            ({"Resources": {"A": {"Type": "AWS::S3::Bucket"}}}, True),
            ({"Resources": {}}, False),
            ({"Resources": {"A": {"Properties": {}}}}, False),
            ({"services": {"web": {}}}, False),
            (["Resources"], False),
            (None, False),
        ],
    )
    def test_heuristic(self, doc: object, expected: bool) -> None:
        assert looks_like_cloudformation(doc) is expected


class TestScanDirectory:
    def test_scan(self, tmp_repo: Path) -> None:
        templates, errors = scan_directory(tmp_repo)
        assert sorted(templates) == ["infra/table.json", "stack.yaml"]
        assert templates["infra/table.json"]["Resources"]["Orders"]["Type"] == "AWS::DynamoDB::Table"
        assert len(errors) == 1
        assert errors[0].startswith("broken.yaml: YAML syntax error")

    def test_custom_include(self, tmp_repo: Path) -> None:
        templates, errors = scan_directory(tmp_repo, Settings(include_patterns=["**/*.json"]))
        assert list(templates) == ["infra/table.json"]
        assert errors == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(TemplateError, match="does not exist"):
            scan_directory(tmp_path / "missing")

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert scan_directory(tmp_path) == ({}, [])

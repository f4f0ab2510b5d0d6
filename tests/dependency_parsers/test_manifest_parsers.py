"""Tests for manifest parsers."""

import json

from delivery_intel.dependency_parsers import MANIFEST_FILES, get_parser, parse_manifest
from delivery_intel.dependency_parsers.go import parse_go_mod
from delivery_intel.dependency_parsers.javascript import parse_package_json
from delivery_intel.dependency_parsers.python import parse_requirements_txt
from delivery_intel.models import DependencyRecord, Ecosystem


class TestPackageJson:
    """Test npm package.json parsing."""

    def test_reads_dependencies_and_dev_dependencies(self):
        text = json.dumps(
            {
                "name": "demo",
                "dependencies": {"react": "^18.2.0", "lodash": "~4.17.21"},
                "devDependencies": {"vitest": ">=1.0.0"},
            }
        )
        assert parse_package_json(text) == [
            DependencyRecord("react", "18.2.0", Ecosystem.NPM),
            DependencyRecord("lodash", "4.17.21", Ecosystem.NPM),
            DependencyRecord("vitest", "1.0.0", Ecosystem.NPM),
        ]

    def test_exact_version_is_kept(self):
        text = json.dumps({"dependencies": {"express": "4.18.2"}})
        assert parse_package_json(text)[0].version == "4.18.2"

    def test_malformed_json_yields_nothing(self):
        assert parse_package_json("{not json") == []

    def test_non_object_document_yields_nothing(self):
        assert parse_package_json("[1, 2, 3]") == []

    def test_missing_sections(self):
        assert parse_package_json(json.dumps({"name": "demo"})) == []


class TestRequirementsTxt:
    """Test requirements.txt parsing."""

    def test_pinned_requirement(self):
        assert parse_requirements_txt("flask==2.3.0") == [
            DependencyRecord("flask", "2.3.0", Ecosystem.PYPI)
        ]

    def test_skips_comments_blank_and_unpinned_lines(self):
        text = "\n".join(
            [
                "# web stack",
                "",
                "requests>=2.31.0",
                "numpy",
                "-r other.txt",
                "django ~= 4.2",
                "urllib3!=1.25.0",
            ]
        )
        assert parse_requirements_txt(text) == [
            DependencyRecord("requests", "2.31.0", Ecosystem.PYPI),
            DependencyRecord("django", "4.2", Ecosystem.PYPI),
            DependencyRecord("urllib3", "1.25.0", Ecosystem.PYPI),
        ]


class TestGoMod:
    """Test go.mod parsing."""

    def test_require_block(self):
        text = """module example.com/demo

go 1.22

require (
    github.com/gin-gonic/gin v1.9.1
    // tooling
    golang.org/x/text v0.14.0 // indirect
)
"""
        assert parse_go_mod(text) == [
            DependencyRecord("github.com/gin-gonic/gin", "1.9.1", Ecosystem.GO),
            DependencyRecord("golang.org/x/text", "0.14.0", Ecosystem.GO),
        ]

    def test_without_require_block(self):
        assert parse_go_mod("module example.com/demo\n\ngo 1.22\n") == []


class TestParseManifest:
    """Test parser dispatch by filename."""

    def test_known_manifest_files(self):
        assert MANIFEST_FILES == ["package.json", "requirements.txt", "go.mod"]
        for filename in MANIFEST_FILES:
            assert get_parser(filename) is not None

    def test_dispatches_by_filename(self):
        assert parse_manifest("requirements.txt", "flask==2.3.0") == [
            DependencyRecord("flask", "2.3.0", Ecosystem.PYPI)
        ]

    def test_absent_or_unknown_manifest(self):
        assert parse_manifest("requirements.txt", None) == []
        assert parse_manifest("requirements.txt", "") == []
        assert parse_manifest("Cargo.toml", "[dependencies]") == []

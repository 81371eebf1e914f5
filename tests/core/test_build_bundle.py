# tests\core\test_build_bundle.py
import json
import shutil

import pytest

from bundler.core.domain.exceptions import (
    DestinationExistsError,
    ExternalToolError,
    InlineTargetMissingError,
    MalformedDocumentError,
    VendoredArtifactMissingError,
)
from bundler.core.domain.models import StageName, ToolResult
from bundler.core.use_cases.build_bundle import BuildBundle
from tests.conftest import FakeToolRunner


class TestBuildBundle:

    def test_stages_run_in_order(self, layout, fake_runner):
        """
        Scenario: Every input is present and every tool succeeds.
        Expected: All seven stages report a duration, in pipeline order.
        """
        report = BuildBundle(layout, fake_runner).execute()

        assert list(report.stage_durations) == [stage.value for stage in StageName]
        assert report.version == "1.2.3"
        assert len(report.run_id) == 8

    def test_tools_run_from_source_root(self, layout, fake_runner):
        BuildBundle(layout, fake_runner).execute()

        assert fake_runner.names == ["lint", "build"]
        assert all(cwd == layout.source_root for _, cwd in fake_runner.calls)

    def test_installer_runs_when_dependencies_are_missing(self, layout, fake_runner):
        shutil.rmtree(layout.dependency_dir)

        BuildBundle(layout, fake_runner).execute()

        assert fake_runner.names == ["install", "lint", "build"]
        assert (layout.build_dir / "assets" / "micropython.wasm").is_file()

    def test_version_override_skips_package_json(self, layout, fake_runner):
        layout.project_file.unlink()
        layout = layout.model_copy(update={"project_version": "9.9.9"})

        report = BuildBundle(layout, FakeToolRunner(layout)).execute()

        manifest = json.loads(layout.manifest_file.read_text(encoding="utf-8"))
        assert report.version == manifest["version"] == "9.9.9"

    def test_report_lists_final_artifacts(self, layout, fake_runner):
        report = BuildBundle(layout, fake_runner).execute()

        assert report.artifacts == [
            "assets/logo.svg",
            "assets/micropython.wasm",
            "assets/mpy-cross-v6.wasm",
            "assets/ruff_wasm_bg.wasm",
            "assets/tools_vfs.tar.gz",
            "assets/vm_vfs.tar.gz",
            "benchmark.html",
            "bridge.html",
            "index.html",
            "manifest.json",
            "micropython.mjs",
            "webrepl_content.js",
        ]


class TestBuildBundleFailures:

    @pytest.mark.parametrize("tool", ["lint", "build"])
    def test_tool_failure_aborts(self, layout, tool):
        runner = FakeToolRunner(layout, failing=[tool])

        with pytest.raises(ExternalToolError) as excinfo:
            BuildBundle(layout, runner).execute()

        assert excinfo.value.tool == tool
        assert excinfo.value.returncode == 2
        assert f"{tool} exploded" in str(excinfo.value)
        # Stops at the failing tool
        assert runner.names[-1] == tool
        assert not (layout.build_dir / "index.html").exists()

    def test_tool_failure_reports_stdout_when_stderr_is_empty(self, layout, mock_runner):
        mock_runner.run.return_value = ToolResult(returncode=1, stdout="12 problems (12 errors)")

        with pytest.raises(ExternalToolError) as excinfo:
            BuildBundle(layout, mock_runner).execute()

        assert "12 problems" in str(excinfo.value)
        mock_runner.run.assert_called_once()

    def test_malformed_translation_aborts_before_tools(self, layout, mock_runner):
        (layout.translations_dir / "de.json").write_text("{ nope", encoding="utf-8")

        with pytest.raises(MalformedDocumentError):
            BuildBundle(layout, mock_runner).execute()

        mock_runner.run.assert_not_called()
        assert not layout.translations_file.exists()

    def test_colliding_static_asset_aborts_before_tools(self, layout, mock_runner):
        pipeline = BuildBundle(layout, mock_runner)
        pipeline.reset()
        (layout.assets_dir / "logo.svg").write_text("<svg>stale</svg>")

        with pytest.raises(DestinationExistsError):
            pipeline.stage_inputs()

        assert (layout.assets_dir / "logo.svg").read_text() == "<svg>stale</svg>"
        mock_runner.run.assert_not_called()

    def test_missing_inline_target_aborts(self, layout):
        runner = FakeToolRunner(layout)
        index = layout.source_root / "src" / "index.html"
        index.write_text(index.read_text().replace('<script src="./app.js"></script>', ""))

        with pytest.raises(InlineTargetMissingError):
            BuildBundle(layout, runner).execute()

        # Intermediates are still there: cleanup never ran
        assert layout.translations_file.exists()

    def test_lenient_inline_tolerates_missing_target(self, layout):
        layout = layout.model_copy(update={"inline_strict": False})
        index = layout.source_root / "src" / "index.html"
        index.write_text(index.read_text().replace('<script src="./app.js"></script>', ""))

        BuildBundle(layout, FakeToolRunner(layout)).execute()

        assert "console.log('app')" not in (layout.build_dir / "index.html").read_text()

    def test_missing_vendored_artifact_aborts(self, layout, fake_runner):
        (layout.dependency_dir / "@astral-sh" / "ruff-wasm-web" / "ruff_wasm_bg.wasm").unlink()

        with pytest.raises(VendoredArtifactMissingError):
            BuildBundle(layout, fake_runner).execute()

        # Everything before the vendor stage completed
        assert (layout.build_dir / "index.html").exists()
        assert not layout.translations_file.exists()

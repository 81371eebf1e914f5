# bundler/core/use_cases/build_bundle.py
import time
import uuid
from contextlib import contextmanager

import structlog

from bundler.adapters.archive.tar_builder import build_archive
from bundler.adapters.documents.manifest import read_project_version, stamp_manifest
from bundler.adapters.documents.translations import aggregate_translations
from bundler.adapters.filesystem.staging import (
    copy_files,
    copy_tree_strict,
    remove_files,
    reset_directory,
    vendor_artifacts,
)
from bundler.adapters.html.inliner import inline_document
from bundler.core.domain.exceptions import ExternalToolError
from bundler.core.domain.models import BuildLayout, BuildReport, StageName, ToolCommand
from bundler.core.ports.tool_runner import IToolRunner
from bundler.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

ERROR_TAIL_CHARS = 500


def generate_run_id() -> str:
    """Generates a short, unique run ID for tracking."""
    return str(uuid.uuid4())[:8]


class BuildBundle:
    """
    Use Case: Assembles the distributable bundle in one fail-fast pass.

    Stages run strictly in order (see StageName). The first exception aborts
    the run and propagates unchanged; nothing is retried or rolled back, so a
    failed run leaves a partial build directory behind.

    Responsibilities:
    1. Reset the build directory and stage static inputs.
    2. Generate intermediates (translations, manifest, VFS archives).
    3. Run the installer (when needed), linter and bundler via the IToolRunner port.
    4. Inline compiled styles/scripts into the HTML entry points.
    5. Remove intermediates and vendor third-party binaries.
    """

    def __init__(self, layout: BuildLayout, tool_runner: IToolRunner):
        self.layout = layout
        self.tool_runner = tool_runner

    def execute(self) -> BuildReport:
        run_id = generate_run_id()
        structlog.contextvars.bind_contextvars(run_id=run_id)
        started = time.time()
        report = BuildReport(run_id=run_id, version="")

        try:
            with tracer.start_as_current_span("use_case.build_bundle") as span:
                span.set_attribute("build.run_id", run_id)
                span.set_attribute("build.source_root", str(self.layout.source_root))
                logger.info(
                    "build_started",
                    source_root=str(self.layout.source_root),
                    build_dir=str(self.layout.build_dir),
                )

                with self._stage(StageName.RESET, report):
                    self.reset()
                with self._stage(StageName.STAGE, report):
                    self.stage_inputs()
                with self._stage(StageName.GENERATE, report):
                    report.version = self.generate_intermediates()
                with self._stage(StageName.TOOLS, report):
                    self.run_tools()
                with self._stage(StageName.INLINE, report):
                    self.inline_documents()
                with self._stage(StageName.CLEANUP, report):
                    self.cleanup()
                with self._stage(StageName.VENDOR, report):
                    self.vendor()

                report.artifacts = self.list_artifacts()
                report.duration = round(time.time() - started, 3)
                span.set_attribute("build.version", report.version)
                logger.info(
                    "build_completed",
                    version=report.version,
                    artifacts=len(report.artifacts),
                    duration=report.duration,
                )
                return report
        finally:
            structlog.contextvars.unbind_contextvars("run_id")

    @contextmanager
    def _stage(self, stage: StageName, report: BuildReport):
        logger.info("stage_started", stage=stage.value)
        started = time.time()
        with tracer.start_as_current_span(f"stage.{stage.value}"):
            try:
                yield
            except Exception as e:
                logger.error("stage_failed", stage=stage.value, error=str(e))
                raise
        duration = round(time.time() - started, 3)
        report.stage_durations[stage.value] = duration
        logger.info("stage_finished", stage=stage.value, duration=duration)

    # --- Stages ---

    def reset(self) -> None:
        reset_directory(self.layout.build_dir, self.layout.assets_dir.name)

    def stage_inputs(self) -> None:
        copy_files(self.layout.static_files, self.layout.build_dir)
        copy_tree_strict(self.layout.static_assets_dir, self.layout.assets_dir)

    def generate_intermediates(self) -> str:
        layout = self.layout
        aggregate_translations(layout.translations_dir, layout.translations_file)

        version = layout.project_version or read_project_version(layout.project_file)
        stamp_manifest(layout.manifest_template, version, layout.manifest_file)

        build_archive(layout.tools_vfs_dir, layout.tools_archive)
        build_archive(layout.vm_vfs_dir, layout.vm_archive)
        return version

    def run_tools(self) -> None:
        if not self.layout.dependency_dir.is_dir():
            logger.info("dependencies_missing", path=str(self.layout.dependency_dir))
            self._run_tool(self.layout.install_command)
        self._run_tool(self.layout.lint_command)
        self._run_tool(self.layout.build_command)

    def inline_documents(self) -> None:
        for name in self.layout.html_documents:
            inline_document(
                self.layout.build_dir / name,
                self.layout.inline_targets,
                asset_dir=self.layout.build_dir,
                strict=self.layout.inline_strict,
            )

    def cleanup(self) -> None:
        remove_files(self.layout.intermediates)

    def vendor(self) -> None:
        vendor_artifacts(
            self.layout.dependency_dir,
            self.layout.build_dir,
            self.layout.vendored_artifacts,
        )

    # --- Helpers ---

    def _run_tool(self, command: ToolCommand) -> None:
        with tracer.start_as_current_span(f"tool.{command.name}") as span:
            span.set_attribute("tool.command", str(command))
            result = self.tool_runner.run(command, self.layout.source_root)
            span.set_attribute("tool.returncode", result.returncode)

        if not result.ok:
            output = (result.stderr.strip() or result.stdout.strip())[-ERROR_TAIL_CHARS:]
            raise ExternalToolError(command.name, command.argv, result.returncode, output)

    def list_artifacts(self):
        build_dir = self.layout.build_dir
        return sorted(
            path.relative_to(build_dir).as_posix()
            for path in build_dir.rglob("*")
            if path.is_file()
        )

# bundler/core/domain/models.py
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from bundler.shared.config import Settings

# --- Enums ---

class InlineKind(str, Enum):
    """The kind of external reference the inliner folds into a document."""
    STYLESHEET = "stylesheet"  # <link rel="stylesheet" href="...">
    SCRIPT = "script"          # <script src="..."></script>

class StageName(str, Enum):
    """Pipeline stages, in execution order."""
    RESET = "reset"
    STAGE = "stage"
    GENERATE = "generate"
    TOOLS = "tools"
    INLINE = "inline"
    CLEANUP = "cleanup"
    VENDOR = "vendor"

# --- Value Objects ---

class InlineTarget(BaseModel):
    """
    One external reference to replace with the literal content of a
    compiled file living next to the document.
    """
    kind: InlineKind
    href: str = Field(..., description="Reference as written in the document (e.g. './app.css')")
    filename: str = Field(..., description="Compiled file in the build directory (e.g. 'app.css')")

    def describe(self) -> str:
        if self.kind == InlineKind.STYLESHEET:
            return f'stylesheet link with href "{self.href}"'
        return f'script with src "{self.href}"'

class VendoredArtifact(BaseModel):
    """A binary file copied verbatim from the installed-dependency tree."""
    source: str = Field(..., description="Path relative to the dependency directory")
    destination: str = Field(..., description="Path relative to the build directory")

class ToolCommand(BaseModel):
    """An external tool invocation (installer, linter, bundler)."""
    name: str
    argv: List[str]

    def __str__(self) -> str:
        return " ".join(self.argv)

class ToolResult(BaseModel):
    """Outcome of one external tool run."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

class BuildReport(BaseModel):
    """Summary of a completed run."""
    run_id: str
    version: str
    stage_durations: Dict[str, float] = Field(default_factory=dict)
    artifacts: List[str] = Field(default_factory=list)
    duration: float = 0.0

# --- Defaults ---

DEFAULT_INLINE_TARGETS = [
    InlineTarget(kind=InlineKind.STYLESHEET, href="./app.css", filename="app.css"),
    InlineTarget(kind=InlineKind.STYLESHEET, href="./viper_lib.css", filename="viper_lib.css"),
    InlineTarget(kind=InlineKind.SCRIPT, href="./app.js", filename="app.js"),
    InlineTarget(kind=InlineKind.SCRIPT, href="./viper_lib.js", filename="viper_lib.js"),
]

DEFAULT_HTML_DOCUMENTS = ["index.html", "bridge.html", "benchmark.html"]

DEFAULT_VENDORED_ARTIFACTS = [
    VendoredArtifact(
        source="@micropython/micropython-webassembly-pyscript/micropython.wasm",
        destination="assets/micropython.wasm",
    ),
    VendoredArtifact(
        source="@micropython/micropython-webassembly-pyscript/micropython.mjs",
        destination="micropython.mjs",
    ),
    VendoredArtifact(
        source="@pybricks/mpy-cross-v6/build/mpy-cross-v6.wasm",
        destination="assets/mpy-cross-v6.wasm",
    ),
    VendoredArtifact(
        source="@astral-sh/ruff-wasm-web/ruff_wasm_bg.wasm",
        destination="assets/ruff_wasm_bg.wasm",
    ),
]

# --- Layout ---

class BuildLayout(BaseModel):
    """
    Explicit description of where every input and output of a run lives.

    Threaded through every component so nothing depends on the process
    working directory. Build it with `for_source_root` (tests, CLI overrides)
    or `from_settings` (environment).
    """
    source_root: Path
    build_dir: Path
    dependency_dir: Path

    # Inputs
    translations_dir: Path
    manifest_template: Path
    project_file: Path
    tools_vfs_dir: Path
    vm_vfs_dir: Path
    static_assets_dir: Path
    static_files: List[Path] = Field(default_factory=list)

    # Outputs / transforms
    html_documents: List[str] = Field(default_factory=lambda: list(DEFAULT_HTML_DOCUMENTS))
    inline_targets: List[InlineTarget] = Field(default_factory=lambda: list(DEFAULT_INLINE_TARGETS))
    vendored_artifacts: List[VendoredArtifact] = Field(default_factory=lambda: list(DEFAULT_VENDORED_ARTIFACTS))

    # External tools
    install_command: ToolCommand = ToolCommand(name="install", argv=["npm", "install"])
    lint_command: ToolCommand = ToolCommand(name="lint", argv=["npx", "eslint"])
    build_command: ToolCommand = ToolCommand(name="build", argv=["npm", "run", "build"])

    project_version: Optional[str] = None
    inline_strict: bool = True

    @classmethod
    def for_source_root(
        cls,
        source_root,
        build_dir="build",
        dependency_dir="node_modules",
        **overrides,
    ) -> "BuildLayout":
        root = Path(source_root).resolve()
        src = root / "src"
        values = dict(
            source_root=root,
            build_dir=root / build_dir,
            dependency_dir=root / dependency_dir,
            translations_dir=src / "lang",
            manifest_template=src / "manifest.json",
            project_file=root / "package.json",
            tools_vfs_dir=src / "tools_vfs",
            vm_vfs_dir=src / "vm_vfs",
            static_assets_dir=root / "assets",
            static_files=[src / "webrepl_content.js"],
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "BuildLayout":
        return cls.for_source_root(
            settings.SOURCE_ROOT,
            build_dir=settings.BUILD_DIR,
            dependency_dir=settings.DEPENDENCY_DIR,
            install_command=ToolCommand(name="install", argv=settings.INSTALL_COMMAND),
            lint_command=ToolCommand(name="lint", argv=settings.LINT_COMMAND),
            build_command=ToolCommand(name="build", argv=settings.BUILD_COMMAND),
            project_version=settings.PROJECT_VERSION,
            inline_strict=settings.INLINE_STRICT,
        )

    # --- Derived paths ---

    @property
    def assets_dir(self) -> Path:
        return self.build_dir / "assets"

    @property
    def translations_file(self) -> Path:
        return self.build_dir / "translations.json"

    @property
    def manifest_file(self) -> Path:
        return self.build_dir / "manifest.json"

    @property
    def tools_archive(self) -> Path:
        return self.assets_dir / "tools_vfs.tar.gz"

    @property
    def vm_archive(self) -> Path:
        return self.assets_dir / "vm_vfs.tar.gz"

    @property
    def intermediates(self) -> List[Path]:
        """Files only needed until the documents are inlined."""
        return [self.translations_file] + [
            self.build_dir / target.filename for target in self.inline_targets
        ]

# tests\conftest.py
import json
import shutil
from pathlib import Path

import pytest
from unittest.mock import MagicMock

from bundler.shared.container import Container
from bundler.core.domain.models import BuildLayout, ToolCommand, ToolResult
from bundler.core.ports.tool_runner import IToolRunner

PLACEHOLDER_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>ViperIDE</title>
  <link rel="stylesheet" href="./app.css">
  <link rel="stylesheet" href="./viper_lib.css">
</head>
<body>
  <div id="app"></div>
  <script src="./viper_lib.js"></script>
  <script src="./app.js"></script>
</body>
</html>
"""

COMPILED_OUTPUTS = {
    "app.css": "body { margin: 0; }",
    "viper_lib.css": ".term { color: #0f0; }",
    "app.js": "console.log('app');",
    "viper_lib.js": "window.viper = {};",
}

VENDORED_SOURCES = [
    "@micropython/micropython-webassembly-pyscript/micropython.wasm",
    "@micropython/micropython-webassembly-pyscript/micropython.mjs",
    "@pybricks/mpy-cross-v6/build/mpy-cross-v6.wasm",
    "@astral-sh/ruff-wasm-web/ruff_wasm_bg.wasm",
]


class FakeToolRunner:
    """
    IToolRunner double. Records every command and, for the bundler command,
    emits what the real bundler would: compiled styles/scripts and the HTML
    entry points (copied from src/index.html) into the build directory.
    """

    def __init__(self, layout: BuildLayout, failing=None):
        self.layout = layout
        self.failing = set(failing or [])
        self.calls = []

    def run(self, command: ToolCommand, cwd: Path) -> ToolResult:
        self.calls.append((command.name, Path(cwd)))
        if command.name in self.failing:
            return ToolResult(returncode=2, stderr=f"{command.name} exploded")

        if command.name == "install":
            for rel in VENDORED_SOURCES:
                path = self.layout.dependency_dir / rel
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(b"\x00asm" + rel.encode())

        if command.name == "build":
            build_dir = self.layout.build_dir
            for name, content in COMPILED_OUTPUTS.items():
                (build_dir / name).write_text(content, encoding="utf-8")
            template = self.layout.source_root / "src" / "index.html"
            for name in self.layout.html_documents:
                shutil.copyfile(template, build_dir / name)

        return ToolResult(returncode=0, stdout=f"{command.name} ok")

    @property
    def names(self):
        return [name for name, _ in self.calls]


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def source_tree(tmp_path):
    """
    A minimal project checkout: two languages, a manifest template at 0.0.0,
    package.json at 1.2.3, one file per virtual filesystem, one static asset,
    an HTML template with all four references and an installed dependency tree.
    """
    root = tmp_path / "project"
    src = root / "src"

    write_json(root / "package.json", {"name": "viper-ide", "version": "1.2.3"})
    write_json(src / "lang" / "en.json", {"hello": "Hello", "run": "Run"})
    write_json(src / "lang" / "fr.json", {"hello": "Bonjour", "run": "Exécuter"})
    write_json(src / "manifest.json", {"name": "ViperIDE", "version": "0.0.0", "display": "standalone"})

    (src / "tools_vfs").mkdir(parents=True)
    (src / "tools_vfs" / "helpers.py").write_text("def helper():\n    return 1\n")
    (src / "vm_vfs").mkdir(parents=True)
    (src / "vm_vfs" / "boot.py").write_text("print('boot')\n")

    (src / "webrepl_content.js").write_text("export const content = 1;\n")
    (src / "index.html").write_text(PLACEHOLDER_HTML, encoding="utf-8")

    (root / "assets").mkdir()
    (root / "assets" / "logo.svg").write_text("<svg></svg>")

    for rel in VENDORED_SOURCES:
        path = root / "node_modules" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x00asm" + rel.encode())

    return root


@pytest.fixture
def layout(source_tree):
    return BuildLayout.for_source_root(source_tree)


@pytest.fixture
def fake_runner(layout):
    return FakeToolRunner(layout)


@pytest.fixture
def mock_runner():
    """A bare IToolRunner mock that reports success for every command."""
    runner = MagicMock(spec=IToolRunner)
    runner.run.return_value = ToolResult(returncode=0)
    return runner


@pytest.fixture(scope="function")
def container(layout, fake_runner):
    """
    Sets up the Dependency Injection Container for testing.
    It overrides the real layout and process runner with test doubles.
    """
    container = Container()

    container.layout.override(layout)
    container.tool_runner.override(fake_runner)

    yield container

    container.unwire()
    container.reset_override()

# bundler/adapters/html/inliner.py
"""
Folds compiled stylesheets and scripts into an HTML document.

Elements are located structurally (a `<link>` whose `rel` contains
`stylesheet`, a `<script>` with a `src`) instead of by literal string, so
attribute order, quoting and whitespace do not matter. Only the byte span
of each matched element is rewritten; the rest of the document is kept
exactly as it was, line endings included.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from html.parser import HTMLParser
from pathlib import Path
from typing import List, Optional, Sequence

import structlog

from bundler.core.domain.exceptions import (
    InlineTargetAmbiguousError,
    InlineTargetMissingError,
    MalformedDocumentError,
    SourceMissingError,
)
from bundler.core.domain.models import InlineKind, InlineTarget

logger = structlog.get_logger()


@dataclass
class ElementSpan:
    """Location of one external reference inside the raw document."""
    kind: InlineKind
    ref: str
    start: int
    end: int


@dataclass
class InlineResult:
    document: Path
    inlined: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.inlined)


class ReferenceLocator(HTMLParser):
    """
    Collects the spans of stylesheet links and external scripts.
    Offsets are character offsets into the exact text that was fed.
    """

    def __init__(self, raw: str):
        super().__init__(convert_charrefs=True)
        self.raw = raw
        self.spans: List[ElementSpan] = []
        self._line_starts = [0]
        for i, ch in enumerate(raw):
            if ch == "\n":
                self._line_starts.append(i + 1)
        self._open_script: Optional[ElementSpan] = None

    def locate(self) -> List[ElementSpan]:
        self.feed(self.raw)
        self.close()
        return self.spans

    def _offset(self) -> int:
        lineno, col = self.getpos()
        return self._line_starts[lineno - 1] + col

    def handle_starttag(self, tag, attrs):
        values = dict(attrs)
        start = self._offset()

        if tag == "link":
            rel = (values.get("rel") or "").lower().split()
            href = values.get("href")
            if "stylesheet" in rel and href:
                end = start + len(self.get_starttag_text())
                self.spans.append(ElementSpan(InlineKind.STYLESHEET, href, start, end))

        elif tag == "script" and values.get("src"):
            # Closed by handle_endtag once the matching </script> is seen
            self._open_script = ElementSpan(InlineKind.SCRIPT, values["src"], start, -1)

    def handle_startendtag(self, tag, attrs):
        # "/>" does not close a <script>; it still runs to its </script>
        self.handle_starttag(tag, attrs)

    def handle_endtag(self, tag):
        if tag != "script" or self._open_script is None:
            return
        start = self._offset()
        close = self.raw.find(">", start)
        self._open_script.end = len(self.raw) if close < 0 else close + 1
        self.spans.append(self._open_script)
        self._open_script = None


def normalize_ref(ref: str) -> str:
    return posixpath.normpath(ref.strip())


def render_block(kind: InlineKind, content: str) -> str:
    if kind == InlineKind.STYLESHEET:
        return f"<style>\n{content}\n</style>"
    return f"<script>\n{content}\n</script>"


def read_text(path: Path) -> str:
    if not path.is_file():
        raise SourceMissingError(path, "Compiled asset")
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise MalformedDocumentError(path, f"not valid UTF-8 ({e.reason})") from e


def inline_document(
    html_file: Path,
    targets: Sequence[InlineTarget],
    asset_dir: Optional[Path] = None,
    strict: bool = True,
) -> InlineResult:
    """
    Replaces each target reference of `html_file` with an inline block holding
    the content of `asset_dir / target.filename`, then rewrites the file in place.

    Args:
        html_file: Document to rewrite.
        targets: References to fold in.
        asset_dir: Where the compiled files live; defaults to the document's directory.
        strict: Raise when a target is absent or duplicated. When False, absent
            targets are skipped (re-running on an inlined document is a no-op)
            and only the first of duplicated targets is replaced.

    Raises:
        SourceMissingError: The document or a referenced compiled file is missing.
        InlineTargetMissingError: (strict) A target element is absent.
        InlineTargetAmbiguousError: (strict) A target element appears more than once.
        MalformedDocumentError: The document or a compiled file is not valid UTF-8.
    """
    html_file = Path(html_file)
    asset_dir = Path(asset_dir) if asset_dir is not None else html_file.parent
    raw = read_text(html_file)
    spans = ReferenceLocator(raw).locate()

    result = InlineResult(document=html_file)
    replacements = []

    for target in targets:
        wanted = normalize_ref(target.href)
        matches = [s for s in spans if s.kind == target.kind and normalize_ref(s.ref) == wanted]

        if not matches:
            if strict:
                raise InlineTargetMissingError(html_file, target.describe())
            logger.warning("inline_target_missing", document=str(html_file), target=target.describe())
            result.missing.append(target.href)
            continue

        if len(matches) > 1 and strict:
            raise InlineTargetAmbiguousError(html_file, target.describe(), len(matches))

        span = matches[0]
        content = read_text(asset_dir / target.filename)
        replacements.append((span.start, span.end, render_block(target.kind, content)))
        result.inlined.append(target.href)

    if not replacements:
        return result

    # Splice back to front so earlier offsets stay valid
    rewritten = raw
    for start, end, block in sorted(replacements, key=lambda r: r[0], reverse=True):
        rewritten = rewritten[:start] + block + rewritten[end:]

    with open(html_file, "w", encoding="utf-8", newline="") as f:
        f.write(rewritten)

    logger.info("document_inlined", document=str(html_file), inlined=result.inlined)
    return result

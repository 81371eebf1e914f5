"""
SPA bundle builder.

Assembles a self-contained single-page application bundle (inlined HTML,
stamped manifest, virtual-filesystem archives, vendored WASM artifacts)
from a source tree in one fail-fast pass.
"""

__version__ = "1.0.0"

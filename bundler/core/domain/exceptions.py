# bundler/core/domain/exceptions.py
class BuildError(Exception):
    """Base class for all build pipeline failures. Every one of them is fatal."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Input Errors ---

class SourceMissingError(BuildError):
    """Raised when a required source file or directory does not exist."""
    def __init__(self, path, what: str = "Source"):
        self.path = path
        super().__init__(f"{what} not found: {path}")

class MalformedDocumentError(BuildError):
    """Raised when a JSON document cannot be parsed or has the wrong shape."""
    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Malformed document '{path}': {reason}")

# --- Process Errors ---

class ExternalToolError(BuildError):
    """Raised when an external tool exits non-zero or cannot be spawned."""
    def __init__(self, tool: str, command, returncode=None, details: str = ""):
        self.tool = tool
        self.command = list(command)
        self.returncode = returncode
        status = "could not be started" if returncode is None else f"exited with code {returncode}"
        message = f"External tool '{tool}' ({' '.join(self.command)}) {status}"
        if details:
            message += f": {details}"
        super().__init__(message)

# --- Output Errors ---

class DestinationExistsError(BuildError):
    """Raised by the non-clobbering copy when the destination entry already exists."""
    def __init__(self, path):
        self.path = path
        super().__init__(f"Refusing to overwrite existing entry: {path}")

class VendoredArtifactMissingError(BuildError):
    """Raised when an expected third-party artifact is absent from the dependency tree."""
    def __init__(self, path):
        self.path = path
        super().__init__(f"Vendored artifact missing: {path} (did the package install succeed?)")

# --- Inlining Errors ---

class InlineTargetMissingError(BuildError):
    """Raised when an HTML document lacks an element that must be inlined."""
    def __init__(self, document, target: str):
        self.document = document
        self.target = target
        super().__init__(f"No {target} found in '{document}'")

class InlineTargetAmbiguousError(BuildError):
    """Raised when an element to inline appears more than once in a document."""
    def __init__(self, document, target: str, count: int):
        self.document = document
        self.target = target
        self.count = count
        super().__init__(f"Expected exactly one {target} in '{document}', found {count}")

"""Exceptions raised while turning a header into a symbol table."""


class HbindError(Exception):
    """Base class for all hbind failures."""
    pass


class MalformedDocument(HbindError):
    """Raised when parser output is not a well-formed AST document."""
    pass


class ParserUnavailable(HbindError):
    """Raised when the external parser cannot be started."""
    pass


class ParserFailed(HbindError):
    """Raised when the external parser exits with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"{' '.join(command)} exited with status {returncode}"
        if stderr.strip():
            message += f": {stderr.strip().splitlines()[-1]}"
        super().__init__(message)


class CyclicTypedef(HbindError):
    """Raised when a typedef chain revisits a spelling before reaching a built-in."""

    def __init__(self, spelling: str, chain: list[str]):
        self.spelling = spelling
        self.chain = chain
        super().__init__(f"Typedef cycle for {spelling!r}: {' -> '.join(chain)}")


class UnknownType(HbindError):
    """Raised when a type spelling matches none of the classification rules."""

    def __init__(self, spelling: str):
        self.spelling = spelling
        super().__init__(f"Unknown type {spelling!r}")


class NodeShapeError(HbindError):
    """A node claims a known kind but lacks one of that kind's required fields."""

    def __init__(self, node_id: str, kind: str, missing: list[str]):
        self.node_id = node_id
        self.kind = kind
        self.missing = missing
        super().__init__(
            f"Node {node_id} claims to be a {kind} but it has no {', '.join(missing)}"
        )

from typing import Optional


class TransformError(Exception):
    """
    Base class for every failure that aborts a rewrite.

    A transform either succeeds completely or raises one of these; callers
    never see partially rewritten output.
    """

    def __init__(self, message: str, node_type: Optional[str] = None):
        super().__init__(message)
        self.node_type = node_type


class UnsupportedSyntax(TransformError):
    """An import kind, export shape or inner declaration we can't rewrite."""


class MissingSpecifier(TransformError):
    """A default import that carries no specifier."""


class CursorError(TransformError):
    """A rule asked the cursor to move backwards or past the end of source."""


class ParseError(TransformError):
    """The parser front end could not produce a clean tree."""

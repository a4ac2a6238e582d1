from typing import List, Union

from modrewrite.services.errors import CursorError


class SourceCursor:
    """
    Rewrite buffer over the original source.

    Everything before ``position`` is final: it has either been copied
    verbatim (``catchup``), dropped (``move``) or replaced by generated text
    (``append``). Positions are byte offsets into the UTF-8 encoded source so
    they line up with the ranges tree-sitter reports.
    """

    def __init__(self, source: Union[str, bytes]):
        if isinstance(source, str):
            source = source.encode("utf-8")
        self.source: bytes = source
        self.position: int = 0
        self._chunks: List[bytes] = []

    def _check(self, pos: int, op: str) -> None:
        if pos < self.position:
            raise CursorError(
                f"{op}({pos}) would move the cursor backwards from {self.position}"
            )
        if pos > len(self.source):
            raise CursorError(
                f"{op}({pos}) is past the end of the source ({len(self.source)} bytes)"
            )

    def catchup(self, pos: int) -> None:
        """Copy source[position:pos] into the output and advance to pos."""
        self._check(pos, "catchup")
        if pos > self.position:
            self._chunks.append(self.source[self.position:pos])
        self.position = pos

    def move(self, pos: int) -> None:
        """Advance to pos without copying; the skipped text is dropped."""
        self._check(pos, "move")
        self.position = pos

    def append(self, text: str) -> None:
        self._chunks.append(text.encode("utf-8"))

    @property
    def output(self) -> str:
        return b"".join(self._chunks).decode("utf-8")

    def finalize(self) -> str:
        self.catchup(len(self.source))
        return self.output

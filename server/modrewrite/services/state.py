from dataclasses import dataclass, field
from typing import Union

from modrewrite.services.cursor import SourceCursor
from modrewrite.services.ids import IdGenerator


@dataclass
class RewriteState:
    """Mutable state shared by the rules during one rewrite."""
    cursor: SourceCursor
    ids: IdGenerator = field(default_factory=IdGenerator)

    @classmethod
    def for_source(cls, source: Union[str, bytes]) -> "RewriteState":
        return cls(cursor=SourceCursor(source))

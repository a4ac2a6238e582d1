import logging
from typing import Optional, Sequence, Union

from modrewrite.services.ids import IdGenerator
from modrewrite.services.rules import DEFAULT_RULES
from modrewrite.services.state import RewriteState
from modrewrite.services.syntax import Node
from modrewrite.services.traversal import Rule, make_walker
from modrewrite.services.tree_sitter_frontend import get_frontend

logger = logging.getLogger(__name__)


def transform_tree(
    source: Union[str, bytes],
    tree: Node,
    rules: Sequence[Rule] = DEFAULT_RULES,
    ids: Optional[IdGenerator] = None,
) -> str:
    """
    Rewrite every module declaration in ``tree`` and return the new text.

    A fresh ``RewriteState`` is built for each call. Passing ``ids`` lets a
    host share one generator across calls; it is then the host's job to
    ``reset()`` it between unrelated inputs.
    """
    state = RewriteState.for_source(source)
    if ids is not None:
        state.ids = ids

    walk = make_walker(rules)
    walk(tree, [], state)
    return state.cursor.finalize()


def transform_source(source: str, tsx: bool = False) -> str:
    """Parse ``source`` with tree-sitter and rewrite it."""
    program = get_frontend().parse(source, tsx=tsx)
    code = transform_tree(source, program)
    logger.debug("Transformed %d characters into %d characters", len(source), len(code))
    return code

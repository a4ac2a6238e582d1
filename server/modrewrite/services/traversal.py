from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Sequence

from modrewrite.services.syntax import Node


class Descend(Enum):
    """What the walker does after a rule has visited a node."""
    CONTINUE = "continue"
    SUBTREE_HANDLED = "subtree_handled"


Recurse = Callable[[Node, List[Node], Any], None]


@dataclass(frozen=True)
class Rule:
    name: str
    test: Callable[[Node, List[Node], Any], bool]
    visit: Callable[[Recurse, Node, List[Node], Any], Descend]


def make_walker(rules: Sequence[Rule]) -> Recurse:
    """
    Build a depth-first, pre-order walker over ``rules``.

    For each node the first rule whose ``test`` matches is visited. Unless it
    returns ``Descend.SUBTREE_HANDLED`` the walker continues into the node's
    children. ``path`` is the list of ancestors, nearest parent first. Rules
    receive the walker itself so they can recurse into the parts of a node
    they keep.
    """
    rules = tuple(rules)

    def recurse(node: Node, path: List[Node], state: Any) -> None:
        signal = Descend.CONTINUE
        for rule in rules:
            if rule.test(node, path, state):
                signal = rule.visit(recurse, node, path, state)
                break

        if signal is Descend.SUBTREE_HANDLED:
            return

        child_path = [node, *path]
        for child in node.child_nodes():
            recurse(child, child_path, state)

    return recurse

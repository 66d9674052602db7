"""Re-rootable navigation over a family tree, with back history."""

from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
import logging

from graph import FamilyGraph
from models import TreeNode
from tree import build_tree, select_default_root

logger = logging.getLogger(__name__)


@dataclass
class NavigationState:
    current_root_id: int | None
    history: list = field(default_factory=list)  # most recent last


class NavigationController:
    """
    Current root plus a back stack of previously visited roots.

    Holds ids only. Listeners registered with `subscribe` are called with the new root id
    after every state change so the owner can rebuild its tree.
    """

    def __init__(self, root_id=None):
        self.state = NavigationState(current_root_id=root_id)
        self._listeners: list[Callable] = []

    @property
    def current_root_id(self):
        return self.state.current_root_id

    @property
    def history(self) -> list:
        return list(self.state.history)

    @property
    def can_go_back(self) -> bool:
        return len(self.state.history) > 0

    def subscribe(self, listener: Callable) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self.state.current_root_id)

    def visit(self, new_root_id) -> bool:
        """Re-root on `new_root_id`. Clicking the current root again changes nothing."""
        if new_root_id == self.state.current_root_id:
            return False
        self.state.history.append(self.state.current_root_id)
        self.state.current_root_id = new_root_id
        self._notify()
        return True

    def back(self) -> bool:
        """Return to the previous root; no-op when there is no history."""
        if not self.state.history:
            return False
        self.state.current_root_id = self.state.history.pop()
        self._notify()
        return True

    def reset(self, default_root_id) -> None:
        """Clear history and jump to `default_root_id` (used when the snapshot changes)."""
        self.state.history.clear()
        self.state.current_root_id = default_root_id
        self._notify()

    def on_node_selected(self, member_id) -> bool:
        return self.visit(member_id)


class TreeSession:
    """
    One interactive visualization session over a graph snapshot.

    Owns a NavigationController and rebuilds the tree from its current root on every
    transition. The last `cache_size` trees are memoized by root id, which keeps repeated
    back navigation cheap.
    """

    def __init__(self, graph: FamilyGraph, cache_size: int = 8):
        self.graph = graph
        self.cache_size = cache_size
        self._cache: OrderedDict = OrderedDict()
        self.tree: TreeNode | None = None

        self.navigation = NavigationController(select_default_root(graph.members))
        self.navigation.subscribe(self._rebuild)
        self._rebuild(self.navigation.current_root_id)

    @property
    def current_root_id(self):
        return self.navigation.current_root_id

    @property
    def can_go_back(self) -> bool:
        return self.navigation.can_go_back

    def _build(self, root_id) -> TreeNode:
        if root_id in self._cache:
            self._cache.move_to_end(root_id)
            return self._cache[root_id]

        tree = build_tree(self.graph, root_id)
        if self.cache_size > 0:
            self._cache[root_id] = tree
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return tree

    def _rebuild(self, root_id) -> None:
        self.tree = None if root_id is None else self._build(root_id)

    def visit(self, member_id) -> bool:
        """
        Re-root the session on `member_id`.

        Raises:
            ValueError: if `member_id` is not in the graph; navigation state is unchanged
        """
        if not self.graph.has_member(member_id):
            raise ValueError(f"Member ID {member_id} not found in graph")
        return self.navigation.visit(member_id)

    def on_node_selected(self, member_id) -> bool:
        return self.visit(member_id)

    def back(self) -> bool:
        return self.navigation.back()

    def replace_graph(self, graph: FamilyGraph) -> None:
        """Swap in a new snapshot: drop cached trees and reset to its default root."""
        logger.debug("Replacing graph snapshot (%d members)", len(graph))
        self.graph = graph
        self._cache.clear()
        self.navigation.reset(select_default_root(graph.members))

"""Root selection and rooted tree construction from a FamilyGraph."""

from collections.abc import Iterable, Iterator
import logging

from graph import FamilyGraph
from models import FamilyMember, TreeNode

logger = logging.getLogger(__name__)


def select_default_root(members: Iterable[FamilyMember]) -> int | None:
    """
    Pick the default root: the member with the earliest birth date.

    Ties go to the first member in input order. Undated members are only picked when
    nobody has a birth date, in which case the first member is returned.

    Returns:
        The member id, or None when there are no members.
    """
    root: FamilyMember | None = None
    first: FamilyMember | None = None
    for member in members:
        if first is None:
            first = member
        if not member.birth_date:
            continue
        # ISO dates (YYYY-MM-DD) compare correctly as strings
        if root is None or member.birth_date < root.birth_date:
            root = member

    if root is None:
        root = first
    return root.id if root is not None else None


def sort_members(members: Iterable[FamilyMember]) -> list[FamilyMember]:
    """Oldest birth date first. Undated members go last; ties keep their input order."""
    return sorted(members, key=lambda m: (m.birth_date is None, m.birth_date or ""))


def sorted_children(graph: FamilyGraph, member_id) -> list[FamilyMember]:
    """The member's children in birth order, tie-broken by snapshot order."""
    child_ids = sorted(graph.child_ids(member_id), key=graph.index_of)
    return sort_members(graph.member(i) for i in child_ids)


def build_tree(graph: FamilyGraph, root_id) -> TreeNode:
    """
    Build the descendant tree rooted at `root_id`.

    Each node carries the member, the member's first spouse and the children sorted by
    birth date. A child that is already on the path from the root to the current node
    closes a parent/child cycle and is pruned instead of expanded.

    Raises:
        ValueError: if `root_id` is not a member of the graph
    """
    root = TreeNode(member=graph.member(root_id), spouse=graph.spouse_of(root_id))

    # Explicit stack of (node, path ids); each path is the set of ids from the root down
    # to and including that node.
    stack: list[tuple[TreeNode, frozenset]] = [(root, frozenset([root_id]))]
    while stack:
        node, path = stack.pop()
        member_id = node.member.id
        for child in sorted_children(graph, member_id):
            if child.id in path:
                logger.debug(
                    "Pruned cyclic branch: %s is an ancestor of %s", child.id, member_id
                )
                continue
            child_node = TreeNode(member=child, spouse=graph.spouse_of(child.id))
            node.children.append(child_node)
            stack.append((child_node, path | {child.id}))

    return root


def iter_nodes(tree: TreeNode) -> Iterator[tuple[TreeNode, int]]:
    """Pre-order walk yielding (node, depth)."""
    stack = [(tree, 0)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.children))


def tree_member_ids(tree: TreeNode) -> set:
    """Ids of every member and spouse shown in the tree."""
    ids = set()
    for node, _ in iter_nodes(tree):
        ids.add(node.member.id)
        if node.spouse is not None:
            ids.add(node.spouse.id)
    return ids


def unconnected_members(graph: FamilyGraph, tree: TreeNode | None) -> list[FamilyMember]:
    """Members not reachable from the tree's root, in input order."""
    if tree is None:
        return graph.members
    connected = tree_member_ids(tree)
    return [m for m in graph.members if m.id not in connected]

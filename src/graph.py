"""NetworkX graph building and adjacency lookups."""

from collections.abc import Iterable, Iterator
import logging

import networkx as nx

from models import FamilyMember, Relationship, RelationshipType

logger = logging.getLogger(__name__)


def iter_member_edges(members: Iterable[FamilyMember]) -> Iterator[Relationship]:
    """
    Yield every relationship edge embedded in the members, deduplicated.

    Each member carries both its outgoing (`relationships`) and incoming (`related_to`)
    edges, so the same edge usually shows up twice. First occurrence wins.
    """
    seen: set[tuple] = set()
    for member in members:
        for rel in (*member.relationships, *member.related_to):
            key = (rel.from_member_id, rel.to_member_id, rel.relationship_type)
            if key in seen:
                continue
            seen.add(key)
            yield rel


class FamilyGraph:
    """
    Read-only snapshot of family members and their typed relationship edges.

    Nodes and edges live in a NetworkX MultiDiGraph (a pair of members may share more than
    one edge type). Lookups by member and relationship type go through an adjacency index
    built once here, so the tree builder never scans edge lists.
    """

    def __init__(self, members: Iterable[FamilyMember] = ()):
        self._members: dict[int, FamilyMember] = {}
        self._order: dict[int, int] = {}
        self.G = nx.MultiDiGraph()

        for member in members:
            if member.id in self._members:
                continue
            self._order[member.id] = len(self._order)
            self._members[member.id] = member
            self.G.add_node(member.id, member=member)

        self._outgoing: dict[int, dict[RelationshipType, list[int]]] = {}
        self._incoming: dict[int, dict[RelationshipType, list[int]]] = {}
        self._dangling: list[Relationship] = []

        for rel in iter_member_edges(self._members.values()):
            src, dst, rel_type = rel.from_member_id, rel.to_member_id, rel.relationship_type
            if src not in self._members or dst not in self._members:
                self._dangling.append(rel)
                continue
            self.G.add_edge(src, dst, key=rel_type, relationship_type=rel_type)
            self._outgoing.setdefault(src, {}).setdefault(rel_type, []).append(dst)
            self._incoming.setdefault(dst, {}).setdefault(rel_type, []).append(src)

        if self._dangling:
            logger.debug("Skipped %d dangling relationship edges", len(self._dangling))

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, member_id) -> bool:
        return member_id in self._members

    def has_member(self, member_id) -> bool:
        return member_id in self._members

    @property
    def members(self) -> list[FamilyMember]:
        """Members in input order."""
        return list(self._members.values())

    def member(self, member_id) -> FamilyMember:
        try:
            return self._members[member_id]
        except KeyError:
            raise ValueError(f"Member ID {member_id} not found in graph") from None

    def index_of(self, member_id) -> int:
        """Position of the member in the input sequence."""
        return self._order[member_id]

    def targets(self, member_id, rel_type: RelationshipType) -> list[int]:
        """Ids this member points to with edges of `rel_type`."""
        return list(self._outgoing.get(member_id, {}).get(rel_type, ()))

    def sources(self, member_id, rel_type: RelationshipType) -> list[int]:
        """Ids pointing to this member with edges of `rel_type`."""
        return list(self._incoming.get(member_id, {}).get(rel_type, ()))

    def dangling_edges(self) -> list[Relationship]:
        """Edges whose source or target is not in the snapshot."""
        return list(self._dangling)

    def spouse_of(self, member_id) -> FamilyMember | None:
        """
        The member's spouse: the first outgoing spouse edge, falling back to the first
        incoming one so a one-directional edge still pairs both members.
        """
        spouses = self.spouses_of(member_id)
        return spouses[0] if spouses else None

    def spouses_of(self, member_id) -> list[FamilyMember]:
        """All spouses, outgoing edges first."""
        ids = self.targets(member_id, RelationshipType.SPOUSE) + self.sources(
            member_id, RelationshipType.SPOUSE
        )
        return [self._members[i] for i in dict.fromkeys(ids) if i != member_id]

    def child_ids(self, member_id) -> list[int]:
        """
        Ids of the member's children.

        PARENT_OF edges go parent -> child, CHILD_OF edges go child -> parent; either
        direction is enough for the pair to count.
        """
        ids = self.targets(member_id, RelationshipType.PARENT) + self.sources(
            member_id, RelationshipType.CHILD
        )
        return [i for i in dict.fromkeys(ids) if i != member_id]

    def parent_ids(self, member_id) -> list[int]:
        """Ids of the member's parents, mirror of `child_ids`."""
        ids = self.targets(member_id, RelationshipType.CHILD) + self.sources(
            member_id, RelationshipType.PARENT
        )
        return [i for i in dict.fromkeys(ids) if i != member_id]

    def parent_child_graph(self) -> nx.DiGraph:
        """Plain parent -> child digraph, used for cycle detection."""
        P = nx.DiGraph()
        P.add_nodes_from(self._members)
        for member_id in self._members:
            for child_id in self.child_ids(member_id):
                P.add_edge(member_id, child_id)
        return P

"""Graph validation for family tree snapshots."""

import networkx as nx

from graph import FamilyGraph
from models import RelationshipType


def validate_graph(graph: FamilyGraph) -> list[str]:
    """
    Validate a family graph snapshot for:
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent, parent younger than 12)
    - Death before birth
    - Edges pointing at members missing from the snapshot
    - Spouse edges recorded in one direction only
    - Members with more than one spouse

    None of these stop a tree from being built; they explain what the builder pruned,
    skipped or picked. Returns a list of warning messages.
    """
    warnings: list[str] = []

    parent_graph = graph.parent_child_graph()

    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    # ISO dates (YYYY-MM-DD) can be compared as strings
    for parent_id, child_id in parent_graph.edges():
        parent = graph.member(parent_id)
        child = graph.member(child_id)
        if not (parent.birth_date and child.birth_date):
            continue

        if child.birth_date < parent.birth_date:
            warnings.append(f"Impossible: {child.name} born before parent {parent.name}")
        elif int(child.birth_date[:4]) - int(parent.birth_date[:4]) < 12:
            warnings.append(
                f"Suspicious: {parent.name} was less than 12 years old when {child.name} was born"
            )

    for member in graph.members:
        if member.birth_date and member.death_date and member.death_date < member.birth_date:
            warnings.append(f"Impossible: {member.name} died before being born")

    for rel in graph.dangling_edges():
        warnings.append(
            f"Dangling {rel.relationship_type.value} edge: "
            f"{rel.from_member_id} -> {rel.to_member_id}"
        )

    for member in graph.members:
        for spouse_id in graph.targets(member.id, RelationshipType.SPOUSE):
            if member.id not in graph.targets(spouse_id, RelationshipType.SPOUSE):
                warnings.append(
                    f"One-directional spouse edge: {member.name} -> {graph.member(spouse_id).name}"
                )

        spouses = graph.spouses_of(member.id)
        if len(spouses) > 1:
            warnings.append(
                f"{member.name} has {len(spouses)} spouses; using {spouses[0].name}"
            )

    return warnings

"""Render adapters: printable chart, text outline and visualization data for a tree."""

from datetime import date
from pathlib import Path

import pydot

from graph import FamilyGraph
from labels import age, child_order_label
from models import FamilyMember, Gender, TreeNode
from tree import iter_nodes, sorted_children, unconnected_members

FILL_COLORS = {Gender.MALE: "lightblue", Gender.FEMALE: "lightpink"}


def _years(member: FamilyMember) -> str:
    birth_year = member.birth_date[:4] if member.birth_date else ""
    death_year = member.death_date[:4] if member.death_date else ""
    return f"{birth_year}-{death_year}"


def _person_node(member: FamilyMember) -> pydot.Node:
    style = "rounded,filled,dashed" if member.death_date else "rounded,filled"
    return pydot.Node(
        f"m{member.id}",
        label=f"{member.first_name}\n{member.last_name}\n{_years(member)}",
        shape="box",
        style=style,
        fillcolor=FILL_COLORS.get(member.gender, "lightgray"),
        fontcolor="gray30" if member.death_date else "black",
        fontsize="10",
    )


def tree_to_dot(tree: TreeNode) -> pydot.Dot:
    """
    Build a printable Graphviz chart for the tree using the union-node model.

    Every node and its spouse hang from a small family point that leads to their
    children, so:
    - Parents appear above children
    - Spouses share a rank
    - Siblings align under their family point
    """
    P = pydot.Dot(graph_type="digraph")
    P.set("rankdir", "TB")
    P.set("splines", "ortho")
    P.set("nodesep", "0.4")
    P.set("ranksep", "0.6")

    # A member can appear under more than one parent; draw each person once
    added: set[int] = set()

    def add_person(member: FamilyMember) -> None:
        if member.id not in added:
            added.add(member.id)
            P.add_node(_person_node(member))

    for i, (node, _) in enumerate(iter_nodes(tree)):
        add_person(node.member)
        if node.spouse is None and not node.children:
            continue

        fam_id = f"fam_{i}"
        P.add_node(pydot.Node(fam_id, shape="point", width="0.1", height="0.1", label=""))
        P.add_edge(pydot.Edge(f"m{node.member.id}", fam_id, dir="none", color="darkgray"))

        if node.spouse is not None:
            add_person(node.spouse)
            P.add_edge(pydot.Edge(f"m{node.spouse.id}", fam_id, dir="none", color="darkgray"))
            sg = pydot.Subgraph(f"couple_{i}", rank="same")
            sg.add_node(pydot.Node(f"m{node.member.id}"))
            sg.add_node(pydot.Node(f"m{node.spouse.id}"))
            P.add_subgraph(sg)

        for child in node.children:
            add_person(child.member)
            P.add_edge(pydot.Edge(fam_id, f"m{child.member.id}", color="darkgray"))

    return P


def plot_tree(tree: TreeNode, output_path: Path | None = None):
    """
    Render the printable chart.

    Args:
        tree: Tree built by `build_tree`
        output_path: Path to save the output image (png, svg or pdf). If None, displays
            interactively.
    """
    P = tree_to_dot(tree)

    if output_path:
        ext = output_path.suffix.lower().lstrip(".")
        if ext not in ("png", "svg", "pdf"):
            ext = "png"
        P.write(str(output_path), format=ext)
        return

    import tempfile

    import matplotlib.image as mpimg
    import matplotlib.pyplot as plt

    with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
        P.write(f.name, format="png")
        img = mpimg.imread(f.name)
        plt.figure(figsize=(20, 16))
        plt.imshow(img)
        plt.axis("off")
        plt.tight_layout()
        plt.show()


def member_to_dict(member: FamilyMember) -> dict:
    return {
        "id": member.id,
        "first_name": member.first_name,
        "last_name": member.last_name,
        "birth_date": member.birth_date,
        "death_date": member.death_date,
        "gender": member.gender.value if member.gender else None,
        "notes": member.notes,
    }


def tree_to_dict(tree: TreeNode) -> dict:
    """JSON-serializable nested form of the tree."""
    return {
        "member": member_to_dict(tree.member),
        "spouse": member_to_dict(tree.spouse) if tree.spouse else None,
        "children": [tree_to_dict(child) for child in tree.children],
    }


def circular_hierarchy(graph: FamilyGraph, root_id) -> dict:
    """
    Two-ring hierarchy for the circular visualization: the root in the center, then one
    segment per spouse followed by one per child in birth order. Clicking a segment
    re-roots the view on that member.
    """
    root = graph.member(root_id)

    segments = [
        {
            "id": spouse.id,
            "name": spouse.name,
            "member": member_to_dict(spouse),
            "is_spouse": True,
            "has_children": False,
        }
        for spouse in graph.spouses_of(root_id)
    ]
    segments.extend(
        {
            "id": child.id,
            "name": child.name,
            "member": member_to_dict(child),
            "is_spouse": False,
            "has_children": bool(graph.child_ids(child.id)),
        }
        for child in sorted_children(graph, root_id)
    )

    return {
        "id": root.id,
        "name": root.name,
        "member": member_to_dict(root),
        "children": segments,
    }


def _describe(member: FamilyMember, today: date | None) -> str:
    text = member.name
    if member.death_date:
        text += " †"
    if member.birth_date:
        text += f", {age(member.birth_date, member.death_date, today=today)}"
    return text


def render_text(tree: TreeNode | None, graph: FamilyGraph, today: date | None = None) -> str:
    """Indented outline of the tree for printing, followed by unconnected members."""
    if tree is None:
        return "No family members found."

    lines: list[str] = []
    for node, depth in iter_nodes(tree):
        indent = "    " * depth
        line = f"{indent}{_describe(node.member, today)}"
        if depth > 0:
            order = child_order_label(graph, node.member.id)
            if order:
                line += f" [{order}]"
        lines.append(line)

        if node.spouse is not None:
            lines.append(f"{indent}  & {_describe(node.spouse, today)}")
        if node.member.notes:
            lines.append(f"{indent}  {node.member.notes}")

    others = unconnected_members(graph, tree)
    if others:
        lines.append("")
        lines.append(f"Not connected to this tree ({len(others)}):")
        lines.extend(f"  {_describe(m, today)}" for m in others)

    return "\n".join(lines)

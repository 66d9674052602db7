"""Tests for root selection and tree building."""

import logging

import pytest

from graph import FamilyGraph
from models import FamilyMember
from tree import (
    build_tree,
    iter_nodes,
    select_default_root,
    sort_members,
    tree_member_ids,
    unconnected_members,
)


def _children_ids(node):
    return [c.member.id for c in node.children]


class TestSelectDefaultRoot:
    def test_empty_has_no_root(self):
        assert select_default_root([]) is None

    def test_oldest_member(self, santos_members):
        assert select_default_root(santos_members) == 1

    def test_tie_goes_to_first_occurrence(self):
        members = [
            FamilyMember(1, "A", "X", birth_date="1960-01-01"),
            FamilyMember(2, "B", "X", birth_date="1930-05-05"),
            FamilyMember(3, "C", "X", birth_date="1930-05-05"),
        ]
        assert select_default_root(members) == 2

    def test_undated_member_never_chosen_over_dated(self):
        members = [
            FamilyMember(1, "A", "X"),
            FamilyMember(2, "B", "X", birth_date="1990-01-01"),
        ]
        assert select_default_root(members) == 2

    def test_all_undated_falls_back_to_first(self):
        members = [FamilyMember(5, "A", "X"), FamilyMember(6, "B", "X")]
        assert select_default_root(members) == 5


class TestSortMembers:
    def test_undated_sort_last_in_input_order(self):
        members = [
            FamilyMember(1, "A", "X"),
            FamilyMember(2, "B", "X", birth_date="1985-01-01"),
            FamilyMember(3, "C", "X"),
            FamilyMember(4, "D", "X", birth_date="1980-01-01"),
        ]
        assert [m.id for m in sort_members(members)] == [4, 2, 1, 3]

    def test_same_birth_date_keeps_input_order(self):
        members = [
            FamilyMember(1, "A", "X", birth_date="1980-01-01"),
            FamilyMember(2, "B", "X", birth_date="1980-01-01"),
        ]
        assert [m.id for m in sort_members(members)] == [1, 2]


class TestBuildTree:
    def test_root_spouse_and_sorted_children(self, santos):
        tree = build_tree(santos, 1)
        assert tree.member.id == 1
        assert tree.spouse.id == 2
        # Luis 1962, Ana 1965, Rosa 1968, Pedro undated
        assert _children_ids(tree) == [4, 3, 5, 6]

    def test_grandchildren(self, santos):
        tree = build_tree(santos, 1)
        ana = tree.children[1]
        assert ana.member.id == 3
        assert ana.spouse.id == 7
        assert _children_ids(ana) == [8]
        assert ana.children[0].children == []

    def test_reroot_on_any_member(self, santos):
        tree = build_tree(santos, 3)
        assert tree.member.id == 3
        assert tree.spouse.id == 7
        assert _children_ids(tree) == [8]

    def test_unknown_root_fails_fast(self, santos):
        with pytest.raises(ValueError, match="Member ID 404"):
            build_tree(santos, 404)

    def test_children_sorted_by_birth_date_everywhere(self, santos):
        for node, _ in iter_nodes(build_tree(santos, 1)):
            dated = [c.member.birth_date for c in node.children if c.member.birth_date]
            assert dated == sorted(dated)
            undated_seen = False
            for child in node.children:
                if child.member.birth_date is None:
                    undated_seen = True
                else:
                    assert not undated_seen

    def test_children_order_follows_member_order_not_edge_order(self, graph_from):
        people = [
            {"id": 1, "birth_date": "1950-01-01"},
            {"id": 2, "birth_date": "1980-01-01"},
            {"id": 3, "birth_date": "1980-01-01"},
        ]
        graph = graph_from(people, [(1, 3, "parent"), (1, 2, "parent")])
        assert _children_ids(build_tree(graph, 1)) == [2, 3]

    def test_one_directional_spouse(self, graph_from):
        graph = graph_from([{"id": "A"}, {"id": "B"}], [("A", "B", "spouse")])
        assert build_tree(graph, "A").spouse.id == "B"
        assert build_tree(graph, "B").spouse.id == "A"

    def test_dangling_child_edge_skipped(self, graph_from):
        graph = graph_from([{"id": 1}, {"id": 2}], [(1, 2, "parent"), (1, 3, "parent")])
        assert _children_ids(build_tree(graph, 1)) == [2]

    def test_two_member_cycle_is_pruned(self, graph_from, caplog):
        graph = graph_from([{"id": "A"}, {"id": "B"}], [("A", "B", "parent"), ("B", "A", "parent")])

        with caplog.at_level(logging.DEBUG, logger="tree"):
            tree = build_tree(graph, "A")

        assert tree.member.id == "A"
        assert _children_ids(tree) == ["B"]
        assert tree.children[0].children == []
        assert "Pruned cyclic branch" in caplog.text

    def test_longer_cycle_terminates(self, graph_from):
        people = [{"id": i} for i in range(4)]
        edges = [(i, (i + 1) % 4, "parent") for i in range(4)]
        tree = build_tree(graph_from(people, edges), 0)

        depths = {node.member.id: depth for node, depth in iter_nodes(tree)}
        assert depths == {0: 0, 1: 1, 2: 2, 3: 3}

    def test_self_parent_edge_ignored(self, graph_from):
        graph = graph_from([{"id": 1}], [(1, 1, "parent")])
        assert build_tree(graph, 1).children == []

    def test_shared_descendant_appears_under_each_parent(self, graph_from):
        # 1 is parent of 2 and 3; 2 is also parent of 3 (not a cycle)
        people = [{"id": 1}, {"id": 2}, {"id": 3}]
        edges = [(1, 2, "parent"), (1, 3, "parent"), (2, 3, "parent")]
        tree = build_tree(graph_from(people, edges), 1)
        assert _children_ids(tree) == [2, 3]
        assert _children_ids(tree.children[0]) == [3]

    def test_deep_line_does_not_recurse(self, graph_from):
        people = [{"id": i} for i in range(3000)]
        edges = [(i, i + 1, "parent") for i in range(2999)]
        tree = build_tree(graph_from(people, edges), 0)
        assert max(depth for _, depth in iter_nodes(tree)) == 2999

    def test_builds_are_independent(self, santos):
        first = build_tree(santos, 1)
        second = build_tree(santos, 1)
        assert first is not second
        assert first.children[0] is not second.children[0]


class TestTreeMembership:
    def test_tree_member_ids_include_spouses(self, santos):
        ids = tree_member_ids(build_tree(santos, 1))
        assert ids == {1, 2, 3, 4, 5, 6, 7, 8}

    def test_unconnected_members(self, santos):
        assert [m.id for m in unconnected_members(santos, build_tree(santos, 1))] == [9]
        assert [m.id for m in unconnected_members(santos, build_tree(santos, 3))] == [
            1, 2, 4, 5, 6, 9
        ]

    def test_unconnected_without_tree(self):
        graph = FamilyGraph([FamilyMember(1, "A", "X")])
        assert [m.id for m in unconnected_members(graph, None)] == [1]

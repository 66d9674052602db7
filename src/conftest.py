"""Pytest fixtures: small in-memory family snapshots."""

import pytest

from graph import FamilyGraph
from models import FamilyMember, Gender, Relationship, RelationshipType


def make_members(people: list[dict], edges: list[tuple]) -> list[FamilyMember]:
    """
    Build members with each edge embedded on both ends, like the JSON export does.

    `edges` holds (from_id, to_id, "parent" | "child" | "spouse") tuples.
    """
    outgoing: dict = {p["id"]: [] for p in people}
    incoming: dict = {p["id"]: [] for p in people}
    for src, dst, rel_type in edges:
        rel = Relationship(src, dst, RelationshipType(rel_type))
        if src in outgoing:
            outgoing[src].append(rel)
        if dst in incoming:
            incoming[dst].append(rel)

    return [
        FamilyMember(
            id=p["id"],
            first_name=p.get("first_name", f"Person{p['id']}"),
            last_name=p.get("last_name", ""),
            birth_date=p.get("birth_date"),
            death_date=p.get("death_date"),
            gender=p.get("gender"),
            notes=p.get("notes"),
            relationships=tuple(outgoing[p["id"]]),
            related_to=tuple(incoming[p["id"]]),
        )
        for p in people
    ]


SANTOS_PEOPLE = [
    {"id": 1, "first_name": "Jose", "last_name": "Santos", "birth_date": "1940-03-10",
     "death_date": "2004-08-01", "gender": Gender.MALE},
    {"id": 2, "first_name": "Maria", "last_name": "Santos", "birth_date": "1942-07-22",
     "gender": Gender.FEMALE, "notes": "Family historian"},
    {"id": 3, "first_name": "Ana", "last_name": "Santos", "birth_date": "1965-05-01",
     "gender": Gender.FEMALE},
    {"id": 4, "first_name": "Luis", "last_name": "Santos", "birth_date": "1962-01-15",
     "gender": Gender.MALE},
    {"id": 5, "first_name": "Rosa", "last_name": "Santos", "birth_date": "1968-09-30",
     "gender": Gender.FEMALE},
    {"id": 6, "first_name": "Pedro", "last_name": "Santos", "gender": Gender.MALE},
    {"id": 7, "first_name": "Mark", "last_name": "Reyes", "birth_date": "1963-02-02",
     "gender": Gender.MALE},
    {"id": 8, "first_name": "Lia", "last_name": "Reyes", "birth_date": "1990-12-12",
     "gender": Gender.FEMALE},
    {"id": 9, "first_name": "Carmen", "last_name": "Diaz", "birth_date": "1950-01-01",
     "gender": Gender.FEMALE},
]


def _parent_child(parent_id: int, child_id: int) -> list[tuple]:
    return [(parent_id, child_id, "parent"), (child_id, parent_id, "child")]


def _couple(a: int, b: int) -> list[tuple]:
    return [(a, b, "spouse"), (b, a, "spouse")]


SANTOS_EDGES = [
    *_couple(1, 2),
    *[e for child in (3, 4, 5, 6) for e in _parent_child(1, child)],
    *[e for child in (3, 4, 5, 6) for e in _parent_child(2, child)],
    *_couple(3, 7),
    *_parent_child(3, 8),
    *_parent_child(7, 8),
]


@pytest.fixture
def santos_members() -> list[FamilyMember]:
    return make_members(SANTOS_PEOPLE, SANTOS_EDGES)


@pytest.fixture
def santos(santos_members) -> FamilyGraph:
    return FamilyGraph(santos_members)


@pytest.fixture
def graph_from():
    """Factory fixture: graph_from(people, edges) -> FamilyGraph."""

    def _graph_from(people: list[dict], edges: list[tuple]) -> FamilyGraph:
        return FamilyGraph(make_members(people, edges))

    return _graph_from

"""Data classes for family tree entities."""

from dataclasses import dataclass, field
from enum import Enum


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class RelationshipType(str, Enum):
    PARENT = "parent"  # from is parent of to
    CHILD = "child"  # from is child of to
    SPOUSE = "spouse"


@dataclass(frozen=True)
class Relationship:
    from_member_id: int
    to_member_id: int
    relationship_type: RelationshipType


@dataclass(frozen=True)
class FamilyMember:
    id: int
    first_name: str
    last_name: str
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    gender: Gender | None = None
    notes: str | None = None
    relationships: tuple[Relationship, ...] = ()  # edges where this member is the source
    related_to: tuple[Relationship, ...] = ()  # edges where this member is the target

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class TreeNode:
    member: FamilyMember
    spouse: FamilyMember | None = None
    children: list["TreeNode"] = field(default_factory=list)

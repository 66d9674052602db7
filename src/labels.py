"""Age and birth-order labels for family members."""

from datetime import date

from graph import FamilyGraph
from models import FamilyMember
from tree import sorted_children


def to_date(value: str | date) -> date:
    """Accept a date or an ISO string (extra time component ignored)."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def age_in_years(birth_date: str | date, end_date: str | date) -> int:
    """Completed years between the two dates (truncated, never rounded)."""
    birth = to_date(birth_date)
    end = to_date(end_date)
    years = end.year - birth.year
    if (end.month, end.day) < (birth.month, birth.day):
        years -= 1
    return years


def age(
    birth_date: str | date, death_date: str | date | None = None, today: date | None = None
) -> str:
    """
    Describe a member's age.

    Living members get their age as of `today` and their birth year, e.g. "41 years (1983)".
    Deceased members get their age at death and both years, e.g. "70 years (1950–2020)".
    """
    birth = to_date(birth_date)
    if death_date:
        death = to_date(death_date)
        return f"{age_in_years(birth, death)} years ({birth.year}–{death.year})"

    if today is None:
        today = date.today()
    return f"{age_in_years(birth, today)} years ({birth.year})"


def ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def ordinal_label(
    child: FamilyMember,
    parent: FamilyMember,
    siblings: list[FamilyMember],
    other_parent: FamilyMember | None = None,
) -> str:
    """
    Birth-order label like "2nd child of Maria Santos (of 4)".

    `siblings` is the parent's full child list, already sorted by birth date. Returns an
    empty string when `child` is not among them.
    """
    position = next((i for i, s in enumerate(siblings, start=1) if s.id == child.id), None)
    if position is None:
        return ""

    parent_names = parent.name
    if other_parent is not None:
        parent_names = f"{parent.name} & {other_parent.name}"
    return f"{ordinal(position)} child of {parent_names} (of {len(siblings)})"


def child_order_label(graph: FamilyGraph, child_id) -> str:
    """Birth-order label against the child's first parent in the graph, or ""."""
    parent_ids = graph.parent_ids(child_id)
    if not parent_ids:
        return ""

    parent = graph.member(parent_ids[0])
    return ordinal_label(
        graph.member(child_id),
        parent,
        sorted_children(graph, parent.id),
        other_parent=graph.spouse_of(parent.id),
    )

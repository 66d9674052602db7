"""Snapshot loading: JSON member exports, GEDCOM files and date normalization."""

from collections.abc import Iterable
from datetime import date
import json
import logging
from pathlib import Path
import re

from ged4py import GedcomReader

from models import FamilyMember, Gender, Relationship, RelationshipType

logger = logging.getLogger(__name__)


MONTH_MAP = {
    "JAN": 1,
    "JANUARY": 1,
    "FEB": 2,
    "FEBRUARY": 2,
    "MAR": 3,
    "MARCH": 3,
    "APR": 4,
    "APRIL": 4,
    "MAY": 5,
    "JUN": 6,
    "JUNE": 6,
    "JUL": 7,
    "JULY": 7,
    "AUG": 8,
    "AUGUST": 8,
    "SEP": 9,
    "SEPT": 9,
    "SEPTEMBER": 9,
    "OCT": 10,
    "OCTOBER": 10,
    "NOV": 11,
    "NOVEMBER": 11,
    "DEC": 12,
    "DECEMBER": 12,
}

QUALIFIER_RE = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*",
    flags=re.IGNORECASE,
)


def _iso(year: int, month: int | None, day: int | None) -> str | None:
    if month is None or day is None:
        return None
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _month(name: str) -> int | None:
    return MONTH_MAP.get(name.upper().rstrip("."))


def parse_date_string(date_str: str | None) -> str | None:
    """
    Normalize a date string into ISO format (YYYY-MM-DD).
    Returns None if the date cannot be parsed.

    Handles formats like:
    - "1950-01-01" and timestamps like "1950-01-01T00:00:00.000000Z"
    - "1746-00-00" (unknown month/day default to 1)
    - "25 NOV 1954", "08 March 1893", "11 Aug. 1968", "02 May1838"
    - "NOV 1954", "May, 1837"
    - "1698", "ABOUT 1905", "(1789?)"
    - "01-27-1920", "1/15/1957", "04 05 1911" (month first)
    - "April 17, 1850", "SEPT. 17,1910", "Oct.12,1929"
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = QUALIFIER_RE.sub("", s).strip()
    if not s:
        return None

    # ISO date, optionally followed by a time component
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?$", s)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _iso(year, month or 1, day or 1)

    # Day, month name, year: "25 NOV 1954", "11 Aug. 1968", "02 May1838"
    match = re.match(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$", s)
    if match:
        return _iso(int(match.group(3)), _month(match.group(2)), int(match.group(1)))

    # Month name, year: "NOV 1954", "May, 1837"
    match = re.match(r"^([A-Za-z]+)\.?,?\s*(\d{4})$", s)
    if match:
        return _iso(int(match.group(2)), _month(match.group(1)), 1)

    # Year only
    match = re.match(r"^(\d{4})$", s)
    if match:
        return _iso(int(match.group(1)), 1, 1)

    # Numeric, month first: "01-27-1920", "01/27/1920", "04 05 1911"
    match = re.match(r"^(\d{1,2})[-/\s]+(\d{1,2})[-/\s]+(\d{4})$", s)
    if match:
        return _iso(int(match.group(3)), int(match.group(1)), int(match.group(2)))

    # Month name, day, year: "April 17, 1850", "SEPT. 17,1910", "Oct.12,1929"
    match = re.match(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$", s)
    if match:
        return _iso(int(match.group(3)), _month(match.group(1)), int(match.group(2)))

    return None


def parse_gender(value) -> Gender | None:
    """Map "male"/"female" (or GEDCOM "M"/"F") to Gender; anything else is None."""
    if not value:
        return None
    value = str(value).strip().lower()
    if value in ("male", "m"):
        return Gender.MALE
    if value in ("female", "f"):
        return Gender.FEMALE
    return None


def parse_relationship(record: dict) -> Relationship | None:
    """Build a Relationship from an exported edge record, or None for unsupported types."""
    try:
        rel_type = RelationshipType(record.get("relationship_type"))
    except ValueError:
        logger.debug("Skipping relationship of type %r", record.get("relationship_type"))
        return None

    for key in ("from_member_id", "to_member_id"):
        if record.get(key) is None:
            raise ValueError(f"Relationship record without {key}: {record!r}")

    return Relationship(
        from_member_id=record["from_member_id"],
        to_member_id=record["to_member_id"],
        relationship_type=rel_type,
    )


def _relationships(records: Iterable[dict] | None) -> tuple[Relationship, ...]:
    parsed = (parse_relationship(r) for r in records or ())
    return tuple(r for r in parsed if r is not None)


def members_from_records(records: Iterable[dict]) -> list[FamilyMember]:
    """
    Convert exported member records into FamilyMember objects, keeping input order.

    Each record embeds its outgoing edges under "relationships" and its incoming edges
    under "related_to".
    """
    members: list[FamilyMember] = []
    for record in records:
        if record.get("id") is None:
            raise ValueError(f"Family member record without an id: {record!r}")

        members.append(
            FamilyMember(
                id=record["id"],
                first_name=record.get("first_name") or "",
                last_name=record.get("last_name") or "",
                birth_date=parse_date_string(record.get("birth_date")),
                death_date=parse_date_string(record.get("death_date")),
                gender=parse_gender(record.get("gender")),
                notes=record.get("notes") or None,
                relationships=_relationships(record.get("relationships")),
                related_to=_relationships(record.get("related_to")),
            )
        )
    return members


def extract_numeric_id(xref_id: str) -> int:
    """Extract numeric part from GEDCOM xref_id like '@I_347421849@' or 'I674624289'."""
    digits = re.sub(r"[^0-9]", "", xref_id)
    if not digits:
        raise ValueError(f"No numeric ID found in: {xref_id}")
    return int(digits)


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def extract_name_parts(indi) -> tuple[str, str]:
    """Extract given name and surname from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return ("Unknown", "")

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        given, surname, suffix = name_rec.value
        if suffix:
            given = f"{given} {suffix}".strip()
        return (given or "Unknown", surname or "")

    # Fallback: string format "Given /Surname/"
    givn = name_rec.sub_tag("GIVN")
    surn = name_rec.sub_tag("SURN")
    if givn or surn:
        return (givn.value if givn else "Unknown", surn.value if surn else "")

    parts = str(name_rec.value).split("/")
    given = parts[0].strip() or "Unknown"
    surname = parts[1].strip() if len(parts) > 1 else ""
    return (given, surname)


def extract_event_date(indi, tag: str) -> str | None:
    """Extract the raw date string of an event tag (BIRT, DEAT, etc.)."""
    event = indi.sub_tag(tag)
    if event is None:
        return None

    date_rec = event.sub_tag("DATE")
    # ged4py may return DateValue objects
    if date_rec and date_rec.value:
        return str(date_rec.value)
    return None


def members_from_gedcom(reader: GedcomReader) -> list[FamilyMember]:
    """
    Extract members from parsed GEDCOM data.

    FAM records become edges: a mutual spouse pair for husband and wife, and for every
    child a PARENT edge from each parent plus a CHILD edge back to each parent.
    """
    people: dict[int, dict] = {}

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue

        indi_id = extract_numeric_id(rec.xref_id)
        first_name, last_name = extract_name_parts(rec)
        sex_rec = rec.sub_tag("SEX")
        note_rec = rec.sub_tag("NOTE")

        people[indi_id] = {
            "id": indi_id,
            "first_name": first_name,
            "last_name": last_name,
            "birth_date": parse_date_string(extract_event_date(rec, "BIRT")),
            "death_date": parse_date_string(extract_event_date(rec, "DEAT")),
            "gender": parse_gender(sex_rec.value if sex_rec else None),
            "notes": str(note_rec.value) if note_rec and note_rec.value else None,
            "relationships": [],
            "related_to": [],
        }

    def link(src: int, dst: int, rel_type: RelationshipType) -> None:
        rel = Relationship(from_member_id=src, to_member_id=dst, relationship_type=rel_type)
        if src in people:
            people[src]["relationships"].append(rel)
        if dst in people:
            people[dst]["related_to"].append(rel)

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue

        husb = rec.sub_tag("HUSB")
        wife = rec.sub_tag("WIFE")
        parents = [
            extract_numeric_id(p.xref_id) for p in (husb, wife) if p is not None and p.xref_id
        ]

        if len(parents) == 2:
            link(parents[0], parents[1], RelationshipType.SPOUSE)
            link(parents[1], parents[0], RelationshipType.SPOUSE)

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = extract_numeric_id(child.xref_id)
            for parent_id in parents:
                link(parent_id, child_id, RelationshipType.PARENT)
                link(child_id, parent_id, RelationshipType.CHILD)

    return [
        FamilyMember(
            **{
                **person,
                "relationships": tuple(person["relationships"]),
                "related_to": tuple(person["related_to"]),
            }
        )
        for person in people.values()
    ]


def load_snapshot(path: Path) -> list[FamilyMember]:
    """
    Load members from a JSON export or a GEDCOM (.ged) file.

    JSON may be a bare list of member records or an object wrapping it under
    "family_members" or "data".
    """
    path = Path(path)
    if path.suffix.lower() == ".ged":
        return members_from_gedcom(parse_gedcom(path))

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("family_members", data.get("data"))
    if not isinstance(data, list):
        raise ValueError(f"No family member list found in {path}")
    return members_from_records(data)

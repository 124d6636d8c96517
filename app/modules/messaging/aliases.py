"""Contractor alias labels and assignment ordering.

Labels are bijective base-26: A..Z, AA..AZ, BA.. so a project never runs out
of labels. Contractors are labelled in order of their first interaction with
the project; labels already handed out never change.
"""
from datetime import datetime, timezone
import re
from typing import Dict, Iterable, List, Optional, Set, Tuple

_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_FRACTION = re.compile(r"\.(\d+)")
_SHORT_OFFSET = re.compile(r"([T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?[+-]\d{2})$")


def alias_label(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA, 701 -> ZZ, 702 -> AAA"""
    if index < 0:
        raise ValueError("alias index must be non-negative")
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = _LETTERS[rem] + label
    return label


def alias_index(label: str) -> int:
    """Inverse of alias_label. Raises ValueError for anything that is not an upper-case label."""
    if not label or any(ch not in _LETTERS for ch in label):
        raise ValueError(f"invalid alias label: {label!r}")
    n = 0
    for ch in label:
        n = n * 26 + _LETTERS.index(ch) + 1
    return n - 1


def free_labels(used: Iterable[str]):
    """Yield unused labels, lowest first"""
    taken: Set[int] = set()
    for label in used:
        try:
            taken.add(alias_index(label))
        except ValueError:
            # foreign labels (e.g. "1" from older data) never collide with ours
            continue
    index = 0
    while True:
        if index not in taken:
            yield alias_label(index)
        index += 1


def _normalise_timestamp(text: str) -> str:
    # Postgres trims trailing zeros from fractions and may emit "+00" offsets
    text = text.strip().replace("Z", "+00:00")
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return _SHORT_OFFSET.sub(r"\1:00", text)


def parse_timestamp(value) -> datetime:
    """Parse a Postgres/ISO timestamp; unparseable values sort last"""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(_normalise_timestamp(str(value)))
        except (TypeError, ValueError):
            return datetime.max.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def order_by_first_interaction(interactions: Iterable[Tuple[str, object]]) -> List[str]:
    """Unique contractor ids ordered by their earliest interaction timestamp (ties broken by id)"""
    first_seen: Dict[str, datetime] = {}
    for contractor_id, timestamp in interactions:
        if not contractor_id:
            continue
        ts = parse_timestamp(timestamp)
        if contractor_id not in first_seen or ts < first_seen[contractor_id]:
            first_seen[contractor_id] = ts
    return sorted(first_seen, key=lambda cid: (first_seen[cid], cid))


def plan_alias_assignments(
    existing: Dict[str, str],
    ordered_contractors: List[str],
) -> List[Tuple[str, str]]:
    """New (contractor_id, alias) pairs for contractors without an alias.

    Existing aliases are kept; each newcomer takes the lowest unused label in
    first-interaction order.
    """
    labels = free_labels(existing.values())
    planned = []
    for contractor_id in ordered_contractors:
        if contractor_id in existing:
            continue
        planned.append((contractor_id, next(labels)))
    return planned


def sort_key(label: Optional[str]):
    """Sort aliased entries by label order, unaliased ones last"""
    if not label:
        return (2, 0, "")
    try:
        return (0, alias_index(label), label)
    except ValueError:
        return (1, 0, label)

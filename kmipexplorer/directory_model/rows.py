"""Row projection for the object table.

Turns one ``AttributeSet`` into the display columns of the directory table.
Everything here is a pure function of its inputs (``now`` is passed in).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..kmip.types import (
    ATTR_CRYPTOGRAPHIC_ALGORITHM,
    ATTR_CRYPTOGRAPHIC_LENGTH,
    ATTR_INITIAL_DATE,
    ATTR_NAME,
    ATTR_OBJECT_TYPE,
    ATTR_STATE,
    AttributeSet,
    NameValue,
    State,
    ValueKind,
)

STYLE_DEFAULT = ""
STYLE_ACTIVE = "active"
STYLE_DEACTIVATED = "deactivated"
STYLE_COMPROMISED = "compromised"
STYLE_DESTROYED = "destroyed"
STYLE_DESTROYED_COMPROMISED = "destroyed-compromised"

_STATE_STYLES: dict[str, str] = {
    State.ACTIVE.value: STYLE_ACTIVE,
    State.DEACTIVATED.value: STYLE_DEACTIVATED,
    State.COMPROMISED.value: STYLE_COMPROMISED,
    State.DESTROYED.value: STYLE_DESTROYED,
    State.DESTROYED_COMPROMISED.value: STYLE_DESTROYED_COMPROMISED,
}

COLUMN_HEADERS: tuple[str, ...] = ("ID", "Type", "Name", "Algorithm", "Size", "State", "Age")


@dataclass(frozen=True)
class DirectoryRow:
    """Display columns derived from one object's attributes."""

    uid: str
    object_type: str = ""
    name: str = ""
    algorithm: str = ""
    size: str = ""
    state: str = ""
    age: str = ""
    style: str = STYLE_DEFAULT

    def columns(self) -> tuple[str, ...]:
        return (self.uid, self.object_type, self.name, self.algorithm, self.size, self.state, self.age)


def format_age(delta: timedelta) -> str:
    """Bucket an object age: ``<1m``, ``{m}m``, ``{h}h{m}m`` or ``{d}d``."""
    seconds = int(delta.total_seconds())
    if seconds < 60:
        return "<1m"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h{(seconds % 3600) // 60}m"
    return f"{seconds // 86400}d"


def state_style(state: str) -> str:
    """Map a lifecycle state label to its presentation style tag."""
    return _STATE_STYLES.get(state, STYLE_DEFAULT)


def project_row(obj: AttributeSet, now: datetime) -> DirectoryRow:
    """Scan the attribute list once and build the table row.

    Only unindexed or index-0 entries count; a later entry replaces an earlier
    one. Attributes not shown in the table are skipped.
    """
    object_type = name = algorithm = size = state = age = ""
    for attribute in obj.attributes:
        if attribute.index not in (None, 0):
            continue
        value = attribute.value
        if attribute.name == ATTR_OBJECT_TYPE and value.kind is ValueKind.ENUM:
            object_type = str(value.value)
        elif attribute.name == ATTR_NAME and value.kind is ValueKind.NAME:
            assert isinstance(value.value, NameValue)
            name = value.value.value
        elif attribute.name == ATTR_NAME and value.kind is ValueKind.TEXT:
            name = str(value.value)
        elif attribute.name == ATTR_CRYPTOGRAPHIC_ALGORITHM and value.kind is ValueKind.ENUM:
            algorithm = str(value.value)
        elif attribute.name == ATTR_CRYPTOGRAPHIC_LENGTH and value.kind is ValueKind.INTEGER:
            size = str(value.value)
        elif attribute.name == ATTR_STATE and value.kind is ValueKind.ENUM:
            state = str(value.value)
        elif attribute.name == ATTR_INITIAL_DATE and value.kind is ValueKind.TIMESTAMP:
            assert isinstance(value.value, datetime)
            age = format_age(now - value.value)
    return DirectoryRow(
        uid=obj.uid,
        object_type=object_type,
        name=name,
        algorithm=algorithm,
        size=size,
        state=state,
        age=age,
        style=state_style(state),
    )


def row_matches(row: DirectoryRow, query: str) -> bool:
    """Case-insensitive substring match over the searchable columns."""
    needle = query.strip().casefold()
    if not needle:
        return True
    haystack = (row.uid, row.name, row.object_type, row.algorithm, row.state)
    return any(needle in column.casefold() for column in haystack)


__all__ = [
    "COLUMN_HEADERS",
    "DirectoryRow",
    "STYLE_ACTIVE",
    "STYLE_COMPROMISED",
    "STYLE_DEACTIVATED",
    "STYLE_DEFAULT",
    "STYLE_DESTROYED",
    "STYLE_DESTROYED_COMPROMISED",
    "format_age",
    "project_row",
    "row_matches",
    "state_style",
]

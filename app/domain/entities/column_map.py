from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

REQUIRED_FIELDS = (
    "branch",
    "status",
    "appointment_text",
    "first_name",
    "last_name",
    "total_price",
)


@dataclass(frozen=True)
class ColumnMap:
    """Named layout of one spreadsheet table.

    Maps a booking field name to its zero-based column index. Validated once at
    construction so a bad layout fails at startup instead of mid-report.
    """

    name: str
    width: int
    indices: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"Column map {self.name!r} must have a positive width")
        missing = [f for f in REQUIRED_FIELDS if f not in self.indices]
        if missing:
            raise ValueError(f"Column map {self.name!r} is missing required fields: {', '.join(missing)}")
        seen: dict[int, str] = {}
        for field_name, index in self.indices.items():
            if index < 0 or index >= self.width:
                raise ValueError(
                    f"Column map {self.name!r}: index {index} for {field_name!r} is outside 0..{self.width - 1}"
                )
            if index in seen:
                raise ValueError(
                    f"Column map {self.name!r}: {field_name!r} and {seen[index]!r} share column {index}"
                )
            seen[index] = field_name

    def has(self, field_name: str) -> bool:
        return field_name in self.indices

    def get(self, row: Sequence[Any], field_name: str) -> Any:
        """Return the raw cell for a field, or None if the field is unmapped or the row is short."""
        index = self.indices.get(field_name)
        if index is None or index >= len(row):
            return None
        return row[index]

    def build_row(self, values: Mapping[str, Any]) -> list[Any]:
        row: list[Any] = [""] * self.width
        for field_name, value in values.items():
            index = self.indices.get(field_name)
            if index is not None:
                row[index] = "" if value is None else value
        return row

    def merge_row(self, existing: Sequence[Any], values: Mapping[str, Any]) -> list[Any]:
        """Overlay values onto an existing row, padding it to the table width."""
        row = list(existing[: self.width]) + [""] * max(0, self.width - len(existing))
        for field_name, value in values.items():
            index = self.indices.get(field_name)
            if index is not None:
                row[index] = "" if value is None else value
        return row


def column_letter(width: int) -> str:
    """Spreadsheet letter of the last column for a table of this width (37 -> AK)."""
    letters = ""
    n = width
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def _indices(names: Iterable[str]) -> dict[str, int]:
    return {name: i for i, name in enumerate(names) if name}


_NORM_AND_MATCH = (
    "email_norm",
    "phone_norm",
    "social_norm",
    "full_name_norm",
    "companion_full_name_norm",
    "promo_hunter_status",
    "match_reason",
    "matched_source",
    "matched_row",
    "record_id",
    "record_status",
    "last_checked_at",
)

INTAKE_V37 = ColumnMap(
    name="intake_v37",
    width=37,
    indices=_indices(
        (
            "timestamp",
            "ad_interacted",
            "branch",
            "status",
            "first_name",
            "last_name",
            "age",
            "phone",
            "social_media",
            "email",
            "treatment",
            "area",
            "freebie",
            "appointment_text",
            "payment_mode",
            "total_price",
            "gender",
            "companion_first_name",
            "companion_last_name",
            "companion_age",
            "companion_freebie",
            "companion_treatment",
            "companion_gender",
            "booking_details",
            "agent",
        )
        + _NORM_AND_MATCH
    ),
)

_DB_BASE = (
    "timestamp",
    "branch",
    "status",
    "appointment_text",
    "first_name",
    "last_name",
    "age",
    "gender",
    "treatment",
    "area",
    "freebie",
    "companion_treatment",
    "total_price",
    "payment_mode",
    "phone",
    "social_media",
    "email",
    "agent",
    "booking_details",
    "ad_interacted",
    "companion_first_name",
    "companion_last_name",
    "companion_age",
    "companion_gender",
    "companion_freebie",
) + _NORM_AND_MATCH + (
    "legacy_full_name",
    "exclude_from_dashboards",
    "dash_booking_created_at",
    "dash_appointment_date",
    "dash_branch",
    "dash_booking_status",
)

DB_V43 = ColumnMap(name="db_v43", width=43, indices=_indices(_DB_BASE))

DB_V44 = ColumnMap(name="db_v44", width=44, indices=_indices(_DB_BASE + ("cancellation_time",)))

COLUMN_MAPS: dict[str, ColumnMap] = {m.name: m for m in (INTAKE_V37, DB_V43, DB_V44)}


def get_column_map(version: str) -> ColumnMap:
    try:
        return COLUMN_MAPS[version.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown column map version: {version!r}") from None

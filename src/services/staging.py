"""In-memory review session for extracted invoice rows.

A ``ReviewSession`` lives for one upload, from extraction until the user
confirms or cancels. Nothing here touches the database, and no validation is
applied to edits; rows are re-checked when they are committed.
"""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field, fields, replace
from typing import Any

from src.schemas.invoice import CandidateItem, StagedRowPayload
from src.services.exceptions import NotFoundError, ValidationError


def _new_row_id() -> str:
    return uuid.uuid4().hex


@dataclass
class StagedRow:
    """A candidate item plus its review state."""

    name: Any = ""
    brand: Any = None
    quantity: Any = 1
    unit: Any = "pcs"
    location: Any = "Pantry"
    category: Any = None
    notes: Any = None
    status: Any = "Fresh"
    price: Any = None
    id: str = field(default_factory=_new_row_id)
    selected: bool = True
    is_editing: bool = False


# Fields a reviewer may change through ``update_field``
EDITABLE_FIELDS = frozenset(
    f.name for f in fields(StagedRow) if f.name not in ("id", "selected", "is_editing")
)


class ReviewSession:
    """Ordered collection of staged rows with per-row selection and edit state."""

    def __init__(self) -> None:
        self._rows: list[StagedRow] = []

    @classmethod
    def from_candidates(cls, candidates: Iterable[CandidateItem]) -> "ReviewSession":
        """Stage every extracted candidate, all selected."""
        session = cls()
        for candidate in candidates:
            session.add_row(candidate)
        return session

    @classmethod
    def from_payload(cls, rows: Iterable[StagedRowPayload]) -> "ReviewSession":
        """Rebuild a session from rows posted back by a client."""
        session = cls()
        seen: set[str] = set()
        for payload in rows:
            data = payload.model_dump()
            row_id = data.pop("id", None)
            if not row_id or row_id in seen:
                row_id = _new_row_id()
            seen.add(row_id)
            selected = data.pop("selected", True)
            session._rows.append(StagedRow(id=row_id, selected=selected, **data))
        return session

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self):
        return iter(list(self._rows))

    @property
    def rows(self) -> list[StagedRow]:
        return list(self._rows)

    def get(self, row_id: str) -> StagedRow:
        for row in self._rows:
            if row.id == row_id:
                return row
        raise NotFoundError(f"Row {row_id} not found in review session")

    def add_row(self, candidate: CandidateItem) -> StagedRow:
        """Stage one candidate item."""
        row = StagedRow(**candidate.model_dump())
        self._rows.append(row)
        return row

    def add_blank_row(self) -> StagedRow:
        """Append an empty row for the reviewer to fill in, already in edit mode."""
        row = StagedRow(name="", is_editing=True)
        self._rows.append(row)
        return row

    def toggle_select(self, row_id: str) -> StagedRow:
        row = self.get(row_id)
        row.selected = not row.selected
        return row

    def toggle_select_all(self) -> bool:
        """Select every row, or deselect every row if all are already selected.

        Returns the new selection state.
        """
        new_state = not all(row.selected for row in self._rows)
        for row in self._rows:
            row.selected = new_state
        return new_state

    def update_field(self, row_id: str, field_name: str, value: Any) -> StagedRow:
        if field_name not in EDITABLE_FIELDS:
            raise ValidationError(f"Field '{field_name}' cannot be edited")
        row = self.get(row_id)
        setattr(row, field_name, value)
        return row

    def duplicate_row(self, row_id: str) -> StagedRow:
        """Copy a row under a new id, appended at the end and not in edit mode."""
        copy = replace(self.get(row_id), id=_new_row_id(), is_editing=False)
        self._rows.append(copy)
        return copy

    def remove_row(self, row_id: str) -> None:
        self.get(row_id)
        self._rows = [row for row in self._rows if row.id != row_id]

    def start_edit(self, row_id: str) -> StagedRow:
        row = self.get(row_id)
        row.is_editing = True
        return row

    def stop_edit(self, row_id: str) -> StagedRow:
        row = self.get(row_id)
        row.is_editing = False
        return row

    def selected_rows(self) -> list[StagedRow]:
        return [row for row in self._rows if row.selected]

    def close(self) -> None:
        """Discard every row; called when the review is confirmed or cancelled."""
        self._rows.clear()

"""Review session tests."""

import pytest

from src.schemas.invoice import CandidateItem, StagedRowPayload
from src.services.exceptions import NotFoundError, ValidationError
from src.services.staging import ReviewSession


@pytest.fixture
def session():
    return ReviewSession.from_candidates(
        [
            CandidateItem(name="Tomatoes", quantity=2, unit="kg", location="Fridge"),
            CandidateItem(name="Milk", quantity=1, unit="l", category="Dairy"),
            CandidateItem(name="Rice", quantity=5, unit="kg"),
        ]
    )


class TestStaging:
    """Tests for building a session."""

    def test_candidates_are_staged_selected(self, session):
        """Test that staged candidates start selected."""
        assert len(session) == 3
        assert all(row.selected for row in session)
        assert not any(row.is_editing for row in session)
        assert [row.name for row in session] == ["Tomatoes", "Milk", "Rice"]

    def test_rows_get_unique_ids(self, session):
        """Test that staged rows get unique ids."""
        ids = {row.id for row in session}
        assert len(ids) == 3

    def test_from_payload_keeps_selection_and_ids(self):
        """Test rebuilding a session from posted rows."""
        session = ReviewSession.from_payload(
            [
                StagedRowPayload(id="a", name="Tomatoes", quantity="2", selected=True),
                StagedRowPayload(id="b", name="Milk", selected=False),
            ]
        )
        assert [row.id for row in session] == ["a", "b"]
        assert session.get("a").quantity == "2"
        assert [row.name for row in session.selected_rows()] == ["Tomatoes"]

    def test_from_payload_replaces_missing_and_duplicate_ids(self):
        """Test that missing and repeated ids are replaced."""
        session = ReviewSession.from_payload(
            [
                StagedRowPayload(id="a", name="Tomatoes"),
                StagedRowPayload(id="a", name="Milk"),
                StagedRowPayload(name="Rice"),
            ]
        )
        ids = [row.id for row in session]
        assert ids[0] == "a"
        assert len(set(ids)) == 3


class TestSelection:
    """Tests for per-row and bulk selection."""

    def test_toggle_select(self, session):
        """Test toggling one row."""
        milk = session.rows[1]
        session.toggle_select(milk.id)
        assert not milk.selected
        assert [row.name for row in session.selected_rows()] == ["Tomatoes", "Rice"]
        session.toggle_select(milk.id)
        assert milk.selected

    def test_toggle_all_deselects_when_all_selected(self, session):
        """Test toggle-all when every row is selected."""
        assert session.toggle_select_all() is False
        assert session.selected_rows() == []

    def test_toggle_all_selects_when_any_deselected(self, session):
        """Test toggle-all when some row is deselected."""
        session.toggle_select(session.rows[0].id)
        assert session.toggle_select_all() is True
        assert len(session.selected_rows()) == 3

    def test_unknown_row(self, session):
        """Test operating on a row id that does not exist."""
        with pytest.raises(NotFoundError):
            session.toggle_select("missing")


class TestEditing:
    """Tests for field edits, duplication and removal."""

    def test_update_field_is_not_validated(self, session):
        """Test that edits are stored without validation."""
        row = session.rows[0]
        session.update_field(row.id, "quantity", "abc")
        session.update_field(row.id, "name", "")
        assert row.quantity == "abc"
        assert row.name == ""

    def test_update_unknown_field(self, session):
        """Test editing a field that is not editable."""
        with pytest.raises(ValidationError):
            session.update_field(session.rows[0].id, "selected", False)

    def test_start_and_stop_edit(self, session):
        """Test entering and leaving edit mode."""
        row = session.rows[2]
        session.start_edit(row.id)
        assert row.is_editing
        session.stop_edit(row.id)
        assert not row.is_editing

    def test_duplicate_row(self, session):
        """Test duplicating a row."""
        original = session.rows[1]
        session.start_edit(original.id)
        copy = session.duplicate_row(original.id)

        assert len(session) == 4
        assert session.rows[-1] is copy
        assert copy.id != original.id
        assert copy.name == original.name
        assert copy.category == "Dairy"
        assert not copy.is_editing

        session.update_field(copy.id, "name", "Skimmed Milk")
        assert original.name == "Milk"

    def test_remove_row(self, session):
        """Test removing a row."""
        rice = session.rows[2]
        session.remove_row(rice.id)
        assert len(session) == 2
        with pytest.raises(NotFoundError):
            session.get(rice.id)

    def test_add_blank_row(self, session):
        """Test adding a blank row."""
        row = session.add_blank_row()
        assert session.rows[-1] is row
        assert row.name == ""
        assert row.is_editing
        assert row.selected

    def test_close_discards_rows(self, session):
        """Test that closing discards every row."""
        session.close()
        assert len(session) == 0

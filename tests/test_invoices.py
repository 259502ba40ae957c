"""Invoice upload and commit tests."""

from unittest.mock import patch

import pytest

from src.config import get_settings
from src.models.enums import ItemAction
from src.models.item import InventoryItem
from src.models.item_log import ItemLog
from src.services.exceptions import ExtractionServiceError, MalformedExtractionOutput
from src.services.invoice_service import InvoiceCommitService
from src.services.staging import StagedRow

EXTRACTED = [
    {
        "name": "Tomatoes",
        "quantity": 2,
        "unit": "kg",
        "location": "Fridge",
        "category": "Vegetables",
        "notes": "Bought for ₹60",
    },
    {
        "name": "Milk",
        "brand": "Amul",
        "quantity": "1",
        "unit": "l",
        "location": "Fridge",
        "category": "Dairy",
    },
]


def _upload_text(client, headers, kitchen_id, text="Tomatoes 2kg ₹60\nAmul Milk 1l ₹65"):
    return client.post(
        "/api/v1/invoices/upload",
        headers=headers,
        json={"invoice_text": text, "kitchen_id": kitchen_id},
    )


def _commit(client, headers, kitchen_id, items):
    return client.post(
        "/api/v1/invoices/commit",
        headers=headers,
        json={"kitchen_id": kitchen_id, "items": items},
    )


class TestUpload:
    """Tests for invoice extraction into review rows."""

    def test_text_upload(self, client, auth_headers, kitchen, categories, fake_extraction):
        """Test uploading pasted invoice text."""
        fake_extraction.result = EXTRACTED

        response = _upload_text(client, auth_headers, kitchen.id)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["items_found"] == 2
        assert [i["name"] for i in data["items"]] == ["Tomatoes", "Milk"]
        assert data["items"][1]["quantity"] == 1
        assert all(i["status"] == "Fresh" for i in data["items"])

        [(document, category_names)] = fake_extraction.calls
        assert document.text.startswith("Tomatoes")
        assert "Dairy" in category_names

    def test_pdf_upload(self, client, auth_headers, kitchen, fake_extraction):
        """Test uploading a PDF invoice."""
        fake_extraction.result = EXTRACTED[:1]

        response = client.post(
            "/api/v1/invoices/upload",
            headers=auth_headers,
            files={"file": ("invoice.pdf", b"%PDF-1.4 invoice", "application/pdf")},
            data={"kitchen_id": str(kitchen.id)},
        )
        assert response.status_code == 200
        assert response.json()["items_found"] == 1
        [(document, _)] = fake_extraction.calls
        assert document.is_binary
        assert document.media_type == "application/pdf"

    def test_upload_does_not_persist(self, client, auth_headers, kitchen, fake_extraction, db):
        """Test that uploading only returns rows for review."""
        fake_extraction.result = EXTRACTED
        _upload_text(client, auth_headers, kitchen.id)
        assert db.query(InventoryItem).count() == 0

    def test_wrong_media_type(self, client, auth_headers, kitchen, fake_extraction):
        """Test uploading a file that is not a PDF."""
        response = client.post(
            "/api/v1/invoices/upload",
            headers=auth_headers,
            files={"file": ("receipt.png", b"\x89PNG", "image/png")},
            data={"kitchen_id": str(kitchen.id)},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"
        assert fake_extraction.calls == []

    def test_oversized_file(self, client, auth_headers, kitchen, fake_extraction, monkeypatch):
        """Test uploading a file over the size limit."""
        monkeypatch.setattr(get_settings(), "max_upload_bytes", 16)
        response = client.post(
            "/api/v1/invoices/upload",
            headers=auth_headers,
            files={"file": ("invoice.pdf", b"%PDF-" + b"x" * 32, "application/pdf")},
            data={"kitchen_id": str(kitchen.id)},
        )
        assert response.status_code == 400
        assert fake_extraction.calls == []

    def test_missing_kitchen_id(self, client, auth_headers, fake_extraction):
        """Test uploading a PDF without a kitchen id."""
        response = client.post(
            "/api/v1/invoices/upload",
            headers=auth_headers,
            files={"file": ("invoice.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 400

    def test_missing_text(self, client, auth_headers, kitchen, fake_extraction):
        """Test uploading blank invoice text."""
        response = _upload_text(client, auth_headers, kitchen.id, text="   ")
        assert response.status_code == 400

    def test_foreign_kitchen(self, client, other_auth_headers, kitchen, fake_extraction):
        """Test uploading into another user's kitchen."""
        fake_extraction.result = EXTRACTED
        response = _upload_text(client, other_auth_headers, kitchen.id)
        assert response.status_code == 404
        assert fake_extraction.calls == []

    def test_no_items_found(self, client, auth_headers, kitchen, fake_extraction):
        """Test an invoice where no row survives sanitization."""
        fake_extraction.result = [{"name": ""}, {"brand": "Amul"}, "Delivery fee"]
        response = _upload_text(client, auth_headers, kitchen.id)
        assert response.status_code == 422
        assert response.json()["error"] == "no_items_found"

    def test_service_error(self, client, auth_headers, kitchen, fake_extraction):
        """Test that an extraction service failure returns 502."""
        fake_extraction.error = ExtractionServiceError("Failed to process invoice")
        response = _upload_text(client, auth_headers, kitchen.id)
        assert response.status_code == 502
        assert response.json()["error"] == "service_error"

    def test_malformed_output(self, client, auth_headers, kitchen, fake_extraction):
        """Test that malformed extraction output returns 502."""
        fake_extraction.error = MalformedExtractionOutput("Could not read", raw_text="nope")
        response = _upload_text(client, auth_headers, kitchen.id)
        assert response.status_code == 502
        assert response.json()["error"] == "malformed_output"


class TestCommit:
    """Tests for adding reviewed rows to a kitchen."""

    def test_upload_review_commit(
        self, client, auth_headers, kitchen, categories, fake_extraction, db
    ):
        """Test upload, deselecting a row, then committing the rest."""
        fake_extraction.result = EXTRACTED
        rows = _upload_text(client, auth_headers, kitchen.id).json()["items"]
        rows[1]["selected"] = False

        response = _commit(client, auth_headers, kitchen.id, rows)
        assert response.status_code == 201
        assert response.json()["items_added"] == 1

        [item] = db.query(InventoryItem).all()
        assert item.name == "Tomatoes"
        assert item.kitchen_id == kitchen.id
        assert item.quantity == 2
        assert item.category_id == categories["Vegetables"].id
        assert item.status == "Fresh"
        assert item.notes == "Bought for ₹60"

        [log] = db.query(ItemLog).all()
        assert log.item_id == item.id
        assert log.action == ItemAction.ADDED.value
        assert log.quantity == 2

    def test_nothing_selected(self, client, auth_headers, kitchen, db):
        """Test that committing with no selected rows persists nothing."""
        response = _commit(
            client,
            auth_headers,
            kitchen.id,
            [{"name": "Milk", "selected": False}, {"name": "Bread", "selected": False}],
        )
        assert response.status_code == 400
        assert db.query(InventoryItem).count() == 0
        assert db.query(ItemLog).count() == 0

    def test_empty_batch(self, client, auth_headers, kitchen):
        """Test committing an empty list of rows."""
        assert _commit(client, auth_headers, kitchen.id, []).status_code == 400

    def test_foreign_kitchen(self, client, other_auth_headers, kitchen, db):
        """Test committing into another user's kitchen."""
        response = _commit(client, other_auth_headers, kitchen.id, [{"name": "Milk"}])
        assert response.status_code == 404
        assert db.query(InventoryItem).count() == 0

    def test_reviewed_edits_are_cleaned(self, client, auth_headers, kitchen, db):
        """Test that reviewer edits are cleaned on commit."""
        response = _commit(
            client,
            auth_headers,
            kitchen.id,
            [
                {
                    "name": "  Paneer  ",
                    "quantity": "abc",
                    "unit": "",
                    "location": None,
                    "category": "Unknown Category",
                    "status": "Rotten",
                }
            ],
        )
        assert response.json()["items_added"] == 1

        [item] = db.query(InventoryItem).all()
        assert item.name == "Paneer"
        assert item.quantity == 1
        assert item.unit == "pcs"
        assert item.location == "Pantry"
        assert item.category_id is None
        assert item.status == "Fresh"
        assert item.notes == "Added from invoice"

    def test_price_note(self, client, auth_headers, kitchen, db):
        """Test the note synthesized from a row price."""
        _commit(client, auth_headers, kitchen.id, [{"name": "Eggs", "price": 45}])
        [item] = db.query(InventoryItem).all()
        assert item.notes == f"Bought for {get_settings().currency_symbol}45"

    def test_blank_row_is_skipped(self, client, auth_headers, kitchen, db):
        """Test that a row with a blank name is skipped."""
        response = _commit(
            client, auth_headers, kitchen.id, [{"name": "   "}, {"name": "Bread"}]
        )
        assert response.status_code == 201
        assert response.json()["items_added"] == 1
        assert [i.name for i in db.query(InventoryItem).all()] == ["Bread"]


class TestCommitService:
    """Tests for row-level failure tolerance."""

    def test_failing_row_does_not_abort_batch(self, db, user, kitchen):
        """Test that one failing row does not stop the others."""
        def resolve(name, categories):
            if name == "Explodes":
                raise RuntimeError("lookup failed")
            return None

        rows = [
            StagedRow(name="Rice"),
            StagedRow(name="Flour", category="Explodes"),
            StagedRow(name="Salt"),
        ]
        service = InvoiceCommitService(db, currency="₹")
        with patch.object(InvoiceCommitService, "_resolve_category_id", side_effect=resolve):
            added = service.commit(kitchen.id, rows, user_id=user.id)

        assert added == 2
        names = sorted(i.name for i in db.query(InventoryItem).all())
        assert names == ["Rice", "Salt"]
        assert db.query(ItemLog).count() == 2

    def test_deselected_rows_are_ignored(self, db, user, kitchen):
        """Test that deselected rows are not committed."""
        rows = [StagedRow(name="Rice"), StagedRow(name="Salt", selected=False)]
        added = InvoiceCommitService(db).commit(kitchen.id, rows, user_id=user.id)
        assert added == 1
        assert [i.name for i in db.query(InventoryItem).all()] == ["Rice"]

    @pytest.mark.parametrize(
        "price,note",
        [
            (None, "Added from invoice"),
            ("", "Added from invoice"),
            ("12.50", "Bought for $12.50"),
        ],
    )
    def test_default_note(self, db, price, note):
        """Test the note used when a row has none."""
        assert InvoiceCommitService(db, currency="$")._default_note(price) == note

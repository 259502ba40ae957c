#!/usr/bin/env python3
"""Import a grocery invoice into a kitchen from the terminal.

Runs the same pipeline as the web upload: the invoice is extracted, staged
for review, and only the rows left selected are committed.

Usage:
    python scripts/import_invoice.py invoice.pdf --subject demo-user
    python scripts/import_invoice.py invoice.txt --subject demo-user --kitchen-id 3 --yes
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.database import SessionLocal
from src.logging_config import configure_logging
from src.services.auth import get_or_create_user
from src.services.category_service import list_categories
from src.services.document import PDF_MEDIA_TYPE, NormalizedDocument, normalize_document
from src.services.exceptions import InventoryError
from src.services.extraction import ExtractionClient
from src.services.invoice_service import InvoiceCommitService, extract_invoice_items
from src.services.kitchen_service import get_user_kitchen, repair_default_kitchens
from src.services.staging import ReviewSession

logger = logging.getLogger("import_invoice")

HELP = """Commands (N is the row number shown in the table):
  t N              toggle selection of row N
  a                select all / deselect all
  e N FIELD VALUE  set FIELD of row N (name, brand, quantity, unit, location,
                   category, notes, price)
  d N              duplicate row N
  r N              remove row N
  n NAME           add a new row
  c                commit selected rows and exit
  q                quit without committing"""


def load_document(path: Path) -> NormalizedDocument:
    """Read a PDF or text invoice from disk."""
    if path.suffix.lower() == ".pdf":
        return normalize_document(content=path.read_bytes(), content_type=PDF_MEDIA_TYPE)
    return normalize_document(text=path.read_text(encoding="utf-8"))


def print_rows(session: ReviewSession) -> None:
    print()
    print(f"{'#':>3} {'sel':<3} {'name':<30} {'qty':>4} {'unit':<6} {'location':<8} category")
    for index, row in enumerate(session.rows, start=1):
        mark = "[x]" if row.selected else "[ ]"
        print(
            f"{index:>3} {mark:<3} {str(row.name)[:30]:<30} {str(row.quantity):>4} "
            f"{str(row.unit or ''):<6} {str(row.location or ''):<8} {row.category or '-'}"
        )
    print(f"{len(session.selected_rows())} of {len(session)} rows selected")


def _row_id(session: ReviewSession, token: str) -> str:
    rows = session.rows
    index = int(token) - 1
    if index < 0 or index >= len(rows):
        raise IndexError(f"No row {token}")
    return rows[index].id


def review(session: ReviewSession) -> bool:
    """Interactive review loop. Returns True when the user chose to commit."""
    print(HELP)
    while True:
        print_rows(session)
        try:
            line = input("> ").strip()
        except EOFError:
            return False
        if not line:
            continue

        command, *args = line.split(maxsplit=3)
        try:
            if command == "t":
                session.toggle_select(_row_id(session, args[0]))
            elif command == "a":
                session.toggle_select_all()
            elif command == "e":
                row_id = _row_id(session, args[0])
                session.start_edit(row_id)
                session.update_field(row_id, args[1], args[2] if len(args) > 2 else None)
                session.stop_edit(row_id)
            elif command == "d":
                session.duplicate_row(_row_id(session, args[0]))
            elif command == "r":
                session.remove_row(_row_id(session, args[0]))
            elif command == "n":
                row = session.add_blank_row()
                session.update_field(row.id, "name", " ".join(args))
                session.stop_edit(row.id)
            elif command == "c":
                return True
            elif command == "q":
                return False
            else:
                print(HELP)
        except (IndexError, ValueError, InventoryError) as e:
            print(f"Error: {e}")


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("invoice", type=Path, help="PDF or text invoice")
    parser.add_argument("--subject", required=True, help="identity-provider user id")
    parser.add_argument("--kitchen-id", type=int, help="target kitchen (default kitchen if omitted)")
    parser.add_argument("--yes", action="store_true", help="commit every row without review")
    args = parser.parse_args()

    configure_logging()
    db = SessionLocal()
    try:
        user = get_or_create_user(db, args.subject, {})
        if args.kitchen_id:
            kitchen = get_user_kitchen(db, args.kitchen_id, user.id)
        else:
            kitchen = repair_default_kitchens(db, user.id)
            if kitchen is None:
                print("No kitchen found for this user; create one first.")
                return 1

        document = load_document(args.invoice)
        categories = [c.name for c in list_categories(db)] or None
        candidates = asyncio.run(extract_invoice_items(ExtractionClient(), document, categories))
        if not candidates:
            print("No items found in the invoice.")
            return 1

        session = ReviewSession.from_candidates(candidates)
        try:
            if not args.yes and not review(session):
                print("Import cancelled.")
                return 0
            added = InvoiceCommitService(db).commit(
                kitchen.id, session.selected_rows(), user_id=user.id
            )
        finally:
            session.close()

        print(f"Added {added} items to '{kitchen.name}'.")
        return 0
    except InventoryError as e:
        logger.error(f"Import failed: {e.message}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

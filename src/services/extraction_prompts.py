"""Prompt templates for invoice extraction."""

from src.models.enums import StorageLocation
from src.services.category_service import DEFAULT_CATEGORY_NAMES

DEFAULT_LOCATIONS = [loc.value for loc in StorageLocation]

_ITEM_SCHEMA = """{
  "name": "Clean item name (required, max 150 chars)",
  "brand": "Brand name if mentioned (max 100 chars, or null)",
  "quantity": number (integer, default 1),
  "unit": "Standard unit (max 50 chars: kg, g, l, ml, pcs, pack, bottle, can, box)",
  "location": "Storage location (%(locations)s based on item type)",
  "category": "Category name (%(categories)s)",
  "notes": "Price info or other details (optional)",
  "status": "Fresh"
}"""

_STORAGE_GUIDE = """Storage locations:
- Fridge: Dairy, fresh vegetables, fruits, meat
- Freezer: Frozen foods, ice cream
- Pantry: Dry goods, canned items, snacks, beverages"""

_RULES = """Rules:
1. Extract ONLY food/grocery items (ignore taxes, delivery, services)
2. Clean item names: remove serial numbers, keep essential words
3. Standardize units: gm→g, ltr→l, nos→pcs, pc→pcs
4. Choose the category and storage location from the lists above
5. Set status as "Fresh" for all items
6. Include price in notes if available: "Bought for %(currency)sX"
7. Return an empty array if no food items are found

Respond with ONLY the JSON array, no other text."""


def _schema_block(categories: list[str], locations: list[str]) -> str:
    return _ITEM_SCHEMA % {
        "locations": "/".join(locations),
        "categories": "/".join(categories),
    }


def get_pdf_extraction_prompt(
    categories: list[str] | None = None,
    locations: list[str] | None = None,
    currency: str = "₹",
) -> str:
    """Instruction prompt sent alongside an inlined PDF invoice."""
    categories = categories or DEFAULT_CATEGORY_NAMES
    locations = locations or DEFAULT_LOCATIONS
    return f"""You are an expert at analyzing grocery invoices and extracting ingredient information.

Analyze the attached grocery invoice PDF and extract ALL food/grocery items.
Use the visual layout, tables and formatting to tell item rows apart from header and footer text.

Return a JSON array of ingredients with this EXACT structure:
{_schema_block(categories, locations)}

Categories: {", ".join(categories)}

{_STORAGE_GUIDE}

{_RULES % {"currency": currency}}"""


def get_text_extraction_prompt(
    invoice_text: str,
    categories: list[str] | None = None,
    locations: list[str] | None = None,
    currency: str = "₹",
) -> str:
    """Instruction prompt with pasted invoice text substituted in."""
    categories = categories or DEFAULT_CATEGORY_NAMES
    locations = locations or DEFAULT_LOCATIONS
    return f"""You are an expert at analyzing grocery invoices and extracting ingredient information.

Analyze the following invoice text and extract ALL food/grocery items.

Invoice Text:
\"\"\"
{invoice_text}
\"\"\"

Return a JSON array of ingredients with this EXACT structure:
{_schema_block(categories, locations)}

Categories: {", ".join(categories)}

{_STORAGE_GUIDE}

{_RULES % {"currency": currency}}"""

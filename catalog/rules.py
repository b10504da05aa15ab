"""
catalog/rules.py -- Field rules for book input.

Plain data consumed by core.validation.validate(). Create requests are
validated against every rule; update requests use partial=True so only the
supplied fields are checked.
"""

from typing import Any, Mapping

from core.errors import ValidationError
from core.validation import FieldRule, normalize, validate

GENRES: tuple[str, ...] = (
    "Fiction",
    "Non-Fiction",
    "Mystery",
    "Romance",
    "Science Fiction",
    "Fantasy",
    "Biography",
    "History",
    "Self-Help",
    "Educational",
)

BOOK_RULES: dict[str, FieldRule] = {
    "title": FieldRule(
        required=True,
        required_message="Please provide a book title",
        kind=str,
        max_length=100,
        max_length_message="Title cannot exceed 100 characters",
        trim=True,
    ),
    "author": FieldRule(
        required=True,
        required_message="Please provide an author name",
        kind=str,
        max_length=50,
        max_length_message="Author name cannot exceed 50 characters",
        trim=True,
    ),
    "genre": FieldRule(
        required=True,
        required_message="Please provide a genre",
        kind=str,
        choices=GENRES,
        choices_message=f"Genre must be one of: {', '.join(GENRES)}",
    ),
    "price": FieldRule(
        required=True,
        required_message="Please provide a price",
        kind=float,
        kind_message="Price must be a number",
        minimum=0,
        minimum_message="Price cannot be negative",
    ),
    "in_stock": FieldRule(
        kind=bool,
        kind_message="in_stock must be true or false",
    ),
}


def check_book(data: Mapping[str, Any], partial: bool = False) -> dict[str, Any]:
    """Normalize and validate book input. Returns the cleaned fields.

    Raises ValidationError with the list of field errors. With partial=True
    only the supplied fields are checked and returned.
    """
    cleaned = normalize(data, BOOK_RULES)
    result = validate(cleaned, BOOK_RULES, partial=partial)
    if not result.ok:
        raise ValidationError("Validation failed", details=result.as_list())
    cleaned = {k: v for k, v in cleaned.items() if v is not None}
    if "price" in cleaned:
        cleaned["price"] = float(cleaned["price"])
    return cleaned

"""
catalog/models.py -- Domain dataclass for the book catalog.

Pure data container with zero logic. Validation rules live in
catalog/rules.py; persistence lives in catalog/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Book:
    """A catalog entry.

    id is None before the record is written to the database.
    """

    title: str
    author: str
    genre: str  # one of catalog.rules.GENRES
    price: float
    in_stock: bool = True
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, refreshed by store on every update

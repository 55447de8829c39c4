"""
ListLicensesQuery.

Query to page through licenses, optionally filtered by status.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class ListLicensesQuery:
    """Query to list licenses."""

    status_filter: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None

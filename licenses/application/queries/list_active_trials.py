"""
ListActiveTrialsQuery.

Query to list trials that are still running.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class ListActiveTrialsQuery:
    """Query to list running trial licenses."""

    now: Optional[datetime] = None

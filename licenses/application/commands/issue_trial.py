"""
IssueTrialCommand.

Self-service command to grant a free trial.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class IssueTrialCommand:
    """Command to grant a trial license to an owner."""

    owner_id: str
    name: Optional[str] = None
    now: Optional[datetime] = None

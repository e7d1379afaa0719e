"""
Result objects returned by the daily lifecycle sweeps.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class SweepReport:
    """Outcome of one sweep run; sweeps never raise for per-row failures."""

    job: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    examined: int = 0
    transitioned: int = 0
    failed: int = 0
    notifications_sent: int = 0
    notifications_failed: int = 0
    errors: List[str] = field(default_factory=list)

    def record_failure(self, message: str) -> None:
        self.failed += 1
        self.errors.append(message)

    def record_notification(self, delivered: bool) -> None:
        if delivered:
            self.notifications_sent += 1
        else:
            self.notifications_failed += 1

    def finish(self, finished_at: datetime) -> "SweepReport":
        self.finished_at = finished_at
        return self

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["finished_at"] = self.finished_at.isoformat() if self.finished_at else None
        return data

from dataclasses import dataclass
from typing import Optional, Literal

Severity = Literal['info', 'success', 'warning', 'error']


@dataclass
class Notification:
    title: str
    message: str
    severity: Severity = 'info'
    source: str = 'Tally'
    toast_duration_ms: Optional[int] = None
    expires_at: Optional[float] = None

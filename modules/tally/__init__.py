"""On-scene patient tally module.

The session is in-memory only.  The engine and report projector are pure
functions over :class:`~.models.TallyState`; :class:`TallyService` holds the
one live session for the HTTP shell.
"""

from __future__ import annotations

from typing import Optional

from .services import ActionResult, TallyService

__all__ = ["get_service", "reset_service", "ActionResult", "TallyService"]

_service: Optional[TallyService] = None


def get_service() -> TallyService:
    """Return the process-wide tally session, creating it on first use."""

    global _service
    if _service is None:
        _service = TallyService()
    return _service


def reset_service(service: Optional[TallyService] = None) -> None:
    """Replace (or drop) the process-wide session."""

    global _service
    _service = service

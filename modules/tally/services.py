"""Service layer owning the single in-memory tally session."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional, Union

from notifications.models.notification import Notification, Severity
from notifications.services.notifier import Notifier
from utils.app_settings import TallySettings, load_settings

from . import engine, labels
from .catalog import HospitalCatalog, load_catalog
from .exporters import pdf_exporter
from .models import AllocationField, Axis, Category, Channel, Resource, TallyState
from .report import ReportDocument, build_document, report_filename, summary_text
from .share import whatsapp_url
from .validators import ValidationError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ActionResult:
    """Outcome of one operator action."""

    state: TallyState
    applied: bool
    notice: Optional[Notification] = None


class TallyService:
    """High-level API consumed by the HTTP shell and tests."""

    def __init__(
        self,
        *,
        settings: Optional[TallySettings] = None,
        catalog: Optional[HospitalCatalog] = None,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], float] = time.monotonic,
        state: Optional[TallyState] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.catalog = catalog or load_catalog(self.settings.hospital_catalog)
        self._clock = clock
        self.notifier = notifier or Notifier(
            duration_ms=int(self.settings.toast_seconds * 1000), clock=clock
        )
        self._state = state or engine.new_session()
        self._attention_until: Optional[float] = None
        # Serialises read-transition-write across request threads.
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------
    @property
    def state(self) -> TallyState:
        return self._state

    @property
    def highlight_unknown(self) -> bool:
        """True while newly added patients still wait for sex/age assignment."""
        return self._attention_until is not None and self._clock() < self._attention_until

    def current_notice(self) -> Optional[Notification]:
        return self.notifier.current()

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------
    def record_patient_event(self, channel: Union[Channel, str], delta: int) -> ActionResult:
        with self._lock:
            result = self._apply("record_patient_event", engine.record_patient_event, channel, delta)
            if result.applied and int(delta) > 0:
                self._attention_until = self._clock() + self.settings.attention_seconds
        return result

    def reclassify(self, category: Union[Category, str], direction: int) -> ActionResult:
        return self._apply("reclassify", engine.reclassify, category, direction)

    def adjust_unknown_direct(self, axis: Union[Axis, str], direction: int) -> ActionResult:
        with self._lock:
            result = self._apply("adjust_unknown_direct", engine.adjust_unknown_direct, axis, direction)
            if result.applied:
                result.notice = self._notify(labels.MSG_DIRECT_DECREMENT, "info")
        return result

    def adjust_resource(self, counter: Union[Resource, str], delta: int) -> ActionResult:
        return self._apply("adjust_resource", engine.adjust_resource, counter, delta)

    # ------------------------------------------------------------------
    # Destinations
    # ------------------------------------------------------------------
    def set_allocation(
        self, record_id: str, field: Union[AllocationField, str], value: Union[int, str]
    ) -> ActionResult:
        return self._apply(
            "set_allocation", engine.set_allocation, record_id, field, value, catalog=self.catalog
        )

    def revert_allocation_to_catalog(self, record_id: str) -> ActionResult:
        return self._apply("revert_allocation_to_catalog", engine.revert_allocation_to_catalog, record_id)

    def add_allocation(self) -> ActionResult:
        return self._apply("add_allocation", engine.add_allocation)

    def remove_allocation(self, record_id: str) -> ActionResult:
        return self._apply("remove_allocation", engine.remove_allocation, record_id)

    # ------------------------------------------------------------------
    # Free text and session
    # ------------------------------------------------------------------
    def update_metadata(self, **fields: str) -> ActionResult:
        return self._apply("update_metadata", engine.update_metadata, **fields)

    def update_methane(self, **fields: str) -> ActionResult:
        return self._apply("update_methane", engine.update_methane, **fields)

    def set_final(self, flag: bool) -> ActionResult:
        return self._apply("set_final", engine.set_final, flag)

    def toggle_final(self) -> ActionResult:
        with self._lock:
            return self.set_final(not self._state.is_final)

    def reset_session(self) -> ActionResult:
        """Discard the session. Callers confirm with the operator first."""
        with self._lock:
            self._state = engine.reset_session()
            self._attention_until = None
            notice = self._notify(labels.MSG_RESET, "info")
            return ActionResult(self._state, True, notice)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def summary_text(self) -> str:
        return summary_text(self._state)

    def share_url(self) -> str:
        return whatsapp_url(self.summary_text())

    def build_report(self, generated_at: Optional[datetime] = None) -> ReportDocument:
        return build_document(self._state, generated_at)

    def report_filename(self, *, ext: str = "pdf", today: Optional[date] = None) -> str:
        return report_filename(self._state, ext=ext, today=today)

    def export_to_pdf(self, path: Optional[Union[Path, str]] = None) -> Path:
        target = Path(path) if path is not None else self.settings.output_dir / self.report_filename()
        document = self.build_report()
        pdf_exporter.export_report(document, target)
        logger.info("Exported tally report to %s", target)
        return target

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _apply(self, action: str, transition: Callable[..., TallyState], *args, **kwargs) -> ActionResult:
        with self._lock:
            try:
                new_state = transition(self._state, *args, **kwargs)
            except ValidationError as exc:
                logger.info("Rejected %s: %s", action, exc)
                return ActionResult(self._state, False, self._notify(str(exc), "error"))
            applied = new_state is not self._state
            self._state = new_state
            return ActionResult(self._state, applied)

    def _notify(self, message: str, severity: Severity) -> Notification:
        return self.notifier.notify(Notification(title=labels.APP_TITLE, message=message, severity=severity))


__all__ = ["ActionResult", "TallyService"]

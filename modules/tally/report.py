"""Projection of a tally snapshot into shareable text and a report document.

Nothing here mutates state.  ``summary_text`` is what operators paste into
messaging groups; ``build_document`` feeds the paginated exporters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Tuple

from . import labels
from .models import TallyState

_WHITESPACE = re.compile(r"\s+")


@dataclass(slots=True, frozen=True)
class ReportField:
    label: str
    value: str


@dataclass(slots=True, frozen=True)
class ReportSection:
    """Titled group of label/value rows; ``columns`` is a layout hint."""

    title: str
    fields: Tuple[ReportField, ...] = ()
    columns: int = 1


@dataclass(slots=True, frozen=True)
class ReportDocument:
    title: str
    generated_at: datetime
    sections: Tuple[ReportSection, ...] = field(default_factory=tuple)
    footer: str = labels.REPORT_FOOTER

    @property
    def timestamp_label(self) -> str:
        """``d/m/yyyy - HH:MM:SS`` as printed in the report header."""
        dt = self.generated_at
        return f"{dt.day}/{dt.month}/{dt.year} - {dt.strftime('%H:%M:%S')}"

    def footer_for(self, page: int, pages: int) -> str:
        return self.footer.format(page=page, pages=pages)

    def section(self, title: str) -> Optional[ReportSection]:
        for section in self.sections:
            if section.title == title:
                return section
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "generated_at": self.timestamp_label,
            "footer": self.footer,
            "sections": [
                {
                    "title": section.title,
                    "columns": section.columns,
                    "fields": [{"label": f.label, "value": f.value} for f in section.fields],
                }
                for section in self.sections
            ],
        }


def _destination_lines(state: TallyState) -> Tuple[Tuple[str, int], ...]:
    return tuple((record.name, record.count) for record in state.allocations if record.name and record.count > 0)


# ---------------------------------------------------------------------------
# Short-form text

def summary_text(state: TallyState) -> str:
    c = state.counts
    meta = state.metadata
    total = c.total_patients

    destinations = "\n".join(f"- {name}: {count}" for name, count in _destination_lines(state))
    if not destinations:
        destinations = labels.NO_DESTINATIONS

    methane = ""
    if state.methane.has_content():
        rows = [f"{key}: {getattr(state.methane, name)}" for name, key, _ in labels.METHANE_FIELDS]
        methane = "METHANE:\n" + "\n".join(rows) + "\n\n"

    status = labels.STATUS_FINAL if state.is_final else labels.STATUS_IN_PROGRESS
    return (
        f"{methane}*Incidente: {meta.incident or labels.NOT_AVAILABLE}*\n"
        f"*Dirección: {meta.address or labels.NOT_AVAILABLE}*\n"
        "\n"
        f"*{status} {total} pacientes*\n"
        "\n"
        "Pacientes:\n"
        f"- Total: {total}\n"
        f"- Óbitos: {c.deceased}\n"
        f"- Evacuados: {c.evacuated}\n"
        "\n"
        "Sexo:\n"
        f"- Masc: {c.male} | Fem: {c.female}\n"
        f"- S/D: {c.sex_unknown}\n"
        "\n"
        "Edad:\n"
        f"- Menores: {c.minors} | Mayores: {c.adults}\n"
        f"- S/D: {c.age_unknown}\n"
        "\n"
        "Procedimiento:\n"
        f"- Atendidos: {c.attended}\n"
        f"- Trasladados: {c.transported}\n"
        "\n"
        "Destinos:\n"
        f"{destinations}\n"
        "\n"
        "Dotación:\n"
        f"- Móviles: {c.mobile_units} | Aéreo: {c.air_units}\n"
        "\n"
        "Intervención:\n"
        f"{meta.intervention}\n"
        "\n"
        "Notas:\n"
        f"{meta.notes}"
    )


# ---------------------------------------------------------------------------
# Long-form document

def _fields(*pairs: Tuple[str, Any]) -> Tuple[ReportField, ...]:
    return tuple(ReportField(label, str(value)) for label, value in pairs)


def build_document(state: TallyState, generated_at: Optional[datetime] = None) -> ReportDocument:
    c = state.counts
    meta = state.metadata
    sections = []

    if state.methane.has_visible_content():
        sections.append(
            ReportSection(
                labels.SECTION_METHANE,
                _fields(
                    *(
                        (label, getattr(state.methane, name) or labels.EMPTY_FIELD)
                        for name, _, label in labels.METHANE_FIELDS
                    )
                ),
            )
        )

    sections.append(
        ReportSection(
            labels.SECTION_EVENT,
            _fields(
                ("Incidente:", meta.incident or labels.NOT_AVAILABLE),
                ("Dirección:", meta.address or labels.NOT_AVAILABLE),
            ),
        )
    )
    final = labels.YES if state.is_final else labels.NO
    sections.append(
        ReportSection(
            labels.SECTION_PATIENTS,
            _fields(
                ("Total Pacientes:", f"{c.total_patients} (Final: {final})"),
                ("Óbitos:", c.deceased),
                ("Evacuados:", c.evacuated),
            ),
        )
    )
    sections.append(
        ReportSection(
            labels.SECTION_BREAKDOWN,
            _fields(
                ("Masc", c.male),
                ("Fem", c.female),
                ("Sexo S/D", c.sex_unknown),
                ("Menores", c.minors),
                ("Mayores", c.adults),
                ("Edad S/D", c.age_unknown),
            ),
            columns=3,
        )
    )
    sections.append(
        ReportSection(
            labels.SECTION_OPERATIONS,
            _fields(
                ("Atendidos en lugar:", c.attended),
                ("Trasladados:", c.transported),
                ("Móviles:", c.mobile_units),
                ("Aéreos:", c.air_units),
            ),
        )
    )

    if any(record.count > 0 for record in state.allocations):
        sections.append(
            ReportSection(
                labels.SECTION_DESTINATIONS,
                _fields(*((f"{name}:", count) for name, count in _destination_lines(state))),
            )
        )
    if meta.intervention:
        sections.append(ReportSection(labels.SECTION_INTERVENTION, _fields(("", meta.intervention))))
    if meta.notes:
        sections.append(ReportSection(labels.SECTION_NOTES, _fields(("", meta.notes))))

    return ReportDocument(
        title=labels.REPORT_TITLE,
        generated_at=generated_at or datetime.now(),
        sections=tuple(sections),
    )


def report_filename(
    state: TallyState,
    *,
    prefix: str = labels.FILENAME_PREFIX,
    ext: str = "pdf",
    today: Optional[date] = None,
) -> str:
    """``<prefix>_<incident>_<YYYY-MM-DD>.<ext>`` with whitespace runs as ``_``."""
    incident = state.metadata.incident
    stem = _WHITESPACE.sub("_", incident) if incident else labels.FILENAME_FALLBACK
    day = today or datetime.now(timezone.utc).date()
    return f"{prefix}_{stem}_{day.isoformat()}.{ext}"


__all__ = [
    "ReportField",
    "ReportSection",
    "ReportDocument",
    "summary_text",
    "build_document",
    "report_filename",
]

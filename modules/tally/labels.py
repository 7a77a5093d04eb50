"""Operator-facing wording for summaries, PDF reports and notices.

Operators paste the summary into messaging groups, so these strings are kept
verbatim.
"""

from __future__ import annotations

from .models.enums import Axis

APP_TITLE = "ECUES"
REPORT_TITLE = "INFORME ECUES"
REPORT_FOOTER = "Página {page} de {pages} - Generado por App Contador ECUES"
FILENAME_PREFIX = "ECUES"
FILENAME_FALLBACK = "Reporte"

NOT_AVAILABLE = "N/A"
EMPTY_FIELD = "-"
NO_DESTINATIONS = "Ninguno"
STATUS_FINAL = "FINAL"
STATUS_IN_PROGRESS = "Hasta ahora"
YES = "Sí"
NO = "No"

AXIS_LABELS = {Axis.SEX: "Sexo", Axis.AGE: "Edad"}

# (field name, single-letter key, PDF label)
METHANE_FIELDS = (
    ("major_incident", "M", "M (Major Incident):"),
    ("exact_location", "E", "E (Exact Location):"),
    ("incident_type", "T", "T (Type):"),
    ("hazards", "H", "H (Hazards):"),
    ("access", "A", "A (Access):"),
    ("casualties", "N", "N (Number):"),
    ("emergency_services", "E", "E (Emergency):"),
)

SECTION_METHANE = "METHANE"
SECTION_EVENT = "Detalles del Evento"
SECTION_PATIENTS = "Resumen de Pacientes"
SECTION_BREAKDOWN = "Desglose"
SECTION_OPERATIONS = "Operativo"
SECTION_DESTINATIONS = "Destinos"
SECTION_INTERVENTION = "Intervención"
SECTION_NOTES = "Notas"

MSG_EMPTY_POOL = "No hay pacientes en S/D ({axis}) para clasificar."
MSG_DIRECT_INCREMENT = 'Use "Atendidos" o "Trasladados" para agregar pacientes.'
MSG_DIRECT_DECREMENT = "Paciente retirado de S/D manualmente."
MSG_CAPACITY_EXCEEDED = "No puede asignar más que el total de traslados."
MSG_LAST_ALLOCATION = "Debe quedar al menos un destino."
MSG_RESET = "Aplicación reiniciada"

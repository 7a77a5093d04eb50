"""PDF rendering for tally reports."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..report import ReportDocument, ReportField, ReportSection

PAGE_WIDTH, PAGE_HEIGHT = A4
HEADER_HEIGHT = 40 * mm
SIDE_MARGIN = 15 * mm
BOTTOM_MARGIN = 20 * mm
LABEL_WIDTH = 50 * mm

HEADER_FILL = colors.Color(16 / 255, 185 / 255, 129 / 255)
SECTION_FILL = colors.Color(240 / 255, 240 / 255, 240 / 255)


def _paragraph_text(value: str) -> str:
    return escape(value).replace("\n", "<br/>")


def _styles() -> dict[str, ParagraphStyle]:
    sample = getSampleStyleSheet()
    body = ParagraphStyle("TallyBody", parent=sample["BodyText"], fontName="Helvetica", fontSize=11, leading=14)
    return {
        "section": ParagraphStyle("TallySection", parent=body, fontName="Helvetica-Bold", fontSize=12),
        "label": ParagraphStyle("TallyLabel", parent=body, fontName="Helvetica-Bold"),
        "body": body,
        "cell": ParagraphStyle("TallyCell", parent=body, fontSize=10, leading=12),
        "narrative": ParagraphStyle("TallyNarrative", parent=body, leftIndent=5 * mm, spaceAfter=4),
    }


def _section_header(section: ReportSection, styles, width: float) -> Table:
    table = Table([[Paragraph(_paragraph_text(section.title), styles["section"])]], colWidths=[width])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), SECTION_FILL),
                ("LEFTPADDING", (0, 0), (-1, -1), 5 * mm),
                ("TOPPADDING", (0, 0), (-1, -1), 2),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )
    return table


def _field_rows(fields: Sequence[ReportField], styles, width: float) -> Table:
    rows = [
        [
            Paragraph(_paragraph_text(item.label), styles["label"]),
            Paragraph(_paragraph_text(item.value), styles["body"]),
        ]
        for item in fields
    ]
    table = Table(rows, colWidths=[LABEL_WIDTH, width - LABEL_WIDTH])
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 5 * mm),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    return table


def _narrative(fields: Sequence[ReportField], styles) -> List[Paragraph]:
    # Free text can run longer than a page, so it flows as paragraphs.
    return [Paragraph(_paragraph_text(item.value), styles["narrative"]) for item in fields]


def _grid_rows(section: ReportSection, styles, width: float) -> Table:
    columns = max(1, section.columns)
    cells = [
        Paragraph(_paragraph_text(f"{item.label}: {item.value}"), styles["cell"]) for item in section.fields
    ]
    rows = [cells[i : i + columns] for i in range(0, len(cells), columns)]
    if rows and len(rows[-1]) < columns:
        rows[-1] = rows[-1] + [""] * (columns - len(rows[-1]))
    table = Table(rows, colWidths=[width / columns] * columns)
    table.setStyle(
        TableStyle(
            [
                ("LEFTPADDING", (0, 0), (-1, -1), 10 * mm),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )
    return table


def _flowables(document: ReportDocument, width: float) -> List:
    styles = _styles()
    elements: List = []
    for section in document.sections:
        elements.append(_section_header(section, styles, width))
        elements.append(Spacer(1, 3))
        if not section.fields:
            continue
        if section.columns > 1:
            elements.append(_grid_rows(section, styles, width))
        elif all(not item.label for item in section.fields):
            elements.extend(_narrative(section.fields, styles))
        else:
            elements.append(_field_rows(section.fields, styles, width))
        elements.append(Spacer(1, 6))
    return elements


def _draw_header(canvas_obj: canvas.Canvas, document: ReportDocument) -> None:
    canvas_obj.saveState()
    canvas_obj.setFillColor(HEADER_FILL)
    canvas_obj.rect(0, PAGE_HEIGHT - HEADER_HEIGHT, PAGE_WIDTH, HEADER_HEIGHT, stroke=0, fill=1)
    canvas_obj.setFillColor(colors.white)
    canvas_obj.setFont("Helvetica-Bold", 22)
    canvas_obj.drawCentredString(PAGE_WIDTH / 2, PAGE_HEIGHT - 25 * mm, document.title)
    canvas_obj.setFont("Helvetica-Bold", 10)
    canvas_obj.drawRightString(PAGE_WIDTH - 15 * mm, PAGE_HEIGHT - 10 * mm, document.timestamp_label)
    canvas_obj.restoreState()


def _numbered_canvas(document: ReportDocument):
    """Canvas class that defers pages so the footer can print the page count."""

    class _NumberedCanvas(canvas.Canvas):
        def __init__(self, *args, **kwargs) -> None:
            super().__init__(*args, **kwargs)
            self._saved_page_states: List[dict] = []

        def showPage(self) -> None:  # noqa: N802 - reportlab API
            self._saved_page_states.append(dict(self.__dict__))
            self._startPage()

        def save(self) -> None:
            total = len(self._saved_page_states)
            for page_state in self._saved_page_states:
                self.__dict__.update(page_state)
                self._draw_footer(total)
                super().showPage()
            super().save()

        def _draw_footer(self, total: int) -> None:
            self.saveState()
            self.setFont("Helvetica", 8)
            self.setFillColor(colors.Color(150 / 255, 150 / 255, 150 / 255))
            self.drawCentredString(
                PAGE_WIDTH / 2, 7 * mm, document.footer_for(self.getPageNumber(), total)
            )
            self.restoreState()

    return _NumberedCanvas


def build_pdf(document: ReportDocument) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=document.title,
        leftMargin=SIDE_MARGIN,
        rightMargin=SIDE_MARGIN,
        topMargin=HEADER_HEIGHT + 8 * mm,
        bottomMargin=BOTTOM_MARGIN,
    )
    on_page = lambda canv, _doc: _draw_header(canv, document)  # noqa: E731
    doc.build(
        _flowables(document, doc.width),
        onFirstPage=on_page,
        onLaterPages=on_page,
        canvasmaker=_numbered_canvas(document),
    )
    return buffer.getvalue()


def export_report(document: ReportDocument, path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(build_pdf(document))
    return path


__all__ = ["build_pdf", "export_report"]

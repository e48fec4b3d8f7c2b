"""
PDF rendering for the hospital statistics report.

Draws a fixed layout on an A4 page with reportlab: title, period, generation
time, totals list, rule, grouped bar chart with legend, narrative summary and
footer. The layout is written top-down; `_Page.pdf_y` flips it into PDF space.
"""

import io
from datetime import datetime
from typing import Iterator, List, Optional, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

from config import HOSPITAL_FOOTER, HOSPITAL_NAME
from services.aggregation import SeriesCounts
from services.chart_layout import ChartBounds, ChartGeometry, compute_layout
from services.periods import ResolvedPeriod

MARGIN = 50
CONTENT_WIDTH = 500
RULE_WIDTH = 495
CHART_HEIGHT = 200
FOOTER_Y = 780

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

HEADING_COLOR = colors.HexColor("#2c3e50")
TITLE_COLOR = colors.HexColor("#333333")
MUTED_COLOR = colors.HexColor("#555555")
RULE_COLOR = colors.HexColor("#aaaaaa")
FOOTER_COLOR = colors.HexColor("#888888")

# (legend label, bar color) per series, in SeriesCounts order.
SERIES_STYLES: List[Tuple[str, colors.Color]] = [
    ("Patients", colors.Color(52 / 255, 152 / 255, 219 / 255, alpha=0.8)),
    ("Appointments", colors.Color(46 / 255, 204 / 255, 113 / 255, alpha=0.8)),
    ("Reports", colors.Color(231 / 255, 76 / 255, 60 / 255, alpha=0.8)),
    ("Results", colors.Color(155 / 255, 89 / 255, 182 / 255, alpha=0.8)),
    ("Prescriptions", colors.Color(241 / 255, 196 / 255, 15 / 255, alpha=0.8)),
]

TOTAL_LABELS = {
    "patients": "New patients",
    "appointments": "Appointments in range",
    "reports": "Reports generated",
    "results": "Laboratory results",
    "prescriptions": "Prescriptions",
}

SUMMARY_STYLE = ParagraphStyle(
    "summary",
    fontName=FONT,
    fontSize=12,
    leading=16,
    alignment=TA_JUSTIFY,
    spaceAfter=8,
)


class _Page:
    """Thin wrapper over a reportlab canvas using top-down coordinates."""

    def __init__(self, buffer: io.BytesIO, footer: str):
        self.canvas = canvas.Canvas(buffer, pagesize=A4)
        self.width, self.height = A4
        self.footer = footer

    def pdf_y(self, y: float) -> float:
        return self.height - y

    def text(self, value: str, x: float, y: float, size: float, color, font: str = FONT, align: str = "left"):
        """Draw text whose top edge sits at y."""
        c = self.canvas
        c.setFont(font, size)
        c.setFillColor(color)
        baseline = self.pdf_y(y + size)
        if align == "center":
            c.drawCentredString(x, baseline, value)
        elif align == "right":
            c.drawRightString(x, baseline, value)
        else:
            c.drawString(x, baseline, value)

    def heading(self, value: str, y: float) -> float:
        size = 14
        self.text(value, MARGIN, y, size, HEADING_COLOR)
        underline_y = self.pdf_y(y + size + 2)
        c = self.canvas
        c.setStrokeColor(HEADING_COLOR)
        c.setLineWidth(0.8)
        c.line(MARGIN, underline_y, MARGIN + stringWidth(value, FONT, size), underline_y)
        return y + size + 12

    def rect(self, x: float, y: float, width: float, height: float, color):
        """Fill a rectangle whose top-left corner is (x, y)."""
        c = self.canvas
        c.saveState()
        c.setFillColor(color)
        c.rect(x, self.pdf_y(y + height), width, height, stroke=0, fill=1)
        c.restoreState()

    def line(self, x1: float, y1: float, x2: float, y2: float, color, width: float = 1):
        c = self.canvas
        c.saveState()
        c.setStrokeColor(color)
        c.setLineWidth(width)
        c.line(x1, self.pdf_y(y1), x2, self.pdf_y(y2))
        c.restoreState()

    def finish_page(self):
        self.text(self.footer, MARGIN + CONTENT_WIDTH / 2, FOOTER_Y, 8, FOOTER_COLOR, align="center")
        page_number = f"Page {self.canvas.getPageNumber()}"
        self.text(page_number, MARGIN + CONTENT_WIDTH, FOOTER_Y + 14, 8, FOOTER_COLOR, align="right")
        self.canvas.showPage()

    def save(self):
        self.finish_page()
        self.canvas.save()


def summary_text(period: ResolvedPeriod, totals: dict, hospital_name: str = HOSPITAL_NAME) -> List[str]:
    """Narrative summary paragraphs interpolating the five totals."""
    return [
        f"This report covers the period {period.label}. During this time "
        f"{totals['patients']} new patients, {totals['appointments']} appointments, "
        f"{totals['reports']} clinical reports, {totals['results']} laboratory results "
        f"and {totals['prescriptions']} prescriptions were recorded.",
        f"The medical team at {hospital_name} is focused on timely and personalized care. "
        f"We thank all of our staff and our patients for the trust they place in us.",
    ]


def _draw_chart(page: _Page, geometry: ChartGeometry, buckets) -> float:
    bounds = geometry.bounds
    page.line(bounds.x, bounds.y, bounds.x, bounds.bottom, colors.black)
    page.line(bounds.x, bounds.bottom, bounds.x + bounds.width, bounds.bottom, colors.black)

    for bar in geometry.bars:
        if bar.height > 0:
            page.rect(bar.x, bar.y, bar.width, bar.height, SERIES_STYLES[bar.series_index][1])

    for label, center in zip(buckets, geometry.label_centers):
        page.text(label, center, bounds.bottom + 5, 8, colors.black, align="center")

    legend_y = bounds.bottom + 25
    for idx, (label, color) in enumerate(SERIES_STYLES):
        x = bounds.x + idx * 100
        page.rect(x, legend_y, 10, 10, color)
        page.text(label, x + 15, legend_y, 9, colors.black)
    return legend_y + 30


def render_report_pdf(
    period: ResolvedPeriod,
    counts: SeriesCounts,
    generated_at: Optional[datetime] = None,
    hospital_name: str = HOSPITAL_NAME,
    footer: str = HOSPITAL_FOOTER,
) -> bytes:
    """Render the statistics report and return the finished PDF bytes."""
    generated_at = generated_at or datetime.now()
    totals = counts.totals()
    geometry_series = counts.series()

    buffer = io.BytesIO()
    page = _Page(buffer, footer)
    page.canvas.setTitle(f"Hospital statistics - {period.label}")
    page.canvas.setAuthor(f"Hospital {hospital_name}")

    center_x = MARGIN + CONTENT_WIDTH / 2
    page.text(f"Statistics Report - {hospital_name}", center_x, 60, 20, TITLE_COLOR, font=FONT_BOLD, align="center")
    page.text(f"Period: {period.label}", center_x, 88, 14, HEADING_COLOR, align="center")
    page.text(
        f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        MARGIN + CONTENT_WIDTH, 110, 10, MUTED_COLOR, align="right",
    )

    # 1. Totals
    y = page.heading("1. General Totals (in period)", 140)
    for key, label in TOTAL_LABELS.items():
        page.canvas.setFillColor(colors.black)
        page.canvas.circle(MARGIN + 8, page.pdf_y(y + 7), 2, stroke=0, fill=1)
        page.text(f"{label}: {totals[key]}", MARGIN + 20, y, 12, colors.black)
        y += 18
    y += 8
    page.line(MARGIN, y, MARGIN + RULE_WIDTH, y, RULE_COLOR)

    # 2. Chart
    y = page.heading("2. Comparative Chart", y + 14)
    geometry = compute_layout(ChartBounds(MARGIN, y, CONTENT_WIDTH, CHART_HEIGHT), geometry_series)
    y = _draw_chart(page, geometry, period.buckets)

    # 3. Summary
    y = page.heading("3. Brief Hospital Summary", y)
    for text in summary_text(period, totals, hospital_name):
        paragraph = Paragraph(escape(text), SUMMARY_STYLE)
        _, height = paragraph.wrapOn(page.canvas, CONTENT_WIDTH, page.height)
        if y + height > FOOTER_Y - 10:
            page.finish_page()
            y = MARGIN
        paragraph.drawOn(page.canvas, MARGIN, page.pdf_y(y + height))
        y += height + SUMMARY_STYLE.spaceAfter

    page.save()
    return buffer.getvalue()


def report_filename(period: ResolvedPeriod) -> str:
    return f"hospital-estadisticas-{period.label.replace('/', '-')}.pdf"


def iter_chunks(data: bytes, size: int = 64 * 1024) -> Iterator[bytes]:
    for start in range(0, len(data), size):
        yield data[start:start + size]

from __future__ import annotations

import io
import re
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfgen import canvas
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from resumeiq.schemas.report import Report

PALETTE = {
    "primary": colors.HexColor("#4F46E5"),
    "dark": colors.HexColor("#111827"),
    "muted": colors.HexColor("#6B7280"),
    "green": colors.HexColor("#16A34A"),
    "yellow": colors.HexColor("#CA8A04"),
    "red": colors.HexColor("#DC2626"),
    "orange": colors.HexColor("#EA580C"),
    "section_bg": colors.HexColor("#F9FAFB"),
    "border": colors.HexColor("#E5E7EB"),
}

HEADER_HEIGHT = 70


def score_color(score: int) -> colors.Color:
    if score >= 75:
        return PALETTE["green"]
    if score >= 50:
        return PALETTE["yellow"]
    return PALETTE["red"]


def score_label(score: int) -> str:
    if score >= 75:
        return "Strong"
    if score >= 50:
        return "Moderate"
    return "Needs Work"


def report_filename(report: Report) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (report.role or "jd-match").lower())[:40]
    return f"resumeiq-{slug}-report.pdf"


def _styles() -> dict[str, ParagraphStyle]:
    sample = getSampleStyleSheet()
    return {
        "meta": ParagraphStyle(
            "meta",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=10,
            leading=13,
            textColor=PALETTE["muted"],
        ),
        "box_label": ParagraphStyle(
            "box_label",
            parent=sample["Normal"],
            fontName="Helvetica-Bold",
            fontSize=8,
            leading=10,
            textColor=PALETTE["muted"],
        ),
        "box_value": ParagraphStyle(
            "box_value",
            parent=sample["Normal"],
            fontName="Helvetica-Bold",
            fontSize=30,
            leading=34,
        ),
        "section": ParagraphStyle(
            "section",
            parent=sample["Heading3"],
            fontName="Helvetica-Bold",
            fontSize=12,
            leading=15,
            spaceBefore=10,
            spaceAfter=4,
        ),
        "item": ParagraphStyle(
            "item",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=10,
            leading=14,
            leftIndent=12,
            textColor=PALETTE["dark"],
        ),
    }


def _draw_header(pdf: canvas.Canvas, doc: SimpleDocTemplate) -> None:
    width, height = A4
    pdf.saveState()
    pdf.setFillColor(PALETTE["primary"])
    pdf.rect(0, height - HEADER_HEIGHT, width, HEADER_HEIGHT, fill=1, stroke=0)
    pdf.setFillColor(colors.white)
    pdf.setFont("Helvetica-Bold", 22)
    pdf.drawString(doc.leftMargin, height - 40, "ResumeIQ")
    pdf.setFont("Helvetica", 10)
    pdf.drawString(doc.leftMargin, height - 56, "AI-Powered Resume Analysis Report")
    pdf.setFont("Helvetica", 8)
    pdf.setFillColor(PALETTE["muted"])
    pdf.drawRightString(doc.leftMargin + doc.width, 24, f"Page {pdf.getPageNumber()}")
    pdf.restoreState()


def _score_box(label: str, score: int, styles: dict[str, ParagraphStyle]) -> list[Paragraph]:
    value_style = ParagraphStyle("score_value", parent=styles["box_value"], textColor=score_color(score))
    return [
        Paragraph(escape(label), styles["box_label"]),
        Paragraph(str(score), value_style),
        Paragraph(f"/ 100  -  {score_label(score)}", styles["meta"]),
    ]


def _section(title: str, items: list[str], accent: colors.Color, styles: dict[str, ParagraphStyle]) -> list:
    heading_style = ParagraphStyle(f"section_{title}", parent=styles["section"], textColor=accent)
    flowables: list = [Paragraph(escape(title), heading_style)]
    for item in items:
        flowables.append(Paragraph(f"&bull; {escape(item)}", styles["item"]))
    return flowables


def render_report_pdf(report: Report) -> bytes:
    styles = _styles()
    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=A4,
        leftMargin=50,
        rightMargin=50,
        topMargin=HEADER_HEIGHT + 30,
        bottomMargin=50,
        title="ResumeIQ Report",
        author="ResumeIQ",
    )

    is_jd = report.analysis_type == "jd"
    label = "JD Match Analysis" if is_jd else f"Role: {report.role}"
    generated = report.created_at.strftime("%d %B %Y")

    story: list = [
        Paragraph(escape(f"{label}   ·   Generated on {generated}"), styles["meta"]),
        Spacer(1, 6),
        HRFlowable(width="100%", thickness=0.8, color=PALETTE["border"]),
        Spacer(1, 10),
    ]

    boxes = [_score_box("ATS SCORE", report.score, styles)]
    if is_jd and report.match_score is not None:
        boxes.append(_score_box("JD MATCH SCORE", report.match_score, styles))
    table = Table([boxes], colWidths=[doc.width / len(boxes)] * len(boxes))
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), PALETTE["section_bg"]),
                ("BOX", (0, 0), (-1, -1), 0.8, PALETTE["border"]),
                ("INNERGRID", (0, 0), (-1, -1), 0.8, PALETTE["border"]),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 12),
                ("TOPPADDING", (0, 0), (-1, -1), 10),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
            ]
        )
    )
    story.extend([table, Spacer(1, 8)])

    story.extend(_section("Strengths", report.strengths, PALETTE["green"], styles))
    story.extend(_section("Weaknesses", report.weaknesses, PALETTE["red"], styles))
    story.extend(_section("Suggestions", report.suggestions, PALETTE["primary"], styles))
    if is_jd and report.missing_keywords:
        story.extend(_section("Missing Keywords", report.missing_keywords, PALETTE["orange"], styles))

    doc.build(story, onFirstPage=_draw_header, onLaterPages=_draw_header)
    return output.getvalue()

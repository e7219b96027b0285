"""
Paper Export Service - TXT/PDF Generation

Both exporters are pure readers of a QuestionPaper: they never modify it.

- export_text(): deterministic line-oriented plain text
- export_pdf():  A4 reportlab document (title, instructions, sections,
                 lettered MCQ options, answers, explanations, code blocks)
"""

import logging
import re
from io import BytesIO
from typing import List

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import (
    Flowable, KeepTogether, Paragraph, Preformatted, SimpleDocTemplate, Spacer,
)

from questify.generation.schemas import Question, QuestionPaper, Section

log = logging.getLogger(__name__)

FOOTER_TEXT = "Generated by Questify AI • Focus on Practice, Excel in Exams"


# ─── File naming ───────────────────────────────────────────────────────────────

def export_filename(domain: str, sub_domain: str, extension: str) -> str:
    """Questify_<domain>_<subDomain>.<ext> with whitespace runs collapsed to '_'."""
    return re.sub(r"\s+", "_", f"Questify_{domain}_{sub_domain}.{extension}")


def option_label(index: int) -> str:
    """0 → 'A', 1 → 'B', ..."""
    return chr(ord("A") + index)


# ─── Plain text ────────────────────────────────────────────────────────────────

def export_text(paper: QuestionPaper) -> str:
    """
    Serialise a paper to plain text.

    Layout:
        <title>
        <domainInfo>
        Instructions: <instructions>

        --- <section type> ---
        1. <text> [<marks> Marks]
           A) <option>
           Ans: <answer>
           Exp: <explanation>
    """
    lines: List[str] = [
        paper.title,
        paper.domain_info,
        f"Instructions: {paper.instructions}",
        "",
    ]
    for section in paper.sections:
        lines.append("")
        lines.append(f"--- {section.type} ---")
        for n, q in enumerate(section.questions, 1):
            lines.append(f"{n}. {q.text} [{q.marks} Marks]")
            for i, opt in enumerate(q.options):
                lines.append(f"   {option_label(i)}) {opt}")
            if q.answer:
                lines.append(f"   Ans: {q.answer}")
            if q.explanation:
                lines.append(f"   Exp: {q.explanation}")
            lines.append("")
    return "\n".join(lines) + "\n"


# ─── PDF helpers ───────────────────────────────────────────────────────────────

def _escape_html(text: str) -> str:
    """Escape HTML special characters so ReportLab Paragraph treats them as literal text."""
    if not text:
        return text or ""
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")
    return text.replace("\n", "<br/>")


class HorizontalLine(Flowable):
    """Custom flowable for horizontal lines"""

    def __init__(self, width, thickness=1, color=colors.black):
        Flowable.__init__(self)
        self.width = width
        self.thickness = thickness
        self.color = color

    def draw(self):
        self.canv.setStrokeColor(self.color)
        self.canv.setLineWidth(self.thickness)
        self.canv.line(0, 0, self.width, 0)


ACCENT = colors.HexColor('#4F46E5')
CODE_BACKGROUND = colors.HexColor('#F1F5F9')

# name → (parent style, overrides)
PAPER_STYLES = {
    'PaperTitle':    ('Heading1', dict(fontSize=18, alignment=TA_CENTER, spaceAfter=6, fontName='Helvetica-Bold')),
    'DomainInfo':    ('Normal', dict(fontSize=11, alignment=TA_CENTER, spaceAfter=4, textColor=ACCENT,
                                     fontName='Helvetica-Bold')),
    'Instructions':  ('Normal', dict(fontSize=10, spaceAfter=4, fontName='Helvetica-Oblique')),
    'SectionHeader': ('Heading3', dict(fontSize=12, spaceBefore=12, spaceAfter=8, textColor=ACCENT)),
    'QuestionText':  ('Normal', dict(fontSize=11, leading=14, alignment=TA_JUSTIFY, spaceAfter=6)),
    'MCQOption':     ('Normal', dict(fontSize=10, leftIndent=20, spaceAfter=3)),
    'AnswerText':    ('Normal', dict(fontSize=10, leading=13, leftIndent=10, spaceAfter=4,
                                     textColor=colors.HexColor('#166534'))),
    'CodeBlock':     ('Code', dict(fontSize=9, leftIndent=10, borderPadding=6, spaceBefore=4, spaceAfter=6,
                                   backColor=CODE_BACKGROUND)),
    'Footer':        ('Normal', dict(fontSize=8, alignment=TA_CENTER, textColor=colors.grey)),
}


def get_custom_styles():
    """Sample stylesheet extended with the paper styles above."""
    styles = getSampleStyleSheet()
    for name, (parent, overrides) in PAPER_STYLES.items():
        styles.add(ParagraphStyle(name=name, parent=styles[parent], **overrides))
    return styles


def _question_flowables(q: Question, number: int, section: Section, styles) -> list:
    items = [Paragraph(
        f"<b>{number}.</b> {_escape_html(q.text)} <b>[{q.marks} Marks]</b>",
        styles['QuestionText'],
    )]
    for i, opt in enumerate(q.options):
        items.append(Paragraph(f"<b>{option_label(i)})</b> {_escape_html(opt)}", styles['MCQOption']))
    if q.answer:
        if section.is_code:
            items.append(Paragraph("<b>Code Solution:</b>", styles['AnswerText']))
            items.append(Preformatted(q.answer, styles['CodeBlock']))
        else:
            items.append(Paragraph(f"<b>Ans:</b> {_escape_html(q.answer)}", styles['AnswerText']))
    if q.explanation:
        items.append(Paragraph(f"<b>Exp:</b> {_escape_html(q.explanation)}", styles['AnswerText']))
    items.append(Spacer(1, 0.3*cm))
    return items


# ─── PDF ───────────────────────────────────────────────────────────────────────

def export_pdf(paper: QuestionPaper) -> BytesIO:
    """
    Render a paper to PDF.
    Returns BytesIO buffer containing the PDF, positioned at 0.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=2*cm,
        leftMargin=2*cm,
        topMargin=2*cm,
        bottomMargin=2*cm,
        title=paper.title,
    )

    styles = get_custom_styles()
    story = []

    # ─── Header ─────────────────────────────────────────────────────────────────
    story.append(Paragraph(_escape_html(paper.title), styles['PaperTitle']))
    story.append(Paragraph(_escape_html(paper.domain_info), styles['DomainInfo']))
    story.append(Spacer(1, 0.3*cm))
    story.append(HorizontalLine(width=17*cm, thickness=1.5))
    story.append(Spacer(1, 0.3*cm))
    story.append(Paragraph(
        f"<b>Instructions:</b> {_escape_html(paper.instructions)}", styles['Instructions'],
    ))
    story.append(Spacer(1, 0.3*cm))
    story.append(HorizontalLine(width=17*cm, thickness=1.5))
    story.append(Spacer(1, 0.4*cm))

    # ─── Sections ───────────────────────────────────────────────────────────────
    for section in paper.sections:
        story.append(Paragraph(_escape_html(section.type), styles['SectionHeader']))
        for n, q in enumerate(section.questions, 1):
            story.append(KeepTogether(_question_flowables(q, n, section, styles)))

    story.append(Spacer(1, 1*cm))
    story.append(Paragraph(FOOTER_TEXT, styles['Footer']))

    doc.build(story)
    buffer.seek(0)
    log.info("[EXPORT] PDF built: %d sections, %d bytes", len(paper.sections), buffer.getbuffer().nbytes)
    return buffer

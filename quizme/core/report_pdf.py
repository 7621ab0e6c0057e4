"""Render a participation report as a PDF document.

Text is drawn with the DejaVu Sans faces shipped in ``quizme/assets/fonts`` so
non-Latin quiz content survives. Arabic is reshaped into its joined forms and
reordered for display one wrapped line at a time; lines whose paragraph starts
with right-to-left text are aligned to the right margin.
"""

from __future__ import annotations

import io
import unicodedata
from datetime import datetime
from pathlib import Path

import arabic_reshaper
from bidi.algorithm import get_display
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from quizme.constants.about import APP_NAME, APP_TAGLINE
from quizme.core.models import KeywordAnswer, QuestionType
from quizme.core.services.report_assembler import QuizReport, ReportEntry

FONT_DIR = Path(__file__).resolve().parent.parent / "assets" / "fonts"
REGULAR_FONT = "DejaVuSans"
BOLD_FONT = "DejaVuSans-Bold"
_FONT_FILES = {
    REGULAR_FONT: "DejaVuSans.ttf",
    BOLD_FONT: "DejaVuSans-Bold.ttf",
}

_MARGIN = 50
_BOTTOM_LIMIT = 80
_BODY_SIZE = 10
_HEADING_SIZE = 12
_LINE_HEIGHT = 14


def register_fonts() -> None:
    """Register the report faces with reportlab once per process."""
    registered = set(pdfmetrics.getRegisteredFontNames())
    for name, filename in _FONT_FILES.items():
        if name not in registered:
            pdfmetrics.registerFont(TTFont(name, str(FONT_DIR / filename)))


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output so each footer can show the page total."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict] = []

    def showPage(self) -> None:  # noqa: N802 - reportlab API
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        width, _ = self._pagesize
        self.setFont(REGULAR_FONT, 9)
        self.drawCentredString(width / 2, 30, f"Page {self._pageNumber} of {total}")
        self.drawCentredString(width / 2, 18, f"{APP_NAME} | {APP_TAGLINE}")


def format_time_spent(seconds: int | None) -> str:
    """Formats duration in seconds to a 'X min Y sec' string."""
    if seconds is None:
        return "N/A"
    minutes, remaining = divmod(int(seconds), 60)
    if minutes > 0:
        return f"{minutes} min {remaining} sec"
    return f"{remaining} sec"


def render_report_pdf(report: QuizReport) -> bytes:
    """Draw the report page by page and return the PDF bytes."""
    register_fonts()
    buffer = io.BytesIO()
    pdf = _NumberedCanvas(buffer, pagesize=A4, initialFontName=REGULAR_FONT)
    pdf.setTitle(f"{report.quiz.title} - results")
    writer = _ReportWriter(pdf)

    participation = report.participation
    writer.heading(report.quiz.title, size=18)
    writer.line(f"Participant: {participation.participant_name}")
    writer.line(
        f"Score: {report.correct_answers}/{report.total_questions} "
        f"({round(report.percentage)}%)"
    )
    writer.line(f"Time spent: {format_time_spent(participation.time_spent)}")
    writer.line(f"Date: {_format_date(participation.finished_at)}")
    writer.rule()

    for number, entry in enumerate(report.entries, start=1):
        _write_entry(writer, number, entry)

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def _write_entry(writer: "_ReportWriter", number: int, entry: ReportEntry) -> None:
    question = entry.question
    response = entry.response
    writer.heading(f"Question {number}: {question.text}", size=_HEADING_SIZE)

    writer.line(f"Your answer: {_format_answer(response.answer) if entry.answered else 'Not answered'}")
    if question.type is QuestionType.ESSAY and isinstance(question.correct_answer, KeywordAnswer):
        accepted = ", ".join(question.correct_answer.accepted) or "(none)"
        writer.line(f"Accepted answers include: {accepted}")
    else:
        writer.line(f"Correct answer: {question.correct_answer.value}")
    writer.line("Result: correct" if response.is_correct else "Result: incorrect")
    if response.challenge_reason:
        writer.line(f"Challenge: {response.challenge_reason}")
    writer.space()


def _format_answer(answer: str | list[str]) -> str:
    if isinstance(answer, list):
        return ", ".join(answer)
    return answer or "-"


def _format_date(value: datetime | None) -> str:
    return (value or datetime.now()).strftime("%Y-%m-%d")


def _is_right_to_left(text: str) -> bool:
    """Paragraph direction follows the first strongly directional character."""
    for char in text:
        direction = unicodedata.bidirectional(char)
        if direction in ("R", "AL"):
            return True
        if direction == "L":
            return False
    return False


class _ReportWriter:
    """Top-to-bottom text cursor with wrapping and page breaks."""

    def __init__(self, pdf: canvas.Canvas) -> None:
        self._pdf = pdf
        self._width, self._height = A4
        self._y = self._height - _MARGIN

    def heading(self, text: str, size: int) -> None:
        self._write(text, BOLD_FONT, size)

    def line(self, text: str) -> None:
        self._write(text, REGULAR_FONT, _BODY_SIZE)

    def space(self) -> None:
        self._y -= _LINE_HEIGHT

    def rule(self) -> None:
        self._pdf.setStrokeColorRGB(0.78, 0.78, 0.78)
        self._pdf.line(_MARGIN, self._y, self._width - _MARGIN, self._y)
        self._y -= _LINE_HEIGHT * 1.5

    def _write(self, text: str, font_name: str, font_size: int) -> None:
        max_width = self._width - 2 * _MARGIN
        right_to_left = _is_right_to_left(text)
        # Wrap in logical order; reorder each line only once it is final.
        shaped = arabic_reshaper.reshape(text)
        for chunk in simpleSplit(shaped, font_name, font_size, max_width) or [""]:
            if self._y < _BOTTOM_LIMIT:
                self._pdf.showPage()
                self._y = self._height - _MARGIN
            self._pdf.setFont(font_name, font_size)
            visual = get_display(chunk) if chunk else chunk
            if right_to_left:
                self._pdf.drawRightString(self._width - _MARGIN, self._y, visual)
            else:
                self._pdf.drawString(_MARGIN, self._y, visual)
            self._y -= max(_LINE_HEIGHT, font_size + 4)

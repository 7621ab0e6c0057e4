"""Server-rendered HTML view of a participation report."""

from __future__ import annotations

from html import escape

from quizme.core.markdown_math_renderer import renderer
from quizme.core.models import KeywordAnswer
from quizme.core.report_pdf import format_time_spent
from quizme.core.services.report_assembler import QuizReport, ReportEntry

_RESULTS_STYLES = """
      .card { background: #ffffff; border-radius: 0.75rem; padding: 1.25rem 1.5rem; margin-bottom: 1rem; box-shadow: 0 0.25rem 1rem rgba(15, 23, 42, 0.08); }
      .summary { display: flex; gap: 2rem; flex-wrap: wrap; }
      .summary span { display: block; color: #64748b; font-size: 0.85rem; }
      .correct { border-left: 0.4rem solid #16a34a; }
      .incorrect { border-left: 0.4rem solid #dc2626; }
      .meta { color: #475569; font-size: 0.95rem; margin: 0.25rem 0; }
      .challenge { color: #b45309; }
"""


def render_results_page(report: QuizReport) -> str:
    participation = report.participation
    summary = f"""    <section class="card">
      <h1>{escape(report.quiz.title)}</h1>
      <div class="summary">
        <div><span>Participant</span>{escape(participation.participant_name)}</div>
        <div><span>Score</span>{report.correct_answers}/{report.total_questions} ({round(report.percentage)}%)</div>
        <div><span>Time spent</span>{format_time_spent(participation.time_spent)}</div>
        <div><span>Status</span>{"Completed" if participation.completed else "In progress"}</div>
      </div>
    </section>"""
    entries = "\n".join(
        _render_entry(number, entry) for number, entry in enumerate(report.entries, start=1)
    )
    return renderer.wrap_with_mathjax(
        f"{summary}\n{entries}",
        title=f"{report.quiz.title} - results",
        styles=_RESULTS_STYLES,
    )


def _render_entry(number: int, entry: ReportEntry) -> str:
    question = entry.question
    response = entry.response
    if isinstance(question.correct_answer, KeywordAnswer):
        expected = "Accepted answers include: " + ", ".join(question.correct_answer.accepted)
    else:
        expected = f"Correct answer: {question.correct_answer.value}"
    if not entry.answered:
        given = "Not answered"
    elif isinstance(response.answer, list):
        given = ", ".join(response.answer)
    else:
        given = response.answer
    status = "correct" if response.is_correct else "incorrect"

    lines = [
        f'    <section class="card {status}">',
        f"      <h2>Question {number}</h2>",
        f"      {renderer.render_fragment(question.text)}",
        f'      <p class="meta">Your answer: {escape(given)}</p>',
        f'      <p class="meta">{escape(expected)}</p>',
        f'      <p class="meta">Result: {status}</p>',
    ]
    if response.challenge_reason:
        lines.append(f'      <p class="meta challenge">Challenge: {escape(response.challenge_reason)}</p>')
    lines.append("    </section>")
    return "\n".join(lines)

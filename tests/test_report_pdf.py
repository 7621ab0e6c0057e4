from __future__ import annotations

import re

import pytest

from quizme.core.report_pdf import _NumberedCanvas, format_time_spent, render_report_pdf


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(None, "N/A"), (0, "0 sec"), (59, "59 sec"), (60, "1 min 0 sec"), (125, "2 min 5 sec")],
)
def test_format_time_spent(seconds, expected):
    assert format_time_spent(seconds) == expected


def test_pdf_for_a_submitted_participation(manager, two_question_quiz):
    quiz, (tf_question, _) = two_question_quiz
    participation = manager.start_participation(quiz.id, "Alice")
    response = manager.record_answer(participation.id, tf_question.id, "false")
    manager.challenge_response(response.id, "Depends on the definition of round")
    manager.submit(participation.id, 75)

    report, document = manager.export_report_pdf(participation.id)

    assert report.quiz.id == quiz.id
    assert document.startswith(b"%PDF")
    assert document.rstrip().endswith(b"%%EOF")


def test_long_reports_span_several_pages(manager):
    long_text = "A rather long statement that needs wrapping on the page. " * 6
    quiz, _ = manager.create_quiz(
        "Marathon",
        questions=[
            {"text": long_text, "type": "ESSAY", "correct_answer": ["statement"], "order": n}
            for n in range(40)
        ],
    )
    participation = manager.start_participation(quiz.id, "Bob")

    document = render_report_pdf(manager.build_report(participation.id))

    assert document.startswith(b"%PDF")
    counts = [int(value) for value in re.findall(rb"/Count (\d+)", document)]
    assert max(counts) > 1


def test_arabic_report_embeds_a_unicode_font(manager, monkeypatch):
    drawn: list[tuple[str, str]] = []
    original_left = _NumberedCanvas.drawString
    original_right = _NumberedCanvas.drawRightString

    def record_left(self, x, y, text, *args, **kwargs):
        drawn.append(("left", text))
        return original_left(self, x, y, text, *args, **kwargs)

    def record_right(self, x, y, text, *args, **kwargs):
        drawn.append(("right", text))
        return original_right(self, x, y, text, *args, **kwargs)

    monkeypatch.setattr(_NumberedCanvas, "drawString", record_left)
    monkeypatch.setattr(_NumberedCanvas, "drawRightString", record_right)

    quiz, (question,) = manager.create_quiz(
        "اختبار الرياضيات",
        questions=[{"text": "الأرض كروية", "type": "TRUE_FALSE", "correct_answer": "true"}],
    )
    participation = manager.start_participation(quiz.id, "محمد")
    manager.record_answer(participation.id, question.id, "true")
    manager.submit(participation.id, 30)

    _, document = manager.export_report_pdf(participation.id)

    assert b"DejaVuSans" in document
    assert b"ZapfDingbats" not in document
    assert b"Helvetica" not in document

    alignment, title = drawn[0]
    assert alignment == "right"
    # Joined presentation forms, not the isolated letters that were typed.
    assert title != "اختبار الرياضيات"
    assert all(0xFB50 <= ord(char) <= 0xFEFF or char == " " for char in title)
    assert any(text.startswith("Participant: ") for side, text in drawn if side == "left")


def test_latin_text_is_drawn_unchanged(manager, monkeypatch):
    drawn: list[str] = []
    original = _NumberedCanvas.drawString

    def record(self, x, y, text, *args, **kwargs):
        drawn.append(text)
        return original(self, x, y, text, *args, **kwargs)

    monkeypatch.setattr(_NumberedCanvas, "drawString", record)
    quiz, _ = manager.create_quiz("Plain English")
    participation = manager.start_participation(quiz.id, "Zoë")

    manager.export_report_pdf(participation.id)

    assert drawn[:2] == ["Plain English", "Participant: Zoë"]

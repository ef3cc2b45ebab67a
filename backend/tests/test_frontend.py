"""Tests for the Streamlit frontend."""
from pathlib import Path
from unittest.mock import Mock, patch

from streamlit.testing.v1 import AppTest

APP_PATH = Path(__file__).resolve().parents[2] / "frontend" / "app.py"


def healthy_backend():
    return Mock(status_code=200, json=lambda: {"status": "healthy", "documents_loaded": True})


class TestAnswerHistory:
    """Tests for the answer history panel."""

    def test_markup_in_question_and_answer_is_escaped(self):
        app = AppTest.from_file(str(APP_PATH), default_timeout=30)
        app.session_state["answers"] = [
            {
                "question": "What does <img src=x onerror=alert(1)> do?",
                "answer": "It renders <b>nothing</b>.",
                "source": "voice",
            }
        ]

        with patch("requests.get", return_value=healthy_backend()):
            app.run()

        assert not app.exception
        rendered = "\n".join(element.value for element in app.markdown)
        assert "&lt;img src=x onerror=alert(1)&gt;" in rendered
        assert "It renders &lt;b&gt;nothing&lt;/b&gt;." in rendered
        assert "<img" not in rendered
        assert "<b>nothing</b>" not in rendered

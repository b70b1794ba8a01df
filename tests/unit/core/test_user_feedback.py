"""Tests for terminal feedback and the commit message prompt."""

from pathlib import Path
from unittest.mock import patch

import pytest

from derpvis.core.user_feedback import InteractiveFeedback, InteractiveUserInput


def test_interactive_feedback_writes_lines_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    feedback = InteractiveFeedback()

    feedback.info("Folder missing: /src/a")
    feedback.error("/src/b: offline")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Folder missing: /src/a\n" in captured.err
    assert "/src/b: offline" in captured.err


def test_prompt_commit_message_reprompts_until_non_blank() -> None:
    with patch("derpvis.core.user_feedback.click.prompt", side_effect=["   ", " Fix it "]) as prompt:
        message = InteractiveUserInput().prompt_commit_message(Path("/src/a"))

    assert message == "Fix it"
    assert prompt.call_count == 2
    assert prompt.call_args.args == ("Enter commit message for /src/a",)

"""Tests for FakeGit and the feedback/input fakes.

These tests verify that the fakes behave like the real implementations where
the sync engine relies on it, providing reliable test doubles.
"""

from pathlib import Path

import pytest

from derpvis.core.git.fake import FakeGit
from tests.fakes.user_feedback import FakeUserFeedback, FakeUserInput


def test_fake_git_initialization() -> None:
    git = FakeGit()

    assert not git.path_exists(Path("/a"))
    assert not git.is_git_repository(Path("/a"))
    assert git.get_remote_url(Path("/a"), "origin") is None


def test_fake_git_plain_path_exists_but_is_not_repository() -> None:
    git = FakeGit(plain_paths={Path("/a")})

    assert git.path_exists(Path("/a"))
    assert not git.is_git_repository(Path("/a"))


def test_fake_git_clone_creates_repository() -> None:
    git = FakeGit()

    git.clone("git@host:a.git", Path("/a"))

    assert git.is_git_repository(Path("/a"))
    assert git.get_remote_url(Path("/a"), "origin") == "git@host:a.git"
    assert git.cloned == [("git@host:a.git", Path("/a"))]


def test_fake_git_configured_failures_raise_runtime_error() -> None:
    path = Path("/a")
    git = FakeGit(
        repositories={path},
        pull_failures={path: "pull"},
        commit_failures={path: "commit"},
        push_failures={path: "push"},
        status_failures={path: "status"},
        clone_failures={"url": "clone"},
    )

    for call, message in [
        (lambda: git.pull(path, "origin"), "pull"),
        (lambda: git.commit(path, "m"), "commit"),
        (lambda: git.push(path), "push"),
        (lambda: git.has_uncommitted_changes(path), "status"),
        (lambda: git.clone("url", Path("/b")), "clone"),
    ]:
        with pytest.raises(RuntimeError, match=message):
            call()

    assert git.pulled == []
    assert git.pushed == []


def test_fake_git_commit_cleans_worktree() -> None:
    path = Path("/a")
    git = FakeGit(repositories={path}, dirty={path})

    git.commit(path, "msg")

    assert not git.has_uncommitted_changes(path)
    assert git.commits == [(path, "msg")]


def test_fake_user_input_skips_blank_answers() -> None:
    user_input = FakeUserInput(["", "  done "])

    assert user_input.prompt_commit_message(Path("/a")) == "done"
    assert user_input.prompts == [Path("/a"), Path("/a")]


def test_fake_user_input_without_answers_fails_loudly() -> None:
    with pytest.raises(AssertionError):
        FakeUserInput().prompt_commit_message(Path("/a"))


def test_fake_user_feedback_records_levels() -> None:
    feedback = FakeUserFeedback()

    feedback.info("i")
    feedback.error("e")

    assert feedback.messages == [("info", "i"), ("error", "e")]
    assert feedback.of_level("error") == ["e"]

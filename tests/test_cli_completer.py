"""Tests for GatewayCompleter."""

import pytest
from pathlib import Path
from unittest.mock import patch

from prompt_toolkit.document import Document

from cli.completer import GatewayCompleter
from cli.constants import COMMANDS, UPLOADS_DIR


@pytest.fixture
def completer():
    """Create a GatewayCompleter instance."""
    return GatewayCompleter()


@pytest.fixture
def uploads_dir(tmp_path):
    """
    Create a temporary uploads directory with test files.

    Returns:
        Path to the temporary uploads directory
    """
    uploads = tmp_path / UPLOADS_DIR
    uploads.mkdir()
    (uploads / "report.pdf").write_text("content")
    (uploads / "notes.txt").write_text("content")
    (uploads / "nested").mkdir()
    return uploads


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


def get_completions_display(completer, text):
    """Helper to get list of completion display texts from completer."""
    doc = Document(text, len(text))
    return [c.display_text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        completions = get_completions_list(completer, "")
        for cmd in COMMANDS:
            assert cmd in completions

    def test_partial_command_filters(self, completer):
        completions = get_completions_list(completer, "u")
        assert completions == ["upload", "users"]

    def test_command_completion_case_insensitive(self, completer):
        assert "permission" in get_completions_list(completer, "PER")


class TestFileCompletion:
    """Tests for file path completion in the upload command."""

    def test_upload_shows_uploads_files(self, completer, uploads_dir):
        with patch.object(Path, "cwd", return_value=uploads_dir.parent):
            completions = get_completions_list(completer, "upload ")

        assert completions == ["uploads/notes.txt", "uploads/report.pdf"]

    def test_upload_filters_by_prefix(self, completer, uploads_dir):
        with patch.object(Path, "cwd", return_value=uploads_dir.parent):
            completions = get_completions_list(completer, "upload uploads/r")

        assert completions == ["uploads/report.pdf"]

    def test_second_upload_argument_not_completed(self, completer, uploads_dir):
        with patch.object(Path, "cwd", return_value=uploads_dir.parent):
            assert get_completions_list(completer, "upload uploads/report.pdf ") == []

    def test_other_commands_not_completed(self, completer, uploads_dir):
        with patch.object(Path, "cwd", return_value=uploads_dir.parent):
            assert get_completions_list(completer, "info ") == []

    def test_missing_uploads_dir_message(self, completer, tmp_path):
        with patch.object(Path, "cwd", return_value=tmp_path):
            displays = get_completions_display(completer, "upload ")

        assert displays == ["(no files found - uploads/ directory missing)"]

    def test_empty_uploads_dir_message(self, completer, tmp_path):
        (tmp_path / UPLOADS_DIR).mkdir()
        with patch.object(Path, "cwd", return_value=tmp_path):
            displays = get_completions_display(completer, "upload ")

        assert displays == ["(no files found in uploads/)"]


class TestDownloadTargetCompletion:
    """Tests for output directory completion in the download command."""

    def test_downloads_dir_offered_first(self, completer, tmp_path):
        (tmp_path / "exports").mkdir()
        (tmp_path / ".hidden").mkdir()
        (tmp_path / "file.txt").write_text("content")

        with patch.object(Path, "cwd", return_value=tmp_path):
            completions = get_completions_list(completer, "download report_pdf ")

        assert completions == ["downloads/", "exports/"]

    def test_file_id_argument_not_completed(self, completer, tmp_path):
        with patch.object(Path, "cwd", return_value=tmp_path):
            assert get_completions_list(completer, "download ") == []

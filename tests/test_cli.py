"""Tests for the mdview entry point and open prompt completion."""

from pathlib import Path

import pytest

from mdview import __main__ as cli
from mdview.config import Config
from mdview.widgets.open_modal import get_path_completions


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    config = Config(
        history_directory=tmp_path / "config",
        log_file=tmp_path / "logs" / "mdview.log",
    )
    monkeypatch.setattr(cli.Config, "load", classmethod(lambda cls: config))
    return config


class TestMain:
    def test_passes_path_to_app(self, isolated_config, monkeypatch):
        calls = []
        monkeypatch.setattr(cli, "run_app", lambda config, path: calls.append((config, path)))

        assert cli.main(["notes.md"]) == 0
        assert calls == [(isolated_config, "notes.md")]

    def test_history_dir_override(self, isolated_config, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr(cli, "run_app", lambda config, path: calls.append(config))

        assert cli.main(["--history-dir", str(tmp_path / "alt")]) == 0
        assert calls[0].history_directory == tmp_path / "alt"

    def test_error_returns_one(self, isolated_config, monkeypatch, capsys):
        def fail(config, path):
            raise RuntimeError("boom")

        monkeypatch.setattr(cli, "run_app", fail)
        assert cli.main([]) == 1
        assert "Error: boom" in capsys.readouterr().err

    def test_keyboard_interrupt_returns_zero(self, isolated_config, monkeypatch):
        def interrupt(config, path):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, "run_app", interrupt)
        assert cli.main([]) == 0


class TestPathCompletions:
    @pytest.fixture
    def tree(self, tmp_path):
        (tmp_path / "guide.md").write_text("")
        (tmp_path / "Glossary.markdown").write_text("")
        (tmp_path / "graph.png").write_text("")
        (tmp_path / ".hidden.md").write_text("")
        (tmp_path / "guides").mkdir()
        return tmp_path

    def test_empty_input(self):
        assert get_path_completions("") == []

    def test_lists_directory_contents(self, tree):
        completions = get_path_completions(f"{tree}/")
        assert completions == [tree / "guides", tree / "Glossary.markdown", tree / "guide.md"]

    def test_prefix_match_case_insensitive(self, tree):
        completions = get_path_completions(str(tree / "gu"))
        assert completions == [tree / "guides", tree / "guide.md"]

    def test_missing_parent(self, tmp_path):
        assert get_path_completions(str(tmp_path / "nope" / "x")) == []

"""Shared fixtures for mdview tests."""

import pytest

from mdview import loader


@pytest.fixture(autouse=True)
def clear_file_cache():
    """Reset the module-level file cache around each test."""
    loader._file_cache.clear()
    yield
    loader._file_cache.clear()


@pytest.fixture
def make_docs(tmp_path):
    """Factory creating markdown files and returning their paths as strings."""
    docs = tmp_path / "docs"
    docs.mkdir(exist_ok=True)

    def _make(*names: str) -> list[str]:
        paths = []
        for name in names:
            path = docs / name
            path.write_text(f"# {path.stem}\n\nBody of {name}\n", encoding="utf-8")
            paths.append(str(path))
        return paths

    return _make


@pytest.fixture
def history_dir(tmp_path):
    """Directory for history snapshots (not created up front)."""
    return tmp_path / "config" / "mdview"


@pytest.fixture
def sample_markdown():
    return (
        "# Title\n"
        "\n"
        "Intro paragraph.\n"
        "\n"
        "## Getting Started\n"
        "\n"
        "```python\n"
        "# not a heading\n"
        "```\n"
        "\n"
        "### Details ###\n"
        "\n"
        "## Getting Started\n"
    )

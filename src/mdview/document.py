"""Markdown documents: HTML rendering, table of contents, and export."""

import html
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

import markdown

from .loader import load_markdown_file


# Pattern to match dangerous HTML tags (script, iframe, object, embed, etc.)
_DANGEROUS_TAGS_PATTERN = re.compile(
    r"<\s*(script|iframe|object|embed|form|input|button|textarea|select|style|link|meta|base)[^>]*>.*?</\s*\1\s*>|"
    r"<\s*(script|iframe|object|embed|form|input|button|textarea|select|style|link|meta|base)[^>]*/?\s*>",
    re.IGNORECASE | re.DOTALL,
)

# Pattern to match dangerous attributes (onclick, onerror, javascript:, etc.)
_DANGEROUS_ATTRS_PATTERN = re.compile(
    r'\s(on\w+|href\s*=\s*["\']?\s*javascript:|src\s*=\s*["\']?\s*javascript:)[^>]*',
    re.IGNORECASE,
)

EXPORT_CSS = """
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
    line-height: 1.6;
    max-width: 800px;
    margin: 0 auto;
    padding: 2rem;
    color: #333;
}

h1, h2 { border-bottom: 1px solid #eee; padding-bottom: 0.3em; }

code, pre {
    background-color: #f6f8fa;
    border-radius: 3px;
    font-family: "SF Mono", Consolas, "Liberation Mono", Menlo, monospace;
}

pre { padding: 1em; overflow-x: auto; }

blockquote {
    border-left: 4px solid #ddd;
    margin: 0;
    padding-left: 1em;
    color: #666;
}

table { border-collapse: collapse; }

th, td { border: 1px solid #ddd; padding: 0.5em; }

nav.toc ul { list-style: none; padding-left: 0; }

.toc-level-2 { padding-left: 1em; }
.toc-level-3 { padding-left: 2em; }
.toc-level-4, .toc-level-5, .toc-level-6 { padding-left: 3em; }
"""


@dataclass
class TocItem:
    """A heading entry in a document's table of contents."""

    level: int
    text: str
    id: str


@dataclass
class MarkdownDocument:
    """A loaded markdown file with its rendered HTML and outline."""

    path: str
    raw_content: str
    html_content: str
    toc: list[TocItem] = field(default_factory=list)

    @property
    def name(self) -> str:
        return Path(self.path).name

    @classmethod
    def from_file(cls, path: str) -> "MarkdownDocument":
        """Load, render and outline a markdown file.

        Raises:
            MdLoadError: If the file cannot be read as UTF-8.
        """
        raw_content = load_markdown_file(path)
        html_content, toc = _render(raw_content)
        return cls(path=path, raw_content=raw_content, html_content=html_content, toc=toc)


def _sanitize_html(html_content: str) -> str:
    """Remove dangerous HTML tags and attributes from content."""
    result = _DANGEROUS_TAGS_PATTERN.sub("", html_content)
    return _DANGEROUS_ATTRS_PATTERN.sub(" ", result)


def _render(content: str) -> tuple[str, list[TocItem]]:
    """Convert markdown once, returning sanitized HTML and its headings."""
    md = markdown.Markdown(extensions=["fenced_code", "tables", "toc"])
    html_content = _sanitize_html(md.convert(content))
    return html_content, list(_flatten_toc_tokens(md.toc_tokens))


def _flatten_toc_tokens(tokens: list[dict]) -> Iterator[TocItem]:
    for token in tokens:
        text = html.unescape(token["name"]).strip()
        if text:
            yield TocItem(token["level"], text, token["id"])
        yield from _flatten_toc_tokens(token["children"])


def markdown_to_html(content: str) -> str:
    """Convert markdown content to a sanitized HTML fragment."""
    return _render(content)[0]


def extract_toc(content: str) -> list[TocItem]:
    """Extract the headings of markdown content in document order.

    Headings come from the markdown toc extension, so ATX and setext
    headings are both found and ids are the ones used in the rendered HTML.
    Empty headings are skipped.
    """
    return _render(content)[1]


def _toc_nav(toc: list[TocItem]) -> str:
    if not toc:
        return ""
    links = "\n".join(
        f'    <li class="toc-level-{item.level}">'
        f'<a href="#{html.escape(item.id)}">{html.escape(item.text)}</a></li>'
        for item in toc
    )
    return f'<nav class="toc">\n<ul>\n{links}\n</ul>\n</nav>\n'


def export_html(document: MarkdownDocument, export_dir: Path) -> Path:
    """Export a document to a standalone HTML file.

    Args:
        document: The loaded document
        export_dir: Directory to export to

    Returns:
        Path to the exported HTML file
    """
    title = Path(document.path).stem or "Document"
    safe_title = html.escape(title)

    html_doc = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{safe_title}</title>
    <style>
{EXPORT_CSS}
    </style>
</head>
<body>
{_toc_nav(document.toc)}{document.html_content}
</body>
</html>
"""
    export_dir.mkdir(parents=True, exist_ok=True)
    output_path = export_dir / f"{title}.html"
    output_path.write_text(html_doc, encoding="utf-8")
    return output_path

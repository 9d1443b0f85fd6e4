# mdview/services/markdown_renderer.py
from __future__ import annotations

import html
import logging
import re
from pathlib import Path

import markdown

from mdview.domain.interfaces import IDocumentRenderer, IFileService, IMarkdownRenderer
from mdview.services.assets import AssetStore
from mdview.services.extensions import MultilineBlockquoteExtension, diagram_fence_format
from mdview.services.file_service import FileService
from mdview.utils.constants import (
    APP_NAME,
    BOOTSTRAP_JS,
    DIAGRAM_LANGUAGE,
    HTML_TEMPLATE,
    LAYOUT_CSS,
)

logger = logging.getLogger(__name__)


class MarkdownRenderer(IMarkdownRenderer):
    """
    Converts Markdown to a standalone HTML document.

    The stylesheet and the Mermaid bundle are inlined; with a local bundle the
    output never fetches anything at display time. Mermaid fences come out of the converter
    as <pre><code class="language-mermaid">; the bootstrap script at the end of
    the body swaps them for <div class="mermaid"> and picks a light/dark theme.
    """

    def __init__(self, assets: AssetStore | None = None) -> None:
        self.assets = assets or AssetStore()

    def to_html(self, markdown_text: str, *, title: str = "") -> str:
        # Extensions: GFM-ish feature set. Raw HTML passes through untouched
        # (Python-Markdown never escapes it).
        exts = [
            "tables",
            "pymdownx.highlight",
            "pymdownx.superfences",  # fences at any depth, incl. inside quotes
            "footnotes",
            "def_list",
            "pymdownx.tilde",  # ~~strike~~
            "pymdownx.magiclink",  # bare URLs / emails
            "pymdownx.tasklist",  # - [ ] / - [x]
            MultilineBlockquoteExtension(),  # >>> ... >>>
        ]

        ext_cfg = {
            "pymdownx.highlight": {"use_pygments": False},
            "pymdownx.superfences": {
                "custom_fences": [
                    {
                        "name": DIAGRAM_LANGUAGE,
                        "class": f"language-{DIAGRAM_LANGUAGE}",
                        "format": diagram_fence_format,
                    }
                ]
            },
            # Only strikethrough; a single ~ stays literal.
            "pymdownx.tilde": {"subscript": False},
            "pymdownx.tasklist": {"custom_checkbox": False, "clickable_checkbox": False},
        }

        body = markdown.markdown(
            markdown_text,
            extensions=exts,
            extension_configs=ext_cfg,
            output_format="html",
        )

        assets = self.assets.get()
        return HTML_TEMPLATE.format(
            title=html.escape(title or APP_NAME),
            css=assets.stylesheet,
            layout_css=LAYOUT_CSS,
            diagram_js=assets.diagram_js,
            body=body,
            bootstrap_js=BOOTSTRAP_JS,
        )


def error_markdown(path: Path, error: BaseException) -> str:
    """Markdown shown in place of a file that couldn't be read."""
    # the code span delimiter must be longer than any backtick run in the path
    longest = max((len(run) for run in re.findall(r"`+", str(path))), default=0)
    tick = "`" * (longest + 1)
    pad = " " if longest else ""
    return f"# Error\n\nFailed to read {tick}{pad}{path}{pad}{tick}: {error}"


class DocumentRenderer(IDocumentRenderer):
    """
    Reads the file and renders it. A failed read (file missing, mid-write,
    not UTF-8) turns into an error page instead of an exception.
    """

    def __init__(
        self,
        renderer: IMarkdownRenderer | None = None,
        files: IFileService | None = None,
    ) -> None:
        self.renderer = renderer or MarkdownRenderer()
        self.files = files or FileService()

    def render(self, path: Path) -> str:
        try:
            text = self.files.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            text = error_markdown(path, e)
        return self.renderer.to_html(text, title=path.name)

# mdview/services/extensions.py
from __future__ import annotations

import html
import re

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

_QUOTE_FENCE_RE = re.compile(r"^ {0,3}(>{3,})\s*$")
_CODE_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_CODE_CLOSE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})\s*$")


class MultilineBlockquotePreprocessor(Preprocessor):
    """
    Rewrites fenced block quotes into ordinary `>` quotes:

        >>>
        Several paragraphs,
        no `>` on every line.
        >>>

    A longer fence can wrap a shorter one to nest quotes. An unclosed fence runs
    to the end of the document. Fenced code blocks are passed through untouched.
    """

    def run(self, lines: list[str]) -> list[str]:
        out: list[str] = []
        quotes: list[int] = []
        code_fence: str | None = None

        for line in lines:
            depth = len(quotes)
            if code_fence is None:
                m = _QUOTE_FENCE_RE.match(line)
                if m:
                    width = len(m.group(1))
                    if quotes and width >= quotes[-1]:
                        quotes.pop()
                        # blank line ends the quote so following text isn't pulled in lazily
                        out.append(self._quote(len(quotes), ""))
                    else:
                        quotes.append(width)
                    continue
                f = _CODE_FENCE_RE.match(line)
                if f:
                    code_fence = f.group(1)
            else:
                c = _CODE_CLOSE_RE.match(line)
                if c and c.group(1)[0] == code_fence[0] and len(c.group(1)) >= len(code_fence):
                    code_fence = None
            out.append(self._quote(depth, line))
        return out

    @staticmethod
    def _quote(depth: int, line: str) -> str:
        if depth == 0:
            return line
        return ("> " * depth) + line


def diagram_fence_format(source, language, class_name, options, md, **kwargs) -> str:
    """
    superfences formatter for diagram fences. Keeps the language class on the
    <code> element, where the page bootstrap looks for it.
    """
    return '<pre><code class="%s">%s</code></pre>' % (class_name, html.escape(source, quote=False))


class MultilineBlockquoteExtension(Extension):
    def extendMarkdown(self, md: Markdown) -> None:
        # after whitespace normalization (30), before superfences (25)
        md.preprocessors.register(
            MultilineBlockquotePreprocessor(md), "multiline_blockquote", 27
        )


def makeExtension(**kwargs) -> MultilineBlockquoteExtension:  # noqa: N802
    return MultilineBlockquoteExtension(**kwargs)

APP_ORG = "mdview"
APP_NAME = "mdview"

DEBOUNCE_MS = 200
RELOAD_POLL_MS = 200

DEFAULT_WINDOW_WIDTH = 800
DEFAULT_WINDOW_HEIGHT = 600

# Language tag of fenced code blocks that are drawn as diagrams.
DIAGRAM_LANGUAGE = "mermaid"

# sessionStorage key that carries the scroll offset across a reload.
SCROLL_STORAGE_KEY = "mdview_scrollY"

MARKDOWN_FILE_FILTER = "Markdown (*.md *.markdown *.mdown);;Text (*.txt);;All files (*)"

LAYOUT_CSS = """
.markdown-body {
    box-sizing: border-box;
    min-width: 200px;
    max-width: 980px;
    margin: 0 auto;
    padding: 45px;
}

@media (max-width: 767px) {
    .markdown-body {
        padding: 15px;
    }
}
"""

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
{css}
{layout_css}
</style>
<script>
{diagram_js}
</script>
</head>
<body>
<article class="markdown-body">
{body}
</article>
<script>
{bootstrap_js}
</script>
</body>
</html>
"""

BOOTSTRAP_JS = """(function() {
    document.querySelectorAll('pre > code.language-%(lang)s').forEach(function(codeEl) {
        var pre = codeEl.parentElement;
        var div = document.createElement('div');
        div.className = '%(lang)s';
        div.textContent = codeEl.textContent;
        pre.parentElement.replaceChild(div, pre);
    });

    var isDark = window.matchMedia && window.matchMedia('(prefers-color-scheme: dark)').matches;
    mermaid.initialize({
        startOnLoad: true,
        theme: isDark ? 'dark' : 'default'
    });
})();""" % {"lang": DIAGRAM_LANGUAGE}

SCROLL_SAVE_JS = (
    f"sessionStorage.setItem('{SCROLL_STORAGE_KEY}', window.scrollY.toString())"
)

SCROLL_RESTORE_JS = f"""<script>
(function() {{
    var savedY = sessionStorage.getItem('{SCROLL_STORAGE_KEY}');
    if (savedY) {{
        requestAnimationFrame(function() {{
            window.scrollTo(0, parseInt(savedY));
            sessionStorage.removeItem('{SCROLL_STORAGE_KEY}');
        }});
    }}
}})();
</script>
"""

ZOOM_STEP = 0.1
ZOOM_MIN = 0.5
ZOOM_IN_JS = (
    "document.body.style.zoom = "
    f"(parseFloat(document.body.style.zoom || 1) + {ZOOM_STEP}).toString()"
)
ZOOM_OUT_JS = (
    f"document.body.style.zoom = Math.max({ZOOM_MIN}, "
    f"(parseFloat(document.body.style.zoom || 1) - {ZOOM_STEP})).toString()"
)
ZOOM_RESET_JS = "document.body.style.zoom = '1'"

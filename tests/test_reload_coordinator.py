from __future__ import annotations

from pathlib import Path

from conftest import FakeSurface

from mdview.services.markdown_renderer import DocumentRenderer
from mdview.services.path_registry import PathRegistry
from mdview.services.reload_coordinator import ReloadCoordinator, inject_scroll_restore
from mdview.services.reload_signal import ReloadSignal
from mdview.utils.constants import SCROLL_RESTORE_JS, SCROLL_SAVE_JS, SCROLL_STORAGE_KEY


def make(signal, registry, renderer, surface) -> ReloadCoordinator:
    return ReloadCoordinator(signal, registry, renderer, lambda: surface)


def test_tick_without_change_does_nothing(signal, registry, document_renderer, surface, doc_file):
    registry.set(doc_file)
    c = make(signal, registry, document_renderer, surface)
    assert c.tick() is False
    assert surface.calls == []


def test_tick_saves_scroll_then_loads_fresh_document(
    signal: ReloadSignal,
    registry: PathRegistry,
    document_renderer: DocumentRenderer,
    surface: FakeSurface,
    doc_file: Path,
):
    registry.set(doc_file)
    c = make(signal, registry, document_renderer, surface)

    doc_file.write_text("# Updated\n", encoding="utf-8")
    signal.mark_changed()
    assert c.tick() is True

    # capture is issued before the old document is replaced
    assert [kind for kind, _ in surface.calls] == ["evaluate", "load"]
    assert surface.scripts == [SCROLL_SAVE_JS]
    doc = surface.loads[0]
    assert "<h1>Updated</h1>" in doc
    assert SCROLL_RESTORE_JS in doc
    assert doc.index(SCROLL_RESTORE_JS) < doc.rindex("</body>")


def test_one_reload_per_signal(signal, registry, document_renderer, surface, doc_file):
    registry.set(doc_file)
    c = make(signal, registry, document_renderer, surface)

    for _ in range(5):
        signal.mark_changed()
    assert c.tick() is True
    assert c.tick() is False
    assert len(surface.loads) == 1


def test_reload_renders_whatever_path_is_current(
    signal, registry, document_renderer, surface, tmp_path: Path
):
    a = tmp_path / "a.md"
    b = tmp_path / "b.md"
    a.write_text("# A\n", encoding="utf-8")
    b.write_text("# B\n", encoding="utf-8")
    registry.set(a)
    c = make(signal, registry, document_renderer, surface)

    registry.set(b)
    signal.mark_changed()
    c.tick()
    assert "<h1>B</h1>" in surface.loads[-1]


def test_missing_surface_is_a_silent_noop(signal, registry, document_renderer, doc_file):
    registry.set(doc_file)
    c = ReloadCoordinator(signal, registry, document_renderer, lambda: None)
    signal.mark_changed()
    assert c.tick() is False
    # the flag was consumed; startup renders directly instead
    assert signal.take_if_changed() is False


def test_unreadable_file_still_loads_an_error_page(signal, registry, document_renderer, surface, tmp_path):
    gone = tmp_path / "gone.md"
    registry.set(gone)
    c = make(signal, registry, document_renderer, surface)
    signal.mark_changed()
    assert c.tick() is True
    assert str(gone) in surface.loads[0]
    assert "<h1>Error</h1>" in surface.loads[0]


def test_change_flagged_during_render_stays_pending_as_one_reload(
    signal, registry, surface, doc_file
):
    """
    Coalescing property: the flag is cleared before rendering, so whatever is
    flagged while the render runs collapses into exactly one follow-up reload.
    A write whose event never arrives after the read waits for the next signal.
    """
    registry.set(doc_file)

    class SlowRenderer:
        def render(self, path: Path) -> str:
            # the watcher fires while we're busy
            signal.mark_changed()
            return "<html><body>v1</body></html>"

    c = make(signal, registry, SlowRenderer(), surface)
    signal.mark_changed()
    assert c.tick() is True
    # the mid-render mark survives as one pending reload (no more, no less)
    assert c.tick() is True
    assert c.tick() is False
    assert len(surface.loads) == 2


# ------------------------------
# Scroll handoff scripts
# ------------------------------


def test_save_script_stores_scroll_offset_under_the_key():
    assert f"sessionStorage.setItem('{SCROLL_STORAGE_KEY}'" in SCROLL_SAVE_JS
    assert "window.scrollY" in SCROLL_SAVE_JS


def test_restore_script_scrolls_then_clears_the_key():
    js = SCROLL_RESTORE_JS
    assert f"sessionStorage.getItem('{SCROLL_STORAGE_KEY}')" in js
    assert "window.scrollTo(0, parseInt(savedY))" in js
    assert f"sessionStorage.removeItem('{SCROLL_STORAGE_KEY}')" in js
    # the key is cleared only after the scroll is applied
    assert js.index("window.scrollTo") < js.index("removeItem")
    assert "requestAnimationFrame" in js


def test_inject_before_last_closing_body():
    doc = "<html><body><pre>&lt;/body&gt;</pre>x</body></html>"
    out = inject_scroll_restore(doc)
    assert out == "<html><body><pre>&lt;/body&gt;</pre>x" + SCROLL_RESTORE_JS + "</body></html>"


def test_inject_only_touches_the_final_body_tag():
    doc = "<body><div></body></div></body>"
    out = inject_scroll_restore(doc)
    assert out.count(SCROLL_RESTORE_JS) == 1
    assert out.endswith(SCROLL_RESTORE_JS + "</body>")


def test_inject_appends_when_no_body_tag():
    assert inject_scroll_restore("<p>bare</p>") == "<p>bare</p>" + SCROLL_RESTORE_JS

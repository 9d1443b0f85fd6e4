from __future__ import annotations

from pathlib import Path

import pytest
from conftest import FakeSurface, FakeWatcher, wait_until

from mdview.services.file_switcher import FileSwitcher
from mdview.services.file_watcher import ChangeWatcher
from mdview.services.reload_signal import ReloadSignal


@pytest.fixture()
def two_docs(tmp_path: Path) -> tuple[Path, Path]:
    a = tmp_path / "a.md"
    b = tmp_path / "b.md"
    a.write_text("# A\n", encoding="utf-8")
    b.write_text("# B\n", encoding="utf-8")
    return a, b


def make(registry, watcher, renderer, surface, **kw) -> FileSwitcher:
    return FileSwitcher(registry, watcher, renderer, lambda: surface, **kw)


def test_first_switch_initializes_registry_and_renders(
    registry, fake_watcher: FakeWatcher, document_renderer, surface: FakeSurface, two_docs
):
    a, _ = two_docs
    s = make(registry, fake_watcher, document_renderer, surface)

    p = s.switch_to(a)

    assert p == a.resolve()
    assert registry.get() == a.resolve()
    assert [h.path for h in fake_watcher.live] == [a.resolve()]
    assert len(surface.loads) == 1
    assert "<h1>A</h1>" in surface.loads[0]


def test_switch_replaces_the_watch_and_loads_immediately(
    registry, fake_watcher: FakeWatcher, document_renderer, surface: FakeSurface, two_docs
):
    a, b = two_docs
    s = make(registry, fake_watcher, document_renderer, surface)
    s.switch_to(a)
    old = s.handle

    s.switch_to(b)

    assert old is not None and old.active is False
    assert old.stop_calls == 1
    assert len(fake_watcher.live) == 1
    assert fake_watcher.live[0].path == b.resolve()
    assert s.handle is fake_watcher.live[0]
    assert "<h1>B</h1>" in surface.loads[-1]


def test_switch_does_not_try_to_keep_scroll(
    registry, fake_watcher, document_renderer, surface: FakeSurface, two_docs
):
    a, b = two_docs
    s = make(registry, fake_watcher, document_renderer, surface)
    s.switch_to(a)
    s.switch_to(b)
    assert surface.scripts == []
    assert all("sessionStorage" not in d for d in surface.loads)


def test_switch_canonicalizes_relative_paths(
    registry, fake_watcher, document_renderer, surface, two_docs, monkeypatch
):
    a, _ = two_docs
    monkeypatch.chdir(a.parent)
    s = make(registry, fake_watcher, document_renderer, surface)
    (a.parent / "sub").mkdir()
    assert s.switch_to("sub/../a.md") == a.resolve()


def test_switch_to_missing_file_keeps_literal_path_and_shows_error(
    registry, fake_watcher, document_renderer, surface: FakeSurface, tmp_path: Path
):
    missing = tmp_path / "nope.md"
    s = make(registry, fake_watcher, document_renderer, surface)

    p = s.switch_to(missing)

    assert p == missing
    assert registry.get() == missing
    assert "<h1>Error</h1>" in surface.loads[0]


def test_listener_gets_the_canonical_path(registry, fake_watcher, document_renderer, surface, two_docs):
    a, b = two_docs
    seen: list[Path] = []
    s = make(registry, fake_watcher, document_renderer, surface, on_path_changed=seen.append)
    s.switch_to(a)
    s.set_path_listener(lambda p: seen.append(p.with_suffix(".seen")))
    s.switch_to(b)
    assert seen == [a.resolve(), b.resolve().with_suffix(".seen")]


def test_switch_before_surface_exists_still_sets_up_watch(registry, fake_watcher, document_renderer, two_docs):
    a, _ = two_docs
    s = FileSwitcher(registry, fake_watcher, document_renderer, lambda: None)
    s.switch_to(a)
    assert registry.get() == a.resolve()
    assert len(fake_watcher.live) == 1


def test_close_stops_the_live_handle(registry, fake_watcher, document_renderer, surface, two_docs):
    a, _ = two_docs
    s = make(registry, fake_watcher, document_renderer, surface)
    s.switch_to(a)
    s.close()
    assert fake_watcher.live == []
    assert s.handle is None
    s.close()


def test_old_file_stops_signalling_after_switch(registry, document_renderer, surface, two_docs):
    a, b = two_docs
    signal = ReloadSignal()
    s = make(registry, ChangeWatcher(signal, debounce_ms=50), document_renderer, surface)
    try:
        s.switch_to(a)
        s.switch_to(b)

        a.write_text("# A changed\n", encoding="utf-8")
        assert not wait_until(signal.take_if_changed, timeout=0.4)

        b.write_text("# B changed\n", encoding="utf-8")
        assert wait_until(signal.take_if_changed)
    finally:
        s.close()

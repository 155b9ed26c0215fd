import threading
import time

import pytest
from PIL import Image

from applauncher.core.errors import DecodeFailure
from applauncher.discovery.icons import (
    Bitmap,
    IconResolver,
    decode_image,
)


class CountingDecoder:
    """Stub decoder that records every path it is asked to decode."""

    def __init__(self, fail=False, delay=0.0):
        self.calls = []
        self.fail = fail
        self.delay = delay

    def __call__(self, path, size):
        self.calls.append(path)
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise DecodeFailure(path, "stub failure")
        return Bitmap(1, 1, b"\x00\x00\x00\xff")


def lookup_everything(name, size):
    return f"/themes/{name}-{size}.png"


def save_png(path, size=(16, 16), color=(255, 0, 0, 255)):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path)
    return path


def test_same_reference_is_decoded_once():
    decoder = CountingDecoder()
    resolver = IconResolver(theme_lookup=lookup_everything, decoder=decoder)
    first = resolver.resolve("firefox")
    second = resolver.resolve("firefox")
    assert first is second
    assert decoder.calls == ["/themes/firefox-64.png"]


def test_distinct_references_are_decoded_separately():
    decoder = CountingDecoder()
    resolver = IconResolver(theme_lookup=lookup_everything, decoder=decoder)
    resolver.resolve("a")
    resolver.resolve("b")
    assert len(decoder.calls) == 2
    assert len(resolver) == 2


def test_failed_decode_returns_none_and_is_not_retried_by_default():
    decoder = CountingDecoder(fail=True)
    resolver = IconResolver(theme_lookup=lookup_everything, decoder=decoder)
    assert resolver.resolve("broken") is None
    assert resolver.resolve("broken") is None
    assert len(decoder.calls) == 1
    assert "broken" in resolver


def test_failed_decode_is_retried_when_failures_are_not_cached():
    decoder = CountingDecoder(fail=True)
    resolver = IconResolver(
        theme_lookup=lookup_everything, decoder=decoder, cache_failures=False
    )
    resolver.resolve("broken")
    resolver.resolve("broken")
    assert len(decoder.calls) == 2
    assert "broken" not in resolver


def test_unknown_theme_name_returns_none_without_decoding():
    decoder = CountingDecoder()
    resolver = IconResolver(theme_lookup=lambda name, size: None, decoder=decoder)
    assert resolver.resolve("nothing-here") is None
    assert decoder.calls == []


def test_empty_reference_returns_none():
    resolver = IconResolver(theme_lookup=lookup_everything, decoder=CountingDecoder())
    assert resolver.resolve(None) is None
    assert resolver.resolve("") is None


def test_existing_path_is_decoded_directly(tmp_path):
    icon = save_png(tmp_path / "icon.png")
    decoder = CountingDecoder()

    def lookup_must_not_run(name, size):
        raise AssertionError("theme lookup used for a path")

    resolver = IconResolver(theme_lookup=lookup_must_not_run, decoder=decoder)
    assert resolver.resolve(str(icon)) is not None
    assert decoder.calls == [str(icon)]


def test_missing_path_returns_none(tmp_path):
    decoder = CountingDecoder()
    resolver = IconResolver(theme_lookup=lambda name, size: None, decoder=decoder)
    assert resolver.resolve(str(tmp_path / "gone.png")) is None
    assert decoder.calls == []


def test_lru_bound_evicts_least_recently_used():
    decoder = CountingDecoder()
    resolver = IconResolver(
        theme_lookup=lookup_everything, decoder=decoder, max_entries=2
    )
    resolver.resolve("a")
    resolver.resolve("b")
    resolver.resolve("a")
    resolver.resolve("c")
    assert "a" in resolver
    assert "b" not in resolver
    assert len(resolver) == 2


def test_peek_does_not_load():
    decoder = CountingDecoder()
    resolver = IconResolver(theme_lookup=lookup_everything, decoder=decoder)
    assert resolver.peek("firefox") == (False, None)
    bitmap = resolver.resolve("firefox")
    assert resolver.peek("firefox") == (True, bitmap)
    assert resolver.peek(None) == (True, None)
    assert len(decoder.calls) == 1


def test_concurrent_requests_share_one_decode():
    decoder = CountingDecoder(delay=0.05)
    resolver = IconResolver(theme_lookup=lookup_everything, decoder=decoder)
    results = []
    threads = [
        threading.Thread(target=lambda: results.append(resolver.resolve("shared")))
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(decoder.calls) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_prefetch_counts_decoded_icons():
    decoder = CountingDecoder()
    resolver = IconResolver(
        theme_lookup=lambda name, size: None if name == "missing" else f"/{name}.png",
        decoder=decoder,
    )
    assert resolver.prefetch(["a", None, "missing", "a", "b"]) == 3
    assert len(decoder.calls) == 2


def test_clear_forgets_everything():
    decoder = CountingDecoder()
    resolver = IconResolver(theme_lookup=lookup_everything, decoder=decoder)
    resolver.resolve("a")
    resolver.clear()
    resolver.resolve("a")
    assert len(decoder.calls) == 2


def test_decode_image_returns_rgba_pixels(tmp_path):
    icon = save_png(tmp_path / "red.png", size=(4, 3))
    bitmap = decode_image(str(icon), 64)
    assert (bitmap.width, bitmap.height) == (4, 3)
    assert len(bitmap.pixels) == 4 * 3 * 4
    assert bitmap.pixels[:4] == b"\xff\x00\x00\xff"


def test_decode_image_shrinks_large_images(tmp_path):
    icon = save_png(tmp_path / "big.png", size=(256, 128))
    bitmap = decode_image(str(icon), 64)
    assert (bitmap.width, bitmap.height) == (64, 32)
    assert len(bitmap.pixels) == 64 * 32 * 4


def test_decode_image_converts_palette_images(tmp_path):
    path = tmp_path / "palette.png"
    Image.new("P", (2, 2)).save(path)
    bitmap = decode_image(str(path), 64)
    assert len(bitmap.pixels) == 2 * 2 * 4


@pytest.mark.parametrize("content", [b"", b"not an image", b"<svg xmlns='http://www.w3.org/2000/svg'/>"])
def test_decode_image_rejects_unreadable_data(tmp_path, content):
    path = tmp_path / "bad.png"
    path.write_bytes(content)
    with pytest.raises(DecodeFailure):
        decode_image(str(path), 64)


def test_decode_image_rejects_missing_file(tmp_path):
    with pytest.raises(DecodeFailure):
        decode_image(str(tmp_path / "missing.png"), 64)


def test_resolver_end_to_end_with_theme_and_pillow(tmp_path):
    icon = save_png(tmp_path / "icons" / "editor.png", size=(64, 64))
    lookup_calls = []

    def lookup(name, size):
        lookup_calls.append((name, size))
        return str(icon) if name == "editor" else None

    resolver = IconResolver(theme_lookup=lookup)
    bitmap = resolver.resolve("editor")
    assert (bitmap.width, bitmap.height) == (64, 64)
    assert lookup_calls == [("editor", 64)]


def test_bare_relative_file_is_decoded_without_theme_lookup(tmp_path, monkeypatch):
    save_png(tmp_path / "icon.png")
    monkeypatch.chdir(tmp_path)
    decoder = CountingDecoder()

    def lookup_must_not_run(name, size):
        raise AssertionError("theme lookup used for an existing file")

    resolver = IconResolver(theme_lookup=lookup_must_not_run, decoder=decoder)
    assert resolver.resolve("icon.png") is not None
    assert decoder.calls == ["icon.png"]


def test_name_with_separator_that_is_not_a_file_uses_theme_lookup():
    decoder = CountingDecoder()
    resolver = IconResolver(theme_lookup=lookup_everything, decoder=decoder)
    assert resolver.resolve("apps/firefox") is not None
    assert decoder.calls == ["/themes/apps/firefox-64.png"]


def test_without_theme_lookup_only_files_resolve(tmp_path):
    icon = save_png(tmp_path / "icon.png")
    resolver = IconResolver(decoder=CountingDecoder())
    assert resolver.resolve("firefox") is None
    assert resolver.resolve(str(icon)) is not None

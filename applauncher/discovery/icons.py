import os
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple
import structlog
from PIL import Image
from applauncher.core.errors import DecodeFailure

DEFAULT_ICON_SIZE = 64


@dataclass(frozen=True)
class Bitmap:
    """Decoded icon pixels: RGBA8, row-major, `width * height * 4` bytes."""

    width: int
    height: int
    pixels: bytes


def decode_image(path: str, size: int = DEFAULT_ICON_SIZE) -> Bitmap:
    """
    Decodes an image file to RGBA pixels, shrinking it to fit `size` x `size`
    when it is larger.
    Raises:
        DecodeFailure: The file is missing, unreadable, corrupt, or in a
            format Pillow cannot read (SVG included).
    """
    try:
        with Image.open(path) as img:
            rgba = img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeFailure(path, str(e)) from e
    if size and (rgba.width > size or rgba.height > size):
        rgba.thumbnail((size, size), Image.Resampling.LANCZOS)
    return Bitmap(width=rgba.width, height=rgba.height, pixels=rgba.tobytes())


ThemeLookup = Callable[[str, int], Optional[str]]
Decoder = Callable[[str, int], Optional[Bitmap]]


class IconResolver:
    """
    Maps an icon reference, either a file path or a logical theme name, to
    decoded pixels. Results are memoized by the exact reference string, so a
    reference is decoded at most once while it stays cached.
    """

    def __init__(
        self,
        theme_lookup: Optional[ThemeLookup] = None,
        decoder: Decoder = decode_image,
        size: int = DEFAULT_ICON_SIZE,
        cache_failures: bool = True,
        max_entries: int = 0,
        logger: Any = None,
    ):
        """
        Args:
            theme_lookup: Resolves a logical name and pixel size to a file path.
                Without one, only references naming an existing file resolve.
            decoder: Turns a file path into a Bitmap, raising DecodeFailure.
            size: Preferred pixel size passed to the lookup and the decoder.
            cache_failures: Also remember references that could not be resolved.
            max_entries: Least-recently-used bound on the cache; 0 is unbounded.
        """
        self.logger = logger or structlog.get_logger()
        self.theme_lookup = theme_lookup
        self.decoder = decoder
        self.size = size
        self.cache_failures = cache_failures
        self.max_entries = max_entries
        self._cache: "OrderedDict[str, Optional[Bitmap]]" = OrderedDict()
        self._inflight: Dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, reference: str) -> bool:
        with self._lock:
            return reference in self._cache

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def _locate(self, reference: str) -> Optional[str]:
        path = os.path.expanduser(reference)
        if os.path.isfile(path):
            return path
        if self.theme_lookup is None:
            return None
        return self.theme_lookup(reference, self.size)

    def _load(self, reference: str) -> Optional[Bitmap]:
        path = self._locate(reference)
        if path is None:
            self.logger.debug(f"Icon not found: {reference}")
            return None
        try:
            return self.decoder(path, self.size)
        except DecodeFailure as e:
            self.logger.debug(f"Icon decode failed for {reference}: {e}")
            return None

    def peek(self, reference: Optional[str]) -> Tuple[bool, Optional[Bitmap]]:
        """
        Returns (cached, bitmap) without loading anything, so a UI thread can
        decide whether to resolve in the background.
        """
        if not reference:
            return True, None
        with self._lock:
            if reference in self._cache:
                return True, self._cache[reference]
            return False, None

    def _store(self, reference: str, bitmap: Optional[Bitmap]) -> None:
        if bitmap is None and not self.cache_failures:
            return
        self._cache[reference] = bitmap
        if self.max_entries and len(self._cache) > self.max_entries:
            self._cache.popitem(last=False)

    def resolve(self, reference: Optional[str]) -> Optional[Bitmap]:
        """
        Returns the decoded icon for `reference`, or None when it cannot be
        found or decoded; the caller shows a placeholder glyph instead.

        Concurrent requests for the same reference wait for the first one
        instead of decoding again. The lock is not held while decoding.
        """
        if not reference:
            return None
        with self._lock:
            if reference in self._cache:
                self._cache.move_to_end(reference)
                return self._cache[reference]
            pending = self._inflight.get(reference)
            if pending is None:
                pending = self._inflight[reference] = threading.Event()
                owner = True
            else:
                owner = False
        if not owner:
            pending.wait()
            with self._lock:
                return self._cache.get(reference)
        bitmap = None
        try:
            bitmap = self._load(reference)
        finally:
            with self._lock:
                self._store(reference, bitmap)
                del self._inflight[reference]
            pending.set()
        return bitmap

    def prefetch(self, references: Iterable[Optional[str]]) -> int:
        """Resolves every reference ahead of display. Returns how many decoded."""
        return sum(1 for ref in references if self.resolve(ref) is not None)

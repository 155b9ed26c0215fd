import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gdk, GLib, Gtk  # pyright: ignore
import threading
from typing import Any, Callable, Optional
from applauncher.discovery.icons import Bitmap

LOOKUP_TIMEOUT = 5.0


def idle_scheduler(func: Callable[[], Any]) -> None:
    """Runs `func` once on the GTK main loop."""

    def wrapper():
        func()
        return GLib.SOURCE_REMOVE

    GLib.idle_add(wrapper)


def bitmap_to_texture(bitmap: Bitmap) -> Gdk.Texture:
    """Uploads RGBA8 pixels into a texture a Gtk.Image can show."""
    return Gdk.MemoryTexture.new(
        bitmap.width,
        bitmap.height,
        Gdk.MemoryFormat.R8G8B8A8,
        GLib.Bytes.new(bitmap.pixels),
        bitmap.width * 4,
    )


class GtkIconThemeLookup:
    """
    Resolves a logical icon name to a file with the display's Gtk.IconTheme.

    Gtk.IconTheme belongs to the GTK thread. Calls from worker threads are
    forwarded to the main loop and wait for the answer, so the icon resolver
    can keep decoding off the GTK thread.
    """

    def __init__(self, theme_name: str = "", display=None, logger=None):
        self.theme_name = theme_name
        self.display = display
        self.logger = logger
        self._icon_theme = None

    @property
    def icon_theme(self) -> Gtk.IconTheme:
        if self._icon_theme is None:
            display = self.display or Gdk.Display.get_default()
            if self.theme_name:
                self._icon_theme = Gtk.IconTheme(
                    display=display, theme_name=self.theme_name
                )
            else:
                self._icon_theme = Gtk.IconTheme.get_for_display(display)  # pyright: ignore
        return self._icon_theme

    def lookup_in_gtk_thread(self, name: str, size: int) -> Optional[str]:
        if not self.icon_theme.has_icon(name):
            return None
        paintable = self.icon_theme.lookup_icon(
            name, None, size, 1, Gtk.TextDirection.NONE, 0
        )
        icon_file = paintable.get_file() if paintable else None
        return icon_file.get_path() if icon_file else None

    def __call__(self, name: str, size: int) -> Optional[str]:
        if GLib.MainContext.default().is_owner():
            return self.lookup_in_gtk_thread(name, size)
        done = threading.Event()
        result = {}

        def run():
            try:
                result["path"] = self.lookup_in_gtk_thread(name, size)
            finally:
                done.set()
            return GLib.SOURCE_REMOVE

        GLib.idle_add(run)
        # The main loop may already be gone when the window closes.
        if not done.wait(LOOKUP_TIMEOUT):
            if self.logger:
                self.logger.debug(f"Icon theme lookup timed out: {name}")
            return None
        return result.get("path")

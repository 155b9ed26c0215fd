from typing import Dict, List, Optional
from applauncher.ui.gtk_helpers import (
    GtkIconThemeLookup,
    bitmap_to_texture,
    idle_scheduler,
)
from gi.repository import Gtk  # pyright: ignore
from applauncher.core.context import LauncherContext, build_context
from applauncher.core.errors import LaunchError
from applauncher.discovery.desktop_entry import ApplicationRecord
from applauncher.discovery.icons import Bitmap
from applauncher.discovery.registry import filter_records
from applauncher.discovery.scanner import ScanResult
from applauncher.shared.config_handler import ConfigHandler

PLACEHOLDER_GLYPH = "📄"


class LauncherWindow(Gtk.ApplicationWindow):
    """
    Search box, application list and a status line. The list is rebuilt from
    a registry snapshot whenever the search text changes or a scan finishes.
    """

    def __init__(self, application: Gtk.Application, context: LauncherContext):
        super().__init__(application=application)
        self.context = context
        self.logger = context.logger
        self.icon_size = int(context.setting(["window", "icon_display_size"], 24))
        self._icon_slots: Dict[str, List[Gtk.Box]] = {}
        self._pending_icons = set()
        self.set_title(context.setting(["window", "title"], "App Launcher"))
        self.set_default_size(
            int(context.setting(["window", "width"], 400)),
            int(context.setting(["window", "height"], 300)),
        )
        self._build_ui()
        self.connect("close-request", self._on_close_request)

    def _build_ui(self) -> None:
        vbox = Gtk.Box.new(Gtk.Orientation.VERTICAL, 6)
        vbox.set_margin_top(8)
        vbox.set_margin_bottom(8)
        vbox.set_margin_start(8)
        vbox.set_margin_end(8)

        heading = Gtk.Label.new("Select an App to Launch")
        heading.add_css_class("title-3")
        heading.set_halign(Gtk.Align.START)
        vbox.append(heading)

        self.search_entry = Gtk.SearchEntry.new()
        self.search_entry.set_placeholder_text("Search…")
        self.search_entry.connect("search-changed", self._on_search_changed)
        self.search_entry.connect("activate", self._on_search_activate)
        vbox.append(self.search_entry)

        self.listbox = Gtk.ListBox.new()
        self.listbox.set_selection_mode(Gtk.SelectionMode.SINGLE)
        self.listbox.connect("row-activated", self._on_row_activated)
        scrolled = Gtk.ScrolledWindow.new()
        scrolled.set_vexpand(True)
        scrolled.set_child(self.listbox)
        vbox.append(scrolled)

        self.status_label = Gtk.Label.new("Loading applications…")
        self.status_label.set_halign(Gtk.Align.START)
        self.status_label.set_wrap(True)
        vbox.append(self.status_label)

        self.set_child(vbox)

    def visible_records(self):
        return filter_records(
            self.context.registry.snapshot(), self.search_entry.get_text()
        )

    def refresh(self) -> None:
        """Rebuilds the list for the current snapshot and search text."""
        while child := self.listbox.get_first_child():
            self.listbox.remove(child)
        self._icon_slots.clear()
        for record in self.visible_records():
            self.listbox.append(self._create_row(record))

    def _create_row(self, record: ApplicationRecord) -> Gtk.ListBoxRow:
        row = Gtk.ListBoxRow.new()
        row.record = record  # pyright: ignore
        hbox = Gtk.Box.new(Gtk.Orientation.HORIZONTAL, 8)
        slot = Gtk.Box.new(Gtk.Orientation.HORIZONTAL, 0)
        slot.set_size_request(self.icon_size, self.icon_size)
        hbox.append(slot)
        label = Gtk.Label.new(record.name)
        label.set_halign(Gtk.Align.START)
        label.set_tooltip_text(record.command)
        hbox.append(label)
        row.set_child(hbox)
        self._fill_icon_slot(slot, record.icon)
        return row

    def _fill_icon_slot(self, slot: Gtk.Box, reference: Optional[str]) -> None:
        cached, bitmap = self.context.icons.peek(reference)
        if cached:
            self._set_slot_icon(slot, bitmap)
            return
        self._set_slot_icon(slot, None)
        self._icon_slots.setdefault(reference, []).append(slot)
        if reference in self._pending_icons:
            return
        self._pending_icons.add(reference)
        self.context.concurrency.run_with_callback(
            self.context.icons.resolve,
            lambda bmp, ref=reference: self._on_icon_resolved(ref, bmp),
            reference,
        )

    def _set_slot_icon(self, slot: Gtk.Box, bitmap: Optional[Bitmap]) -> None:
        while child := slot.get_first_child():
            slot.remove(child)
        if bitmap is None:
            slot.append(Gtk.Label.new(PLACEHOLDER_GLYPH))
            return
        image = Gtk.Image.new_from_paintable(bitmap_to_texture(bitmap))
        image.set_pixel_size(self.icon_size)
        slot.append(image)

    def _on_icon_resolved(self, reference: str, bitmap: Optional[Bitmap]) -> None:
        self._pending_icons.discard(reference)
        if bitmap is None:
            return
        for slot in self._icon_slots.pop(reference, []):
            self._set_slot_icon(slot, bitmap)

    def on_scan_finished(self, result: ScanResult) -> None:
        self.status_label.set_text(f"{len(result.records)} applications")
        self.refresh()

    def _on_search_changed(self, _entry) -> None:
        self.refresh()

    def _on_search_activate(self, _entry) -> None:
        row = self.listbox.get_row_at_index(0)
        if row is not None:
            self.launch(row.record)  # pyright: ignore

    def _on_row_activated(self, _listbox, row) -> None:
        self.launch(row.record)

    def launch(self, record: ApplicationRecord) -> bool:
        """Starts the record's command and reports the outcome in the status line."""
        self.status_label.remove_css_class("error")
        self.status_label.remove_css_class("success")
        try:
            self.context.runner.launch(record.command)
        except LaunchError as e:
            self.logger.error(f"Launch of {record.name} failed: {e}")
            self.status_label.set_text(f"Failed to launch: {e}")
            self.status_label.add_css_class("error")
            return False
        self.status_label.set_text(f"Launching: {record.command}")
        self.status_label.add_css_class("success")
        return True

    def _on_close_request(self, *_):
        self.context.concurrency.cancel_pending()
        return False


class LauncherApplication(Gtk.Application):
    def __init__(self, config_handler: ConfigHandler, logger, application_id=None):
        super().__init__(application_id=application_id or "org.applauncher.Launcher")
        self.logger = logger
        self.context = build_context(
            config_handler,
            logger,
            main_thread_scheduler=idle_scheduler,
            theme_lookup=GtkIconThemeLookup(
                theme_name=config_handler.get_root_setting(["icons", "theme"], ""),
                logger=logger,
            ),
        )
        self.window: Optional[LauncherWindow] = None
        self.connect("activate", self.on_activate)

    def on_activate(self, *_):
        if self.window is None:
            self.window = LauncherWindow(self, self.context)
            self.context.loader.start(self.window.on_scan_finished)
        self.window.present()

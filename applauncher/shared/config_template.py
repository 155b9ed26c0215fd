default_config = {
    "_section_hint": (
        "General configuration settings for applauncher, a searchable "
        "launcher for installed desktop applications."
    ),
    "discovery": {
        "_section_hint": "Where and how application descriptors are found.",
        "search_paths": [],
        "search_paths_hint": (
            "Directories to scan for descriptors, in priority order. The first "
            "descriptor with a given id wins. If left empty, "
            "$XDG_DATA_HOME/applications and every $XDG_DATA_DIRS/*/applications "
            "are used."
        ),
        "recursive": True,
        "recursive_hint": "Descend into subdirectories of each search path.",
        "extension": ".desktop",
        "extension_hint": "File extension that marks a descriptor.",
        "locales": [],
        "locales_hint": (
            "Preferred locales for localized names (e.g. 'pt_BR', 'pt'). "
            "If left empty, they are read from LANGUAGE, LC_ALL, LC_MESSAGES and LANG."
        ),
    },
    "icons": {
        "_section_hint": "Icon lookup and caching.",
        "size": 64,
        "size_hint": "Preferred icon size (in pixels) requested from the icon theme.",
        "theme": "",
        "theme_hint": "GTK icon theme used by the window; empty uses the desktop's theme.",
        "cache_failures": True,
        "cache_failures_hint": (
            "Remember icons that failed to load so they are not retried "
            "for the lifetime of the process."
        ),
        "max_cache_entries": 0,
        "max_cache_entries_hint": (
            "Upper bound on decoded icons kept in memory; the least recently "
            "used are evicted first. 0 keeps every icon."
        ),
        "prefetch": False,
        "prefetch_hint": "Decode every icon in the background right after a scan.",
    },
    "window": {
        "_section_hint": "Launcher window settings.",
        "title": "App Launcher",
        "title_hint": "Window title.",
        "width": 400,
        "width_hint": "Default window width in pixels.",
        "height": 300,
        "height_hint": "Default window height in pixels.",
        "icon_display_size": 24,
        "icon_display_size_hint": "Size (in pixels) icons are drawn at in the list.",
    },
    "logging": {
        "_section_hint": "Log output settings.",
        "level": "INFO",
        "level_hint": "One of DEBUG, INFO, WARNING, ERROR.",
    },
}

from dataclasses import dataclass
from typing import Any, Callable, Optional
from applauncher.discovery.icons import IconResolver, ThemeLookup
from applauncher.discovery.loader import DiscoveryLoader
from applauncher.discovery.registry import AppRegistry
from applauncher.discovery.scanner import AppScanner
from applauncher.shared.command_runner import CommandRunner
from applauncher.shared.concurrency_helper import ConcurrencyHelper
from applauncher.shared.config_handler import ConfigHandler


@dataclass
class LauncherContext:
    """The owned state and services handed to the UI or the command line."""

    config_handler: ConfigHandler
    registry: AppRegistry
    icons: IconResolver
    loader: DiscoveryLoader
    runner: CommandRunner
    concurrency: ConcurrencyHelper
    logger: Any

    def setting(self, key_path, default=None):
        return self.config_handler.get_root_setting(key_path, default)


def build_context(
    config_handler: ConfigHandler,
    logger: Any,
    main_thread_scheduler: Optional[Callable] = None,
    theme_lookup: Optional[ThemeLookup] = None,
) -> LauncherContext:
    """
    Wires scanner, registry, icon resolver and command runner from the
    configuration.
    Args:
        config_handler: Source of every setting.
        logger: Shared logger.
        main_thread_scheduler: Runs a callable on the UI thread (GLib.idle_add under GTK).
        theme_lookup: Icon theme capability; without it only icon file paths resolve.
    """
    get = config_handler.get_root_setting
    scanner = AppScanner(
        search_paths=get(["discovery", "search_paths"], []),
        locales=get(["discovery", "locales"], []),
        recursive=bool(get(["discovery", "recursive"], True)),
        extension=get(["discovery", "extension"], ".desktop"),
        logger=logger,
    )
    icons = IconResolver(
        theme_lookup=theme_lookup,
        size=int(get(["icons", "size"], 64)),
        cache_failures=bool(get(["icons", "cache_failures"], True)),
        max_entries=int(get(["icons", "max_cache_entries"], 0)),
        logger=logger,
    )
    registry = AppRegistry()
    concurrency = ConcurrencyHelper(logger, main_thread_scheduler=main_thread_scheduler)
    loader = DiscoveryLoader(
        scanner,
        registry,
        concurrency=concurrency,
        icon_resolver=icons,
        prefetch_icons=bool(get(["icons", "prefetch"], False)),
        logger=logger,
    )
    return LauncherContext(
        config_handler=config_handler,
        registry=registry,
        icons=icons,
        loader=loader,
        runner=CommandRunner(logger),
        concurrency=concurrency,
        logger=logger,
    )

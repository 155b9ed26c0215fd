from concurrent.futures import Future
from typing import Any, Callable, Optional, Sequence
import structlog
from applauncher.discovery.desktop_entry import ApplicationRecord
from applauncher.discovery.icons import IconResolver
from applauncher.discovery.registry import AppRegistry
from applauncher.discovery.scanner import AppScanner, ScanResult
from applauncher.shared.concurrency_helper import ConcurrencyHelper


class DiscoveryLoader:
    """
    Runs a discovery scan on the background executor and publishes the result
    to the registry in one swap. The UI keeps reading the previous (initially
    empty) list until then.
    """

    def __init__(
        self,
        scanner: AppScanner,
        registry: AppRegistry,
        concurrency: Optional[ConcurrencyHelper] = None,
        icon_resolver: Optional[IconResolver] = None,
        prefetch_icons: bool = False,
        logger: Any = None,
    ):
        self.logger = logger or structlog.get_logger()
        self.scanner = scanner
        self.registry = registry
        self.concurrency = concurrency or ConcurrencyHelper(self.logger)
        self.icon_resolver = icon_resolver
        self.prefetch_icons = prefetch_icons
        self.last_result: Optional[ScanResult] = None

    def load(self) -> ScanResult:
        """Scans synchronously and replaces the registry contents."""
        result = self.scanner.scan()
        generation = self.registry.replace(result.records)
        self.last_result = result
        self.logger.debug(f"Published application list generation {generation}")
        return result

    def warm_icons(self, records: Sequence[ApplicationRecord]) -> int:
        if self.icon_resolver is None:
            return 0
        decoded = self.icon_resolver.prefetch(r.icon for r in records)
        self.logger.debug(f"Prefetched {decoded} icons")
        return decoded

    def start(
        self, on_loaded: Optional[Callable[[ScanResult], None]] = None
    ) -> Future:
        """
        Starts a scan in the background. `on_loaded` runs on the main thread
        once the new list is visible in the registry.
        """

        def finished(result: ScanResult) -> None:
            if self.prefetch_icons:
                self.concurrency.run_in_thread(self.warm_icons, result.records)
            if on_loaded:
                on_loaded(result)

        return self.concurrency.run_with_callback(self.load, finished)

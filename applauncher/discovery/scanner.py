import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union
import structlog
from applauncher.core.errors import MissingField
from applauncher.discovery.desktop_entry import (
    ApplicationRecord,
    get_languages_from_env,
    parse_desktop_entry,
)
from applauncher.shared.path_handler import PathHandler


@dataclass(frozen=True)
class SkippedDescriptor:
    path: str
    reason: str


@dataclass
class ScanResult:
    """Valid records in discovery order, plus the descriptors that were dropped."""

    records: List[ApplicationRecord] = field(default_factory=list)
    skipped: List[SkippedDescriptor] = field(default_factory=list)


def default_search_paths(path_handler: Optional[PathHandler] = None) -> List[Path]:
    """$XDG_DATA_HOME/applications followed by each $XDG_DATA_DIRS/*/applications."""
    return (path_handler or PathHandler()).get_search_dirs("applications")


class AppScanner:
    """
    Handles the discovery and parsing of desktop application descriptors.

    Attributes:
        search_paths (List[Path]): Directories to scan, in priority order.
        locales (List[str]): Locale preference used for localized names.
    """

    def __init__(
        self,
        search_paths: Optional[Sequence[Union[str, Path]]] = None,
        locales: Optional[Sequence[str]] = None,
        recursive: bool = True,
        extension: str = ".desktop",
        logger: Any = None,
    ):
        self.logger = logger or structlog.get_logger()
        if search_paths:
            self.search_paths = [Path(p).expanduser() for p in search_paths]
        else:
            self.search_paths = default_search_paths()
        self.locales = list(locales) if locales else get_languages_from_env()
        self.recursive = recursive
        self.extension = extension

    def _iter_descriptors(self, root: Path) -> Iterator[Tuple[str, str]]:
        """Yields (desktop_id, file_path) for every descriptor under `root`, sorted."""
        if self.recursive:
            for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
                dirnames.sort()
                rel_dir = os.path.relpath(dirpath, root)
                for file_name in sorted(filenames):
                    if not file_name.endswith(self.extension):
                        continue
                    rel = file_name if rel_dir == "." else os.path.join(rel_dir, file_name)
                    yield rel.replace(os.sep, "-"), os.path.join(dirpath, file_name)
        else:
            for file_name in sorted(os.listdir(root)):
                file_path = os.path.join(root, file_name)
                if file_name.endswith(self.extension) and os.path.isfile(file_path):
                    yield file_name, file_path

    def _read(self, file_path: str) -> str:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()

    def scan(self) -> ScanResult:
        """
        Scans the search paths and parses every descriptor found.

        Missing directories yield nothing. A descriptor id already seen in an
        earlier directory is ignored. Unreadable or invalid descriptors are
        recorded in `ScanResult.skipped` and left out of the records.
        """
        result = ScanResult()
        seen = set()
        for root in self.search_paths:
            if not root.is_dir():
                continue
            try:
                descriptors = list(self._iter_descriptors(root))
            except OSError as e:
                self.logger.warning(f"Cannot list {root}: {e}")
                continue
            for desktop_id, file_path in descriptors:
                if desktop_id in seen:
                    continue
                seen.add(desktop_id)
                try:
                    text = self._read(file_path)
                except OSError as e:
                    result.skipped.append(SkippedDescriptor(file_path, str(e)))
                    continue
                try:
                    record = parse_desktop_entry(
                        text, self.locales, desktop_id=desktop_id, path=file_path
                    )
                except MissingField as e:
                    result.skipped.append(SkippedDescriptor(file_path, str(e)))
                    continue
                result.records.append(record)
        self.logger.info(
            f"Discovery finished: {len(result.records)} applications, {len(result.skipped)} descriptors skipped"
        )
        for skipped in result.skipped:
            self.logger.debug(f"Skipped {skipped.path}: {skipped.reason}")
        return result

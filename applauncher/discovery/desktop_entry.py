"""
Parsing of freedesktop desktop-entry descriptors into ApplicationRecord.

Only the Name, Exec and Icon keys are interpreted. The Exec value is
sanitized here, once, so a stored record always carries a launch-ready
command.
"""

import os
import shlex
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from applauncher.core.errors import MissingField
from applauncher.discovery.sanitizer import sanitize_command

MAIN_GROUP = "Desktop Entry"

_ESCAPES = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\"}


@dataclass(frozen=True)
class ApplicationRecord:
    """One launchable application, as shown in the list."""

    name: str
    command: str
    icon: Optional[str] = None
    desktop_id: str = field(default="", compare=False)
    path: Optional[str] = field(default=None, compare=False)


def _unescape(value: str) -> str:
    if "\\" not in value:
        return value
    out = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        out.append(_ESCAPES.get(nxt, "\\" + nxt))
    return "".join(out)


def read_keys(text: str) -> Dict[str, str]:
    """
    Collects the Key=Value pairs of the main group.

    Keys before any group header are kept as well, so a bare list of pairs
    is accepted. Comments, blank lines and lines that are not a pair are
    skipped. A repeated key keeps its last value.
    """
    keys: Dict[str, str] = {}
    group: Optional[str] = None
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("[") and line.endswith("]"):
            group = line[1:-1].strip()
            continue
        if group not in (None, MAIN_GROUP):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        keys[key] = _unescape(value.strip())
    return keys


def localized_value(
    keys: Dict[str, str], key: str, locales: Optional[Sequence[str]] = None
) -> Optional[str]:
    """Returns `key[locale]` for the first locale present, else the bare `key`."""
    for locale in locales or ():
        value = keys.get(f"{key}[{locale}]")
        if value:
            return value
    return keys.get(key)


def parse_desktop_entry(
    text: str,
    locales: Optional[Sequence[str]] = None,
    desktop_id: str = "",
    path: Optional[str] = None,
) -> ApplicationRecord:
    """
    Turns the raw text of one descriptor into an ApplicationRecord.
    Args:
        text: The descriptor contents.
        locales: Locale names in preference order, used to pick `Name[<locale>]`.
        desktop_id: Identifier of the descriptor, kept on the record.
        path: Source file, kept on the record and used in error messages.
    Returns:
        The normalized record.
    Raises:
        MissingField: Name or Exec is absent, empty, or Exec holds nothing
            but field codes or an empty program name.
    """
    keys = read_keys(text)
    name = localized_value(keys, "Name", locales)
    if not name:
        raise MissingField("Name", path)
    exec_value = keys.get("Exec")
    if not exec_value:
        raise MissingField("Exec", path)
    command = sanitize_command(exec_value)
    if not command or not _names_a_program(command):
        raise MissingField("Exec", path)
    return ApplicationRecord(
        name=name,
        command=command,
        icon=keys.get("Icon") or None,
        desktop_id=desktop_id,
        path=path,
    )


def _names_a_program(command: str) -> bool:
    try:
        argv = shlex.split(command)
    except ValueError:
        # Unbalanced quoting surfaces as a SpawnFailure at launch.
        return True
    return bool(argv and argv[0])


def _expand_locale(value: str) -> List[str]:
    """
    Expands 'de_DE.UTF-8@euro' into the match order used for localized keys:
    de_DE@euro, de_DE, de@euro, de.
    """
    value = value.strip()
    modifier = ""
    if "@" in value:
        value, modifier = value.split("@", 1)
        modifier = "@" + modifier
    value = value.split(".", 1)[0]
    if not value or value in ("C", "POSIX"):
        return []
    lang, _, country = value.partition("_")
    variants = []
    if country:
        if modifier:
            variants.append(f"{lang}_{country}{modifier}")
        variants.append(f"{lang}_{country}")
    if modifier:
        variants.append(f"{lang}{modifier}")
    variants.append(lang)
    return variants


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def get_languages_from_env(environ: Optional[Dict[str, str]] = None) -> List[str]:
    """
    Builds the locale preference list from LANGUAGE (colon separated), then
    the first of LC_ALL, LC_MESSAGES and LANG that is set.
    """
    env = os.environ if environ is None else environ
    raw: List[str] = []
    language = env.get("LANGUAGE")
    if language:
        raw.extend(language.split(":"))
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        if env.get(var):
            raw.append(env[var])
            break
    expanded: List[str] = []
    for item in raw:
        expanded.extend(_expand_locale(item))
    return _unique(expanded)

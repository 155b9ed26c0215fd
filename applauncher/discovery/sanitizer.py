from typing import Tuple

# Desktop-entry field codes. They stand for files, URLs, the icon or the
# descriptor location and only mean something to a full desktop environment.
FIELD_CODES: Tuple[str, ...] = (
    "%u",
    "%U",
    "%f",
    "%F",
    "%d",
    "%D",
    "%n",
    "%N",
    "%i",
    "%c",
    "%k",
)


def has_field_code(token: str) -> bool:
    return any(code in token for code in FIELD_CODES)


def sanitize_command(command: str) -> str:
    """
    Removes every whitespace-delimited token that carries a field code and
    joins the remaining tokens with single spaces, keeping their order.

    >>> sanitize_command("vlc %U --fullscreen")
    'vlc --fullscreen'
    """
    return " ".join(part for part in command.split() if not has_field_code(part))

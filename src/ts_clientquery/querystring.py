"""TeamSpeak query-string encoding: escaping, ``key=value`` lines, and command payloads.

A line is a space-separated sequence of ``key=value`` tokens; a token without ``=`` is a
flag with an empty value. Values use TeamSpeak's own escaping, not URL encoding.
"""

from typing import Final

TERMINATOR: Final = "\n\r"

# Order matters: the backslash must be escaped first
_ESCAPE_MAP: Final[list[tuple[str, str]]] = [
    ("\\", r"\\"),
    ("/", r"\/"),
    (" ", r"\s"),
    ("|", r"\p"),
    ("\a", r"\a"),
    ("\b", r"\b"),
    ("\f", r"\f"),
    ("\n", r"\n"),
    ("\r", r"\r"),
    ("\t", r"\t"),
    ("\v", r"\v"),
]

_UNESCAPE_MAP: Final[dict[str, str]] = {escaped[1]: char for char, escaped in _ESCAPE_MAP}


def escape(raw: str) -> str:
    """Escape special characters for the query protocol."""
    for char, replacement in _ESCAPE_MAP:
        raw = raw.replace(char, replacement)
    return raw


def unescape(raw: str) -> str:
    """Reverse escape(). Unknown escape sequences are kept as-is."""
    if "\\" not in raw:
        return raw
    out: list[str] = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char == "\\" and i + 1 < len(raw) and raw[i + 1] in _UNESCAPE_MAP:
            out.append(_UNESCAPE_MAP[raw[i + 1]])
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def parse_line(line: str) -> dict[str, str]:
    """Parse one ``key=value key=value`` record into a dict of unescaped values."""
    result: dict[str, str] = {}
    for part in line.strip().split(" "):
        if not part:
            continue
        key, _, value = part.partition("=")
        result[key] = unescape(value)
    return result


def encode_line(fields: dict[str, object]) -> str:
    """Encode a mapping into one ``key=value`` record. The inverse of parse_line()."""
    return " ".join(f"{key}={escape(_to_wire(value))}" for key, value in fields.items())


def build_command(command: str, **params: str | int) -> str:
    """Build a terminated command payload with escaped parameter values."""
    parts = [command]
    parts.extend(f"{key}={escape(_to_wire(value))}" for key, value in params.items())
    return " ".join(parts) + TERMINATOR


def _to_wire(value: object) -> str:
    """Render a scalar the way the server does (booleans as 0/1)."""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)

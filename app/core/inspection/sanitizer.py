
import re

# CSI sequences, private mode sets, the Amiga "ESC[n p" code and SAUCE trailers.
_CONTROLS = re.compile(
    rb"\x1b\[[0-9;]*[a-zA-Z]"
    rb"|\x1b\[\?[0-9]+h"
    rb"|\x1b\[[0-9;]*[ ]p"
    rb"|SAUCE00.*",
    re.DOTALL,
)

# Cursor movement and positioning, which HTML rendering cannot reproduce.
_INCOMPATIBLE = re.compile(rb"\x1b\[\d*?[ABCDEFG]|\x1b\[\d+;\d+[Hf]")

EOF_MARKER = b"\x1a"
_WHITESPACE = b" \t\r\n\v\f"


def trim_bytes(data: bytes) -> bytes:
    """Removes trailing whitespace and a single MS-DOS end-of-file marker."""
    data = data.rstrip(_WHITESPACE)
    if data.endswith(EOF_MARKER):
        data = data[:-1].rstrip(_WHITESPACE)
    return data


def incompatible_ansi(data: bytes) -> bool:
    return any(_INCOMPATIBLE.search(line) for line in data.split(b"\n"))


def _clean(data: bytes) -> bytes:
    data = _CONTROLS.sub(b"", data)
    data = data.replace(b"\r\n", b"\n")
    data = data.replace(b"\x00", b" ")
    return trim_bytes(data)


def sanitize(data: bytes) -> bytes:
    """
    Strips control codes and trailers from legacy text.
    Repeats until the output no longer changes.
    """
    cleaned = _clean(data or b"")
    while True:
        again = _clean(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again


import logging
from enum import Enum

from app.core.inspection import signatures
from app.core.inspection.signatures import Signature

logger = logging.getLogger(__name__)

class TextEncoding(Enum):
    UTF8 = "utf-8"
    LATIN1 = "iso-8859-1"
    CP437 = "cp437"
    REJECT = "reject"

    @property
    def codec(self) -> str:
        """Python codec name, REJECT has none."""
        return {
            TextEncoding.UTF8: "utf-8",
            TextEncoding.LATIN1: "latin-1",
            TextEncoding.CP437: "cp437",
        }.get(self, "")


# Whitespace and ESC are common to every legacy text encoding.
_NEUTRAL_CONTROLS = frozenset({0x09, 0x0A, 0x0D, 0x1B})

# Block and box drawing characters of the IBM PC code page,
# repeated runs of these are used as borders in DOS text art.
_CP437_DRAWING = (0xDC, 0xDF, 0xCD, 0xC4, 0xB1, 0xDB)
_CP437_PATTERNS = tuple(bytes([b]) * 4 for b in _CP437_DRAWING)

TEXT_PLATFORMS = ("text", "textamiga")
_LATIN1_PLATFORMS = ("textamiga",)
_LATIN1_SECTIONS = ("appleii", "atarist")


def has_multibyte_utf8(data: bytes) -> bool:
    """True when the bytes are valid UTF-8 containing at least one multi-byte rune."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return len(text) < len(data)


def has_cp437_controls(data: bytes) -> bool:
    for b in data:
        if b in _NEUTRAL_CONTROLS:
            continue
        if b < 0x20 or 0x7F <= b <= 0x9F:
            return True
    return False


def has_cp437_patterns(data: bytes) -> bool:
    return any(pattern in data for pattern in _CP437_PATTERNS)


def detect_encoding(data: bytes) -> TextEncoding:
    """
    Guesses the encoding of cleaned text bytes.
    Returns UTF8, CP437 or LATIN1, the latter being the fallback when nothing is diagnostic.
    """
    if has_multibyte_utf8(data):
        return TextEncoding.UTF8
    if has_cp437_controls(data):
        return TextEncoding.CP437
    if has_cp437_patterns(data):
        return TextEncoding.CP437
    return TextEncoding.LATIN1


def classify_text(data: bytes) -> TextEncoding:
    """
    Rejects samples that are not renderable legacy text (UTF-16, UTF-32, binary),
    otherwise detects the encoding.
    """
    sign = signatures.classify_text(data)
    if sign in (Signature.UNKNOWN, Signature.UTF16_TEXT, Signature.UTF32_TEXT):
        logger.debug(f"Text sample rejected as {sign.label}")
        return TextEncoding.REJECT
    if sign == Signature.UTF8_TEXT:
        return TextEncoding.UTF8
    return detect_encoding(data)


def encoding_for(platform: str, section: str, magic: str, data: bytes) -> TextEncoding:
    """
    Chooses the encoding for an artifact, letting record metadata
    override the byte heuristics.
    """
    platform = (platform or "").strip().lower()
    section = (section or "").strip().lower()
    if platform in _LATIN1_PLATFORMS:
        return TextEncoding.LATIN1
    if section in _LATIN1_SECTIONS:
        return TextEncoding.LATIN1
    if "utf-8" in (magic or "").lower():
        return TextEncoding.UTF8
    return detect_encoding(data)

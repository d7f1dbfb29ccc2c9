
import pytest
from app.core.inspection.sanitizer import incompatible_ansi, sanitize, trim_bytes

SAUCE = b"\x1aSAUCE00Title of the art           Artist\x00\x00\x0519940101\x01\x02"

def test_strips_csi_sequences():
    data = b"\x1b[0;1;33mYellow\x1b[0m and \x1b[37mwhite\x1b[m"
    assert sanitize(data) == b"Yellow and white"

def test_strips_private_mode_and_amiga_codes():
    assert sanitize(b"\x1b[?7hwrap") == b"wrap"
    assert sanitize(b"\x1b[0 pAmiga text\x1b[1 p") == b"Amiga text"

def test_strips_sauce_trailer_and_eof():
    data = b"Greetings to all\r\n" + SAUCE
    assert sanitize(data) == b"Greetings to all"

def test_normalises_newlines_and_nul():
    assert sanitize(b"one\r\ntwo\x00three\r\n") == b"one\ntwo three"

def test_trim_bytes_single_eof():
    assert trim_bytes(b"text  \r\n") == b"text"
    assert trim_bytes(b"text\r\n\x1a") == b"text"
    assert trim_bytes(b"text\x1a\x1a") == b"text\x1a"
    assert trim_bytes(b"") == b""

@pytest.mark.parametrize("data", [
    b"",
    b"plain",
    b"\x1b[\x1b[0mA",
    b"abc \x1a",
    b"abc\x1a\x1a\x1a",
    b"\x1b[0\x00p hidden",
    b"art\r\n" + SAUCE,
])
def test_sanitize_is_idempotent(data):
    once = sanitize(data)
    assert sanitize(once) == once

def test_incompatible_ansi_cursor_codes():
    assert incompatible_ansi(b"line one\n\x1b[5Aup")
    assert incompatible_ansi(b"\x1b[C")
    assert incompatible_ansi(b"\x1b[10;20Hpos")
    assert incompatible_ansi(b"\x1b[1;1f")

def test_colour_codes_are_compatible():
    assert not incompatible_ansi(b"\x1b[0;1;33mcolour\x1b[0m")
    assert not incompatible_ansi(b"plain text")

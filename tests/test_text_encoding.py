
import pytest
from app.core.inspection.encoding import (
    TextEncoding, classify_text, detect_encoding, encoding_for, has_multibyte_utf8,
)

def test_ascii_falls_back_to_latin1():
    assert detect_encoding(b"Hello world\nSecond line\n") == TextEncoding.LATIN1

def test_latin1_accents_without_cp437_markers():
    data = b"Gr\xfc\xdfe aus M\xfcnchen, \xe9t\xe9 \xa9 1992\n"
    assert detect_encoding(data) == TextEncoding.LATIN1
    assert classify_text(data) == TextEncoding.LATIN1

def test_utf8_multibyte():
    data = "Grüße aus München".encode("utf-8")
    assert has_multibyte_utf8(data)
    assert detect_encoding(data) == TextEncoding.UTF8
    assert not has_multibyte_utf8(b"plain ascii")

def test_cp437_box_drawing_runs():
    data = b"\xdb\xdb\xdb\xdb CRACKED BY \xdb\xdb\xdb\xdb\r\n"
    assert detect_encoding(data) == TextEncoding.CP437

def test_cp437_control_range():
    # 0x8x bytes are unassigned in ISO-8859-1 but are letters in CP437
    assert detect_encoding(b"Caf\x82 au lait") == TextEncoding.CP437
    assert detect_encoding(b"smiley \x01 face") == TextEncoding.CP437

def test_neutral_controls_are_ignored():
    assert detect_encoding(b"tab\there\r\nesc\x1b") == TextEncoding.LATIN1

def test_three_repeats_are_not_enough():
    assert detect_encoding(b"\xc4\xc4\xc4 not a border") == TextEncoding.LATIN1

@pytest.mark.parametrize("data", [
    b"\xff\xfeh\x00e\x00l\x00l\x00o\x00",
    b"\xfe\xff\x00h\x00e\x00l\x00l\x00o",
    b"\xff\xfe\x00\x00h\x00\x00\x00",
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\x0dIHDR\x01",
    b"",
])
def test_rejected_samples(data):
    assert classify_text(data) == TextEncoding.REJECT

def test_utf8_bom_is_utf8():
    assert classify_text(b"\xef\xbb\xbfhello") == TextEncoding.UTF8

def test_metadata_overrides():
    box = b"\xdb\xdb\xdb\xdb"
    assert encoding_for("textamiga", "", "", box) == TextEncoding.LATIN1
    assert encoding_for("dos", "atarist", "", box) == TextEncoding.LATIN1
    assert encoding_for("text", "", "UTF-8 Unicode text", b"abc") == TextEncoding.UTF8
    assert encoding_for("text", "", "", box) == TextEncoding.CP437

def test_codec_names():
    assert b"\xdb".decode(TextEncoding.CP437.codec) == "█"
    assert b"\xe9".decode(TextEncoding.LATIN1.codec) == "é"
    assert TextEncoding.REJECT.codec == ""

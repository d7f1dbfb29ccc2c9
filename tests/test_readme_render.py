
import zipfile

import pytest
from app.core.content_lister import list_content
from app.core.extraction_cache import ExtractionCache
from app.core.extractors.registry import ExtractorRegistry
from app.core.inspection.encoding import TextEncoding
from app.core.readme.render import (
    ArtifactPaths, ReadmeDecodeError, embed_readme, render_readme, render_text,
)
from app.core.readme.suggest import suggest_readme
from app.models.artifacts import ArtifactSource

SAUCE = b"\x1aSAUCE00Title of the art           Artist\x00\x00\x0519940101\x01\x02"

@pytest.fixture
def paths(tmp_path):
    dirs = {}
    for name in ("download", "preview", "thumbnail", "extra"):
        d = tmp_path / name
        d.mkdir()
        dirs[name] = str(d)
    return ArtifactPaths(
        download_dir=dirs["download"],
        preview_dir=dirs["preview"],
        thumbnail_dir=dirs["thumbnail"],
        extra_dir=dirs["extra"],
    )

def test_plain_ascii():
    result = render_text(b"Hello\r\nWide world\r\n")
    assert result.available
    assert result.encoding == TextEncoding.LATIN1
    assert result.latin1_text == "Hello\nWide world"
    assert result.cp437_text == result.latin1_text
    assert result.line_count == 2
    assert result.max_line_width == 10
    assert result.latin1_checked

def test_ansi_with_sauce_trailer():
    result = render_text(b"\x1b[0;1;33mHi\x1b[0m\r\n" + SAUCE)
    assert result.available
    assert result.latin1_text == "Hi"
    assert result.line_count == 1

def test_utf16_is_rejected():
    result = render_text(b"\xff\xfeh\x00i\x00")
    assert not result.available
    assert result.reason.startswith("unsupported")

def test_binary_is_rejected():
    result = render_text(b"\x89PNG\r\n\x1a\n\x00\x00\x00\x0dIHDR\x01\x02")
    assert not result.available

def test_incompatible_ansi():
    result = render_text(b"menu\n\x1b[5Aoverwrite")
    assert not result.available
    assert result.reason == "incompatible ANSI"

def test_latin1_replacements():
    result = render_text(b"caf\xe9\xa0soft\xadhyphen", platform="textamiga")
    assert result.encoding == TextEncoding.LATIN1
    assert result.latin1_text == "café soft-hyphen"
    assert result.latin1_checked
    assert not result.cp437_checked

def test_cp437_both_renderings():
    result = render_text(b"\xdb\xdb\xdb\xdb\xff ok")
    assert result.encoding == TextEncoding.CP437
    assert result.cp437_text == "████  ok"
    assert result.latin1_text == "ÛÛÛÛ  ok"
    assert result.cp437_checked

def test_utf8_decoded_once():
    text = "Grüße aus München"
    result = render_text(text.encode("utf-8"))
    assert result.encoding == TextEncoding.UTF8
    assert result.latin1_text == text
    assert result.cp437_text == text
    assert result.max_line_width == len(text)

def test_utf8_bom_is_stripped():
    result = render_text(b"\xef\xbb\xbfhello")
    assert result.encoding == TextEncoding.UTF8
    assert result.latin1_text == "hello"

def test_invalid_utf8_raises():
    with pytest.raises(ReadmeDecodeError):
        render_text(b"bad \xff\xfe bytes", magic="UTF-8 Unicode text")

def test_empty_text():
    result = render_text(b"")
    assert not result.available
    assert result.line_count == 0

def test_embed_readme():
    assert embed_readme(ArtifactSource(filename="art.ans", platform="ansi"))
    assert not embed_readme(ArtifactSource(filename="LOGO.RIP", platform="text"))
    assert not embed_readme(ArtifactSource(filename="manual.html", platform="markup"))
    assert not embed_readme(ArtifactSource(filename="manual.pdf", platform="pdf"))

def test_render_readme_skips():
    assert render_readme(ArtifactSource(filename="a.txt", no_readme=True)).reason == "no readme"
    assert render_readme(ArtifactSource(filename="a.rip")).reason == "unsupported format"
    assert render_readme(ArtifactSource(filename="", raw_bytes=None, uuid="x")).reason == "no filename"
    assert render_readme(ArtifactSource(filename="a.txt")).reason == "no uuid"

def test_render_readme_no_download(paths):
    result = render_readme(ArtifactSource(filename="a.txt", uuid="abc", platform="dos"), paths)
    assert result.no_download
    assert result.no_screenshot
    assert not result.available

def test_render_readme_text_download(paths):
    with open(f"{paths.download_dir}/abc", "wb") as f:
        f.write(b"From the download\r\n")
    result = render_readme(ArtifactSource(filename="a.txt", uuid="abc", platform="text"), paths)
    assert result.available
    assert result.latin1_text == "From the download"
    # text records are their own preview
    assert result.no_screenshot

def test_render_readme_prefers_extra(paths):
    with open(f"{paths.download_dir}/abc", "wb") as f:
        f.write(b"MZ binary")
    with open(f"{paths.extra_dir}/abc.txt", "wb") as f:
        f.write(b"Install with SETUP.EXE")
    with open(f"{paths.preview_dir}/abc.png", "wb") as f:
        f.write(b"\x89PNG\r\n\x1a\n")
    result = render_readme(ArtifactSource(filename="game.zip", uuid="abc", platform="dos"), paths)
    assert result.available
    assert result.latin1_text == "Install with SETUP.EXE"
    assert not result.no_screenshot
    assert not result.no_download

def test_render_readme_binary_download_without_extra(paths):
    with open(f"{paths.download_dir}/abc", "wb") as f:
        f.write(b"MZ binary")
    result = render_readme(ArtifactSource(filename="game.zip", uuid="abc", platform="dos"), paths)
    assert result.reason == "no readme"
    assert not result.no_download

def test_readme_from_extracted_zip(tmp_path):
    src = tmp_path / "release.zip"
    with zipfile.ZipFile(src, "w") as zf:
        zf.writestr("FILE_ID.DIZ", "short description")
        zf.writestr("RELEASE.NFO", "\xdb\xdb\xdb\xdb RELEASE \xdb\xdb\xdb\xdb\r\nEnjoy\r\n".encode("latin-1"))
        zf.writestr("GAME.EXE", b"MZ" + b"\x00" * 30)
    cache = ExtractionCache(
        registry=ExtractorRegistry({"extraction": {"external_tools": False}}),
        root=str(tmp_path / "scratch"),
    )
    outcome = cache.extract(str(src))
    listing = list_content(outcome.directory)
    names = [e.relative_path for e in listing.entries]

    readme = suggest_readme("release.zip", "", names)
    assert readme == "RELEASE.NFO"

    source = ArtifactSource(filename=readme, path=f"{outcome.directory}/{readme}")
    result = render_readme(source)
    assert result.encoding == TextEncoding.CP437
    assert result.cp437_text == "████ RELEASE ████\nEnjoy"
    assert result.line_count == 2

def test_missing_source_file_is_no_download(tmp_path):
    source = ArtifactSource(filename="gone.txt", platform="text", path=str(tmp_path / "gone.txt"))
    result = render_readme(source)
    assert not result.available
    assert result.reason == "no download"
    assert result.no_download

def test_unreadable_source_file(tmp_path):
    folder = tmp_path / "folder.txt"
    folder.mkdir()
    result = render_readme(ArtifactSource(filename="folder.txt", platform="text", path=str(folder)))
    assert not result.available
    assert result.reason == "unreadable"
    assert not result.no_download

def test_text_that_cleans_to_nothing_is_empty():
    result = render_text(b"\x1b[0m\x1b[1;33m\r\n")
    assert not result.available
    assert result.reason == "empty"
    assert result.latin1_text == ""

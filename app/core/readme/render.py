
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from app.core.inspection import signatures
from app.core.inspection.encoding import TEXT_PLATFORMS, TextEncoding, encoding_for
from app.core.inspection.sanitizer import incompatible_ansi, sanitize, trim_bytes
from app.core.inspection.signatures import Signature
from app.models.artifacts import ArtifactSource, ReadmeResult

logger = logging.getLogger(__name__)

NO_TEXT_PLATFORMS = ("markup", "pdf")
# RIPscrip, the BBS remote graphics protocol
REMOTE_GRAPHICS_EXT = ".rip"
REJECTED = (Signature.UNKNOWN, Signature.UTF16_TEXT, Signature.UTF32_TEXT)
UTF8_BOM = b"\xef\xbb\xbf"
SAUCE_ID = b"SAUCE00"
SCREENSHOT_EXTS = (".webp", ".png")

class ReadmeDecodeError(Exception):
    pass

@dataclass(frozen=True)
class ArtifactPaths:
    download_dir: str
    preview_dir: str = ""
    thumbnail_dir: str = ""
    extra_dir: str = ""

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ArtifactPaths":
        paths = config.get("paths", {})
        return cls(
            download_dir=paths.get("download_dir", ""),
            preview_dir=paths.get("preview_dir", ""),
            thumbnail_dir=paths.get("thumbnail_dir", ""),
            extra_dir=paths.get("extra_dir", ""),
        )


def embed_readme(source: ArtifactSource) -> bool:
    """False for records whose text is never rendered inline."""
    if Path(source.filename.strip().lower()).suffix == REMOTE_GRAPHICS_EXT:
        return False
    return source.platform.strip().lower() not in NO_TEXT_PLATFORMS


def render_readme(source: ArtifactSource, paths: Optional[ArtifactPaths] = None) -> ReadmeResult:
    """
    Loads, cleans and decodes the readme of an artifact.
    Missing or unsupported text is reported through ReadmeResult.reason.
    """
    if source.no_readme:
        return ReadmeResult(reason="no readme")
    if not embed_readme(source):
        return ReadmeResult(reason="unsupported format")

    no_screenshot = _no_screenshot(source, paths)
    data, reason, no_download = read_source(source, paths)
    if not data:
        return ReadmeResult(reason=reason or "empty", no_screenshot=no_screenshot, no_download=no_download)

    result = render_text(data, source.platform, source.section, source.magic)
    result.no_screenshot = no_screenshot
    result.no_download = no_download
    return result


def read_source(source: ArtifactSource, paths: Optional[ArtifactPaths]) -> Tuple[bytes, Optional[str], bool]:
    """
    Returns (bytes, reason, no_download).
    The readme asset in the extra directory is preferred over the download itself,
    which is only read for text platforms. A missing file gives "no download",
    any other read error gives "unreadable".
    """
    if source.raw_bytes is not None:
        return source.raw_bytes.replace(b"\x00", b" "), None, False
    if not source.filename.strip():
        return b"", "no filename", False
    if source.path:
        return _read(Path(source.path))
    if not source.uuid.strip():
        return b"", "no uuid", False
    if paths is None:
        return b"", "no download", True

    uuid = source.uuid.strip()
    extra = Path(paths.extra_dir) / f"{uuid}.txt" if paths.extra_dir else None
    download = Path(paths.download_dir) / uuid if paths.download_dir else None
    has_extra = extra is not None and extra.is_file()
    has_download = download is not None and download.is_file()
    if not has_extra and not has_download:
        logger.debug(f"No download or readme found for {uuid}")
        return b"", "no download", True

    if has_extra:
        return _read(extra)
    if source.platform.strip().lower() in TEXT_PLATFORMS:
        return _read(download)
    return b"", "no readme", False


def _read(path: Path) -> Tuple[bytes, Optional[str], bool]:
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.info(f"Readme source missing: {path}")
        return b"", "no download", True
    except OSError as e:
        logger.warning(f"Cannot read readme source {path}: {e}")
        return b"", "unreadable", False
    return data.replace(b"\x00", b" "), None, False


def _no_screenshot(source: ArtifactSource, paths: Optional[ArtifactPaths]) -> bool:
    if source.platform.strip().lower() in TEXT_PLATFORMS:
        return True
    if paths is None or not paths.preview_dir or not source.uuid.strip():
        return True
    preview = Path(paths.preview_dir)
    return not any((preview / f"{source.uuid.strip()}{ext}").is_file() for ext in SCREENSHOT_EXTS)


def render_text(data: bytes, platform: str = "", section: str = "", magic: str = "") -> ReadmeResult:
    """
    Produces both the ISO-8859-1 and the CP437 rendering of legacy text bytes,
    whichever encoding is detected, so the viewer can toggle between them.
    UTF-8 text is decoded once and used for both.
    Raises ReadmeDecodeError when text taken to be UTF-8 does not decode.
    """
    if not data:
        return ReadmeResult(reason="empty")
    # the binary SAUCE record fields are not part of the text sample
    trailer = data.find(SAUCE_ID)
    sign = signatures.classify_text(data[:trailer] if trailer > 0 else data)
    if sign in REJECTED:
        return ReadmeResult(reason=f"unsupported {sign.label}")

    trimmed = trim_bytes(data)
    if incompatible_ansi(trimmed):
        return ReadmeResult(reason="incompatible ANSI")
    cleaned = sanitize(trimmed)

    if sign == Signature.UTF8_TEXT:
        encoding = TextEncoding.UTF8
        cleaned = cleaned[len(UTF8_BOM):]
    else:
        encoding = encoding_for(platform, section, magic, cleaned)
    if not cleaned.strip():
        return ReadmeResult(reason="empty")

    result = ReadmeResult(available=True, encoding=encoding)
    if encoding == TextEncoding.UTF8:
        try:
            text = cleaned.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ReadmeDecodeError(f"readme is not valid UTF-8: {e}") from e
        result.latin1_text = result.cp437_text = text
        result.cp437_checked = True
        lines = text.split("\n")
    else:
        if encoding == TextEncoding.LATIN1:
            cleaned = cleaned.replace(b"\xa0", b" ").replace(b"\xad", b"-")
            result.latin1_checked = True
        else:
            cleaned = cleaned.replace(b"\xff", b" ")
            result.cp437_checked = True
        result.latin1_text = cleaned.decode("latin-1")
        result.cp437_text = cleaned.decode("cp437")
        lines = cleaned.split(b"\n")

    result.line_count = len(lines)
    result.max_line_width = max((len(line) for line in lines), default=0)
    return result


import logging
import os
import struct
from typing import List, Optional, Tuple

from app.core.extraction_cache import ExtractionCache
from app.core.formatting import format_bytes
from app.core.inspection import signatures
from app.core.inspection.signatures import Category, Signature
from app.models.artifacts import ContentListing, ExtractedEntry

logger = logging.getLogger(__name__)

LIST_LIMIT = 200
DOS_COMMAND_LIMIT = 64 * 1024

# Platforms whose entries are never flagged as programs.
NO_PROGRAM_PLATFORMS = ("dos",)


def list_content(directory: str, platform: str = "", limit: int = LIST_LIMIT) -> ContentListing:
    """
    Walks an extracted tree depth-first in name order and describes each file.
    Zero-byte files are counted, not listed. Only the first `limit` files are
    classified, the remainder is summarised as "... N more files".
    A failure to read the top directory is returned as the listing error.
    """
    try:
        found = _scan(directory)
    except OSError as e:
        logger.error(f"Cannot list {directory}: {e}")
        return ContentListing(error=str(e))

    files = [f for f in found if f[2] > 0]
    listing = ContentListing(total_files=len(files), zero_byte_files=len(found) - len(files))
    for rel, path, size in files[:limit]:
        entry = describe_entry(path, rel, size, platform)
        listing.entries.append(entry)
        listing.lines.append(render_entry(entry))

    listing.more_files = len(files) - len(listing.entries)
    if listing.more_files:
        listing.lines.append(f"... {listing.more_files} more files")
    if listing.zero_byte_files:
        listing.lines.append(f"... skipped {listing.zero_byte_files} empty (0 B) files")
    return listing


def _scan(directory: str) -> List[Tuple[str, str, int]]:
    found: List[Tuple[str, str, int]] = []
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        _visit(entry, entry.name, found)
    return found


def _visit(entry: os.DirEntry, rel: str, found: List[Tuple[str, str, int]]):
    try:
        if entry.is_dir(follow_symlinks=False):
            with os.scandir(entry.path) as it:
                children = sorted(it, key=lambda e: e.name)
            for child in children:
                _visit(child, f"{rel}/{child.name}", found)
        elif entry.is_file(follow_symlinks=False):
            found.append((rel, entry.path, entry.stat(follow_symlinks=False).st_size))
    except OSError as e:
        logger.warning(f"Error scanning {entry.path}: {e}")


def describe_entry(path: str, rel: str, size: int, platform: str = "") -> ExtractedEntry:
    try:
        with open(path, "rb") as f:
            head = f.read(signatures.PREFIX_SIZE)
    except OSError as e:
        logger.warning(f"Error reading {path}: {e}")
        head = b""

    sign = signatures.classify_prefix(head)
    category = sign.category()
    entry = ExtractedEntry(
        relative_path=rel,
        byte_size=size,
        signature=sign,
        is_image=category == Category.IMAGE,
        is_text=category == Category.TEXT,
        is_program=category == Category.PROGRAM and platform.strip().lower() not in NO_PROGRAM_PLATFORMS,
    )
    if entry.is_image:
        dims = image_dimensions(sign, head)
        if dims:
            entry.detail = f"{dims[0]}x{dims[1]}"
    elif sign == Signature.MS_EXECUTABLE:
        entry.detail = "Dos command" if size <= DOS_COMMAND_LIMIT else "Dos executable"
    return entry


def render_entry(entry: ExtractedEntry) -> str:
    parts = [entry.relative_path, format_bytes(entry.byte_size), entry.signature.label]
    if entry.detail:
        parts.append(entry.detail)
    return ", ".join(parts)


def image_dimensions(sign: Signature, head: bytes) -> Optional[Tuple[int, int]]:
    """Width and height read from the image header, None when it is not available."""
    try:
        if sign == Signature.PNG:
            return struct.unpack(">II", head[16:24])
        if sign == Signature.GIF:
            return struct.unpack("<HH", head[6:10])
        if sign == Signature.BMP:
            width, height = struct.unpack("<ii", head[18:26])
            return abs(width), abs(height)
        if sign == Signature.PCX:
            xmin, ymin, xmax, ymax = struct.unpack("<HHHH", head[4:12])
            return xmax - xmin + 1, ymax - ymin + 1
        if sign == Signature.ILBM:
            return struct.unpack(">HH", head[20:24])
    except struct.error:
        return None
    return None


def declared_listing(raw: Optional[str]) -> List[str]:
    """Names from a newline-delimited listing, trimmed, without blanks or repeats."""
    names: List[str] = []
    for line in (raw or "").split("\n"):
        name = line.strip()
        if not name:
            continue
        if names and names[-1] == name:
            continue
        names.append(name)
    return names


def describe_listing(names: List[str]) -> str:
    if not names:
        return ""
    if len(names) == 1:
        return "contains one file"
    return f"contains {len(names)} files"


def inspect_artifact(cache: ExtractionCache, source_path: str, filename: Optional[str] = None,
                     platform: str = "", limit: int = LIST_LIMIT) -> ContentListing:
    """
    Extracts the artifact through the cache and lists its content.
    A source that is not an archive is listed as its single file.
    """
    outcome = cache.extract(source_path, filename)
    if outcome.status == "too_large":
        return ContentListing(message=outcome.message)
    if not outcome.ok:
        if outcome.unsupported:
            return _single_file(source_path, filename or os.path.basename(source_path), platform)
        return ContentListing(error=outcome.message)
    return list_content(outcome.directory, platform, limit)


def _single_file(path: str, name: str, platform: str) -> ContentListing:
    try:
        size = os.path.getsize(path)
    except OSError as e:
        return ContentListing(error=str(e))
    entry = describe_entry(path, os.path.basename(name), size, platform)
    return ContentListing(entries=[entry], lines=[render_entry(entry)], total_files=1)

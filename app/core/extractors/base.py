
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from .models import ExtractionFailedError, UnsafePathError

MAX_OUTPUT_BYTES = 500 * 1024 * 1024

class BaseExtractor(ABC):
    name = "base"

    def __init__(self, config: Optional[dict] = None):
        self.config = config or {}
        extraction = self.config.get("extraction", {})
        self.max_output_bytes = extraction.get("max_output_bytes", MAX_OUTPUT_BYTES)

    @abstractmethod
    def extract(self, src: str, dst: str) -> List[str]:
        """
        Unpack the archive at src into the existing directory dst.
        Returns the relative paths written.
        Raises an ArchiveError subclass on failure.
        """
        pass


def safe_join(dst: str, member: str) -> Path:
    """
    Resolves an archive member name inside dst.
    Raises UnsafePathError for absolute names or names that climb out of dst.
    """
    name = member.replace("\\", "/")
    if not name or name.startswith("/") or (len(name) > 1 and name[1] == ":"):
        raise UnsafePathError(f"unsafe member path: {member!r}")
    root = Path(dst).resolve()
    target = (root / name).resolve()
    if target != root and root not in target.parents:
        raise UnsafePathError(f"member escapes destination: {member!r}")
    return target


class OutputBudget:
    """Running total of bytes written, guards against decompression bombs."""

    def __init__(self, limit: int):
        self.limit = limit
        self.written = 0

    def add(self, size: int):
        self.written += size
        if self.written > self.limit:
            raise ExtractionFailedError(f"extracted content exceeds {self.limit} bytes")


def list_written(dst: str) -> List[str]:
    found = []
    for root, dirs, files in os.walk(dst):
        dirs.sort()
        for name in sorted(files):
            found.append(os.path.relpath(os.path.join(root, name), dst).replace(os.sep, "/"))
    return found


def copy_limited(source, target, budget: OutputBudget, chunk_size: int = 64 * 1024) -> int:
    total = 0
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        budget.add(len(chunk))
        target.write(chunk)
        total += len(chunk)
    return total


import logging
import os
import shutil
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.core.extractors.registry import ExtractorRegistry

logger = logging.getLogger(__name__)

APP_NAME = "artifact-inspector"
MAX_BYTES = 150 * 1024 * 1024
DIR_PREFIX = "artifact-content-"
LOCK_STRIPES = 64

TOO_LARGE = "will not decompress this archive as it is very large"

@dataclass
class ExtractionOutcome:
    status: str  # "extracted", "cached", "too_large", "failed"
    directory: Optional[str] = None
    message: Optional[str] = None
    files: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    unsupported: bool = False

    @property
    def ok(self) -> bool:
        return self.status in ("extracted", "cached")


class ExtractionCache:
    """
    Unpacks artifacts into <root>/<app_name>/artifact-content-<name>.
    A directory that already holds entries is a cache hit and is never re-extracted.
    A failed extraction removes its directory.
    """

    # Striped by cache path, two artifacts may share a stripe.
    _locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))

    def __init__(self, registry: Optional[ExtractorRegistry] = None, root: Optional[str] = None,
                 app_name: str = APP_NAME, max_bytes: int = MAX_BYTES):
        self.registry = registry or ExtractorRegistry()
        self.root = Path(root or tempfile.gettempdir())
        self.app_name = app_name
        self.max_bytes = max_bytes

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ExtractionCache":
        extraction = config.get("extraction", {})
        return cls(
            registry=ExtractorRegistry(config),
            root=extraction.get("scratch_root"),
            app_name=extraction.get("app_name", APP_NAME),
            max_bytes=extraction.get("max_bytes", MAX_BYTES),
        )

    def cache_dir(self, filename: str) -> Path:
        name = os.path.basename(filename.strip().replace("\\", "/")).strip().lower()
        if not name or name in (".", ".."):
            raise ValueError(f"cannot derive a cache directory from {filename!r}")
        return self.root / self.app_name / f"{DIR_PREFIX}{name}"

    def extract(self, source_path: str, filename: Optional[str] = None) -> ExtractionOutcome:
        """
        Extracts source_path, keyed by filename (defaults to the source basename).
        Returns an ExtractionOutcome, failures are reported in it and never raised.
        """
        try:
            stat = os.stat(source_path)
        except OSError as e:
            return ExtractionOutcome(status="failed", message=str(e))
        if os.path.isdir(source_path):
            return ExtractionOutcome(status="failed", message="error, directory")
        if stat.st_size > self.max_bytes:
            logger.info(f"Skipping extraction of {source_path}, {stat.st_size} bytes exceeds {self.max_bytes}")
            return ExtractionOutcome(status="too_large", message=TOO_LARGE)

        try:
            dst = self.cache_dir(filename or source_path)
        except ValueError as e:
            return ExtractionOutcome(status="failed", message=str(e))

        with self._lock_for(dst):
            return self._extract_locked(source_path, dst)

    def _extract_locked(self, source_path: str, dst: Path) -> ExtractionOutcome:
        if dst.exists() and not dst.is_dir():
            return ExtractionOutcome(status="failed", message=f"cache path is not a directory: {dst}")
        try:
            dst.mkdir(parents=True, exist_ok=True)
            if any(dst.iterdir()):
                logger.debug(f"Extraction cache hit: {dst}")
                return ExtractionOutcome(status="cached", directory=str(dst))
        except OSError as e:
            return ExtractionOutcome(status="failed", message=str(e))

        logger.info(f"Extracting {source_path} to {dst}")
        try:
            result = self.registry.extract(source_path, str(dst))
        except Exception as e:
            logger.exception(f"Extraction exception for {source_path}: {e}")
            shutil.rmtree(dst, ignore_errors=True)
            return ExtractionOutcome(status="failed", message=f"extraction error: {e}")

        if not result.ok:
            logger.warning(f"Extraction failed for {source_path}: {result.error}")
            shutil.rmtree(dst, ignore_errors=True)
            return ExtractionOutcome(
                status="failed",
                message=result.error,
                metadata=result.metadata,
                unsupported=result.unsupported,
            )
        if not any(dst.iterdir()):
            shutil.rmtree(dst, ignore_errors=True)
            return ExtractionOutcome(status="failed", message="archive is empty", metadata=result.metadata)
        return ExtractionOutcome(status="extracted", directory=str(dst), files=result.files, metadata=result.metadata)

    @classmethod
    def _lock_for(cls, path: Path) -> threading.Lock:
        return cls._locks[hash(str(path)) % len(cls._locks)]


import bz2
import gzip
import logging
import lzma
import tarfile
import zlib
from pathlib import Path
from typing import List

from .base import BaseExtractor, OutputBudget, copy_limited, safe_join
from .models import ExtractionFailedError

logger = logging.getLogger(__name__)

class TarExtractor(BaseExtractor):
    """Tape archives, optionally gzip, bzip2 or xz compressed."""
    name = "tarfile"

    def extract(self, src: str, dst: str) -> List[str]:
        budget = OutputBudget(self.max_output_bytes)
        written = []
        try:
            with tarfile.open(src, "r:*") as tf:
                for member in tf.getmembers():
                    target = safe_join(dst, member.name)
                    if member.isdir():
                        target.mkdir(parents=True, exist_ok=True)
                        continue
                    if not member.isreg():
                        logger.debug(f"Skipping non-regular tar member {member.name}")
                        continue
                    source = tf.extractfile(member)
                    if source is None:
                        continue
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with source, open(target, "wb") as out:
                        copy_limited(source, out, budget)
                    written.append(member.name)
        except (tarfile.TarError, zlib.error, EOFError, lzma.LZMAError) as e:
            raise ExtractionFailedError(f"bad tar archive: {e}")
        except (OSError, ValueError) as e:
            raise ExtractionFailedError(f"cannot write tar member: {e}")
        return written


_STREAMS = {
    ".gz": gzip.open,
    ".tgz": gzip.open,
    ".bz2": bz2.open,
    ".xz": lzma.open,
}

class StreamExtractor(BaseExtractor):
    """
    A single compressed file that is not a tape archive.
    The output is named after the source without its compression suffix.
    """
    name = "stream"

    def __init__(self, config=None, opener=gzip.open):
        super().__init__(config)
        self.opener = opener

    def extract(self, src: str, dst: str) -> List[str]:
        path = Path(src)
        suffix = path.suffix.lower()
        opener = _STREAMS.get(suffix, self.opener)
        name = path.stem if suffix in _STREAMS else path.name
        if suffix == ".tgz":
            name += ".tar"
        target = safe_join(dst, name)
        budget = OutputBudget(self.max_output_bytes)
        try:
            with opener(src, "rb") as source, open(target, "wb") as out:
                copy_limited(source, out, budget)
        except (OSError, EOFError, zlib.error, lzma.LZMAError) as e:
            if target.exists():
                target.unlink()
            raise ExtractionFailedError(f"bad compressed stream: {e}")
        return [name]

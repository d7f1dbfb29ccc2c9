
import logging
import zipfile
import zlib
from typing import List

from .base import BaseExtractor, OutputBudget, copy_limited, safe_join
from .models import ExtractionFailedError, NotImplementedArchiveError

logger = logging.getLogger(__name__)

class ZipExtractor(BaseExtractor):
    """
    Unpacks zip archives with the standard library.
    Member names without the UTF-8 flag are decoded as CP437 by zipfile.
    """
    name = "zipfile"

    def extract(self, src: str, dst: str) -> List[str]:
        budget = OutputBudget(self.max_output_bytes)
        written = []
        try:
            with zipfile.ZipFile(src) as zf:
                for info in zf.infolist():
                    target = safe_join(dst, info.filename)
                    if info.is_dir():
                        target.mkdir(parents=True, exist_ok=True)
                        continue
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info) as source, open(target, "wb") as out:
                        copy_limited(source, out, budget)
                    written.append(info.filename.replace("\\", "/"))
        except zipfile.BadZipFile as e:
            raise ExtractionFailedError(f"bad zip archive: {e}")
        except NotImplementedError as e:
            # shrink, reduce and implode methods
            raise NotImplementedArchiveError(str(e))
        except RuntimeError as e:
            raise ExtractionFailedError(f"zip archive cannot be read: {e}")
        except (zlib.error, EOFError) as e:
            raise ExtractionFailedError(f"corrupt zip data: {e}")
        except (OSError, ValueError) as e:
            # member names that collide with files or cannot be written here
            raise ExtractionFailedError(f"cannot write zip member: {e}")
        logger.debug(f"zipfile wrote {len(written)} files, {budget.written} bytes")
        return written

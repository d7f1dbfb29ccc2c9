
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

@dataclass
class ExtractResult:
    files: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    # True when the source is not an archive or its format has no unpacker
    unsupported: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class ArchiveError(Exception):
    pass

class NotArchiveError(ArchiveError):
    pass

class NotImplementedArchiveError(ArchiveError):
    pass

class ProgramMissingError(ArchiveError):
    pass

class ExtractionFailedError(ArchiveError):
    pass

class UnsafePathError(ArchiveError):
    pass

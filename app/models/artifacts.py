
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from app.core.inspection.encoding import TextEncoding
from app.core.inspection.signatures import Signature

@dataclass(frozen=True)
class ArtifactSource:
    """A file record as supplied by the data layer. The pipeline only reads it."""
    filename: str
    platform: str = ""
    uuid: str = ""
    section: str = ""
    magic: str = ""
    no_readme: bool = False
    path: Optional[str] = None
    raw_bytes: Optional[bytes] = None
    declared_listing: Tuple[str, ...] = ()

@dataclass
class ExtractedEntry:
    relative_path: str
    byte_size: int
    signature: Signature = Signature.UNKNOWN
    is_image: bool = False
    is_text: bool = False
    is_program: bool = False
    detail: str = ""  # image dimensions or program description

@dataclass
class ContentListing:
    entries: List[ExtractedEntry] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)
    total_files: int = 0
    more_files: int = 0
    zero_byte_files: int = 0
    message: Optional[str] = None  # expected outcomes such as oversized archives
    error: Optional[str] = None

    def text(self) -> str:
        if self.error:
            return self.error
        if self.message:
            return self.message
        return "\n".join(self.lines)

@dataclass
class ReadmeResult:
    available: bool = False
    reason: Optional[str] = None
    latin1_text: str = ""
    cp437_text: str = ""
    line_count: int = 0
    max_line_width: int = 0
    encoding: Optional[TextEncoding] = None
    no_screenshot: bool = False
    no_download: bool = False
    latin1_checked: bool = False
    cp437_checked: bool = False


import logging
import os
import shutil
import subprocess
import tempfile
from typing import List

from app.core.external_tools import ExternalTools
from .base import BaseExtractor, list_written
from .models import ExtractionFailedError, ProgramMissingError

logger = logging.getLogger(__name__)

TIMEOUT_SECONDS = 300

class CommandExtractor(BaseExtractor):
    """
    Runs an external unpacker program inside the destination directory.
    Subclasses provide the program name and its arguments.
    """
    program = ""

    def __init__(self, config=None):
        super().__init__(config)
        self.timeout = self.config.get("extraction", {}).get("timeout_seconds", TIMEOUT_SECONDS)

    @property
    def name(self) -> str:
        return self.program

    def arguments(self, src: str, dst: str) -> List[str]:
        raise NotImplementedError

    def extract(self, src: str, dst: str) -> List[str]:
        binary = ExternalTools.find(self.program, self.config)
        if not binary:
            raise ProgramMissingError(f"{self.program} is not installed")
        self.run([binary] + self.arguments(os.path.abspath(src), os.path.abspath(dst)), dst)
        return self.verify(dst)

    def run(self, cmd: List[str], cwd: str):
        logger.debug(f"Running {cmd}")
        try:
            proc = subprocess.run(cmd, cwd=cwd, capture_output=True, timeout=self.timeout, check=False)
        except subprocess.TimeoutExpired:
            raise ExtractionFailedError(f"{self.program} timed out after {self.timeout}s")
        except OSError as e:
            raise ProgramMissingError(f"{self.program} could not be run: {e}")
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            raise ExtractionFailedError(f"{self.program} exited with status {proc.returncode}: {stderr}")

    def verify(self, dst: str) -> List[str]:
        files = list_written(dst)
        if not files:
            raise ExtractionFailedError(f"{self.program} extracted nothing")
        total = sum(os.path.getsize(os.path.join(dst, f)) for f in files)
        if total > self.max_output_bytes:
            raise ExtractionFailedError(f"extracted content exceeds {self.max_output_bytes} bytes")
        return files


class BsdtarExtractor(CommandExtractor):
    program = "bsdtar"

    def arguments(self, src: str, dst: str) -> List[str]:
        return [
            "-x", "--file", src,
            "--no-acls", "--no-fflags", "--no-same-owner", "--no-same-permissions",
            "--no-xattrs", "--modification-time", "--cd", dst,
        ]


class UnzipExtractor(CommandExtractor):
    """Info-ZIP handles the shrink, reduce and implode methods."""
    program = "unzip"

    def arguments(self, src: str, dst: str) -> List[str]:
        return ["-o", "-qq", src, "-d", dst]


class SevenZipExtractor(CommandExtractor):
    program = "7z"

    def arguments(self, src: str, dst: str) -> List[str]:
        return ["x", "-y", f"-o{dst}", src]


class UnrarExtractor(CommandExtractor):
    program = "unrar"

    def arguments(self, src: str, dst: str) -> List[str]:
        return ["x", "-ep", "-c-", "-or", "-y", src, dst + os.sep]


class LhaExtractor(CommandExtractor):
    program = "lha"

    def arguments(self, src: str, dst: str) -> List[str]:
        return [f"-efiw={dst}", src]


class ArjExtractor(CommandExtractor):
    """arj refuses archives without the .arj extension, so it reads a symlink."""
    program = "arj"

    def arguments(self, src: str, dst: str) -> List[str]:
        return ["x", src, f"-ht{dst}"]

    def extract(self, src: str, dst: str) -> List[str]:
        if src.lower().endswith(".arj"):
            return super().extract(src, dst)
        with tempfile.TemporaryDirectory() as tmp:
            link = os.path.join(tmp, "archive.arj")
            os.symlink(os.path.abspath(src), link)
            return super().extract(link, dst)


class ArcExtractor(CommandExtractor):
    """SEA ARC only extracts into the working directory, so it runs on a copy inside dst."""
    program = "arc"

    def arguments(self, src: str, dst: str) -> List[str]:
        return ["x", os.path.basename(src)]

    def extract(self, src: str, dst: str) -> List[str]:
        binary = ExternalTools.find(self.program, self.config)
        if not binary:
            raise ProgramMissingError(f"{self.program} is not installed")
        fd, copy = tempfile.mkstemp(suffix=".arc", dir=dst)
        os.close(fd)
        try:
            shutil.copyfile(src, copy)
            self.run([binary] + self.arguments(copy, dst), dst)
        finally:
            os.remove(copy)
        return self.verify(dst)


import bz2
import gzip
import logging
import lzma
import os
import shutil
from typing import Dict, List, Optional

from app.core.external_tools import ExternalTools
from app.core.inspection import signatures
from app.core.inspection.signatures import Signature
from .base import BaseExtractor
from .command import (
    ArcExtractor, ArjExtractor, BsdtarExtractor, LhaExtractor,
    SevenZipExtractor, UnrarExtractor, UnzipExtractor,
)
from .models import ArchiveError, ExtractResult, NotArchiveError, NotImplementedArchiveError
from .tarball import StreamExtractor, TarExtractor
from .zipped import ZipExtractor

logger = logging.getLogger(__name__)

# Enough to reach the PKSFX marker at offset 526.
SNIFF_BYTES = 64 * 1024

ZIP_FAMILY = (
    Signature.ZIP, Signature.ZIP64, Signature.JAVA_ARCHIVE,
    Signature.PKZIP_SHRINK, Signature.PKZIP_REDUCE, Signature.PKZIP_IMPLODE,
)
NOT_IMPLEMENTED = (Signature.PKLITE, Signature.PKSFX, Signature.ZIP_MULTI_VOLUME)

class ExtractorRegistry:
    """
    Maps archive signatures to an ordered chain of unpackers.
    The first unpacker that succeeds wins, the rest are fallbacks.
    """

    def __init__(self, config: Optional[dict] = None):
        self._extractors: Dict[Signature, List[BaseExtractor]] = {}
        self.config = config or {}
        self.features = self.config.get("extraction", {})
        self.register_defaults()

    def register(self, sign: Signature, extractor: BaseExtractor):
        self._extractors.setdefault(sign, []).append(extractor)

    def get(self, sign: Signature) -> List[BaseExtractor]:
        return list(self._extractors.get(sign, []))

    def register_defaults(self):
        zipped = ZipExtractor(self.config)
        for sign in ZIP_FAMILY:
            self.register(sign, zipped)

        tarred = TarExtractor(self.config)
        self.register(Signature.TAR, tarred)
        for sign, opener in ((Signature.GZIP, gzip.open), (Signature.BZIP2, bz2.open), (Signature.XZ, lzma.open)):
            self.register(sign, tarred)
            self.register(sign, StreamExtractor(self.config, opener=opener))

        if not self.features.get("external_tools", True):
            return

        bsdtar = BsdtarExtractor(self.config)
        unzip = UnzipExtractor(self.config)
        for sign in ZIP_FAMILY:
            self.register(sign, unzip)
            self.register(sign, bsdtar)
        for sign in (Signature.TAR, Signature.GZIP, Signature.BZIP2, Signature.XZ,
                     Signature.ZSTANDARD, Signature.CABINET):
            self.register(sign, bsdtar)

        seven = SevenZipExtractor(self.config)
        self.register(Signature.SEVEN_ZIP, seven)
        self.register(Signature.RAR, UnrarExtractor(self.config))
        self.register(Signature.RAR5, UnrarExtractor(self.config))
        self.register(Signature.RAR, seven)
        self.register(Signature.RAR5, seven)
        self.register(Signature.ARJ, ArjExtractor(self.config))
        self.register(Signature.ARJ, seven)
        self.register(Signature.LHA, LhaExtractor(self.config))
        self.register(Signature.LHA, seven)
        self.register(Signature.ARC_SEA, ArcExtractor(self.config))

    def chain_for(self, sign: Signature) -> List[BaseExtractor]:
        if sign in NOT_IMPLEMENTED:
            raise NotImplementedArchiveError(f"extraction of {sign.label} is not implemented")
        chain = self.get(sign)
        if not chain:
            raise NotArchiveError(f"{sign.label} is not a supported archive")
        return chain

    def tools(self) -> Dict[str, bool]:
        return ExternalTools.check_binaries(self.config)

    def extract(self, src: str, dst: str) -> ExtractResult:
        """
        Unpacks src into the existing directory dst.
        Returns an ExtractResult, errors are reported in it rather than raised.
        """
        try:
            with open(src, "rb") as f:
                sign = signatures.classify(f.read(SNIFF_BYTES))
        except OSError as e:
            return ExtractResult(error=str(e), metadata={"source": "error"})

        meta = {"signature": sign.label}
        try:
            chain = self.chain_for(sign)
        except (NotArchiveError, NotImplementedArchiveError) as e:
            return ExtractResult(error=str(e), metadata={**meta, "source": "error"}, unsupported=True)

        errors = []
        for extractor in chain:
            try:
                files = extractor.extract(src, dst)
                logger.info(f"Extracted {len(files)} files from {src} using {extractor.name}")
                return ExtractResult(files=files, metadata={**meta, "source": extractor.name})
            except ArchiveError as e:
                logger.warning(f"{extractor.name} could not extract {src}: {e}")
                errors.append(f"{extractor.name}: {e}")
                _empty(dst)
        return ExtractResult(error="; ".join(errors), metadata={**meta, "source": "error"})


def _empty(directory: str):
    for entry in os.scandir(directory):
        if entry.is_dir(follow_symlinks=False):
            shutil.rmtree(entry.path)
        else:
            os.remove(entry.path)

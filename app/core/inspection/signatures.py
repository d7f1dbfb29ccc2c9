
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import filetype

logger = logging.getLogger(__name__)

PREFIX_SIZE = 512

class Category(Enum):
    IMAGE = "image"
    TEXT = "text"
    PROGRAM = "program"
    ARCHIVE = "archive"
    OTHER = "other"


class Signature(Enum):
    """
    The true format of a byte sample. Values are the long titles,
    `label` is the short description shown in content listings.
    """
    UNKNOWN = "Binary data"
    ELECTRONIC_ARTS_IFF = "Electronic Arts IFF"
    AV1_IMAGE = "AV1 Image File"
    JPEG = "JPEG File Interchange Format"
    JPEG_2000 = "JPEG 2000"
    PNG = "Portable Network Graphics"
    GIF = "Graphics Interchange Format"
    WEBP = "Google WebP"
    TIFF = "Tagged Image File Format"
    BMP = "BMP File Format"
    PCX = "Personal Computer eXchange"
    ILBM = "Interleaved Bitmap"
    ICO = "Microsoft Icon"
    MPEG4 = "MPEG-4 video"
    QUICKTIME_MOVIE = "QuickTime Movie"
    QUICKTIME_M4V = "QuickTime M4V"
    AVI = "Microsoft Audio Video Interleave"
    WINDOWS_MEDIA = "Microsoft Windows Media"
    MPEG = "MPEG video"
    FLASH_VIDEO = "Flash Video"
    REAL_PLAYER = "RealPlayer"
    MIDI = "Musical Instrument Digital Interface"
    MP3 = "MPEG-1 Audio Layer 3"
    OGG = "Ogg Vorbis Codec"
    FLAC = "Free Lossless Audio Codec"
    WAVE = "Wave Audio for Windows"
    PKZIP_SHRINK = "Shrunked pkzip archive"
    PKZIP_REDUCE = "Reduced pkzip archive"
    PKZIP_IMPLODE = "Imploded pkzip archive"
    ZIP64 = "PKWARE zip64 archive"
    ZIP = "Zip archive"
    ZIP_MULTI_VOLUME = "Zip multi-Volume archive"
    PKLITE = "PKLITE compressed executable"
    PKSFX = "PKSFX self-extracting archive"
    TAR = "Tape Archive"
    RAR = "Roshal Archive"
    RAR5 = "Roshal Archive v5"
    GZIP = "Gzip compress archive"
    BZIP2 = "Bzip2 compress archive"
    SEVEN_ZIP = "7z compress archive"
    XZ = "XZ compress archive"
    ZSTANDARD = "ZStandard archive"
    FREEARC = "FreeArc"
    ARC_SEA = "Archive by SEA"
    LHA = "Yoshi LHA"
    ZOO = "Zoo Archive"
    ARJ = "Archive by Robert Jung"
    CABINET = "Microsoft Cabinet"
    DOS_KWAJ = "Microsoft DOS KWAJ"
    DOS_SZDD = "Microsoft DOS SZDD"
    MS_EXECUTABLE = "Microsoft executable"
    MS_COMPOUND_FILE = "Microsoft compound file"
    CD_ISO9660 = "CD ISO 9660"
    CD_NERO = "CD Nero"
    CD_POWERISO = "CD PowerISO"
    CD_ALCOHOL120 = "CD Alcohol 120"
    JAVA_ARCHIVE = "Java archive"
    WINDOWS_HELP = "Windows Help File"
    PDF = "Portable Document Format"
    RTF = "Rich Text Format"
    UTF8_TEXT = "UTF-8 text"
    UTF16_TEXT = "UTF-16 text"
    UTF32_TEXT = "UTF-32 text"
    ANSI_TEXT = "ANSI escaped text"
    PLAIN_TEXT = "Plain text"

    @property
    def title(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return _LABELS.get(self, "binary data")

    def category(self) -> Category:
        return _CATEGORIES.get(self, Category.OTHER)

    def extensions(self) -> List[str]:
        return _EXTENSIONS.get(self, [])

    def __str__(self) -> str:
        return self.label


_LABELS: Dict[Signature, str] = {
    Signature.ELECTRONIC_ARTS_IFF: "IFF image",
    Signature.AV1_IMAGE: "AV1 image",
    Signature.JPEG: "JPEG image",
    Signature.JPEG_2000: "JPEG 2000 image",
    Signature.PNG: "PNG image",
    Signature.GIF: "GIF image",
    Signature.WEBP: "WebP image",
    Signature.TIFF: "TIFF image",
    Signature.BMP: "BMP image",
    Signature.PCX: "PCX image",
    Signature.ILBM: "BMP image",
    Signature.ICO: "Microsoft icon",
    Signature.MPEG4: "MPEG-4 video",
    Signature.QUICKTIME_MOVIE: "QuickTime video",
    Signature.QUICKTIME_M4V: "QuickTime video",
    Signature.AVI: "AVI video",
    Signature.WINDOWS_MEDIA: "Windows Media video",
    Signature.MPEG: "MPEG video",
    Signature.FLASH_VIDEO: "Flash video",
    Signature.REAL_PLAYER: "RealPlayer video",
    Signature.MIDI: "MIDI audio",
    Signature.MP3: "MP3 audio",
    Signature.OGG: "Ogg audio",
    Signature.FLAC: "FLAC audio",
    Signature.WAVE: "Wave audio",
    Signature.PKZIP_SHRINK: "pkzip shrunk archive",
    Signature.PKZIP_REDUCE: "pkzip reduced archive",
    Signature.PKZIP_IMPLODE: "pkzip imploded archive",
    Signature.ZIP64: "zip64 archive",
    Signature.ZIP: "zip archive",
    Signature.ZIP_MULTI_VOLUME: "multivolume zip",
    Signature.PKLITE: "pklite compressed",
    Signature.PKSFX: "self-extracting zip",
    Signature.TAR: "Tape archive",
    Signature.RAR: "RAR archive",
    Signature.RAR5: "RAR v5+ archive",
    Signature.GZIP: "Gzip archive",
    Signature.BZIP2: "Bzip2 archive",
    Signature.SEVEN_ZIP: "7z archive",
    Signature.XZ: "XZ archive",
    Signature.ZSTANDARD: "ZST archive",
    Signature.FREEARC: "FreeARC",
    Signature.ARC_SEA: "ARC by SEA",
    Signature.LHA: "LHA by Yoshi",
    Signature.ZOO: "Zoo archive",
    Signature.ARJ: "ARJ archive",
    Signature.CABINET: "Microsoft cabinet",
    Signature.DOS_KWAJ: "MS-DOS KWAJ",
    Signature.DOS_SZDD: "MS-DOS SZDD",
    Signature.MS_EXECUTABLE: "MS-DOS executable",
    Signature.MS_COMPOUND_FILE: "Microsoft compound file",
    Signature.CD_ISO9660: "CD, ISO 9660",
    Signature.CD_NERO: "CD, Nero",
    Signature.CD_POWERISO: "CD, PowerISO",
    Signature.CD_ALCOHOL120: "CD, Alcohol 120",
    Signature.JAVA_ARCHIVE: "Java archive",
    Signature.WINDOWS_HELP: "Windows help",
    Signature.PDF: "PDF document",
    Signature.RTF: "rich text",
    Signature.UTF8_TEXT: "UTF-8 text",
    Signature.UTF16_TEXT: "UTF-16 text",
    Signature.UTF32_TEXT: "UTF-32 text",
    Signature.ANSI_TEXT: "ANSI text",
    Signature.PLAIN_TEXT: "plain text",
}

IMAGES = frozenset({
    Signature.AV1_IMAGE, Signature.JPEG, Signature.JPEG_2000, Signature.PNG,
    Signature.GIF, Signature.WEBP, Signature.TIFF, Signature.BMP,
    Signature.PCX, Signature.ILBM, Signature.ICO,
})
TEXTS = frozenset({
    Signature.UTF8_TEXT, Signature.UTF16_TEXT, Signature.UTF32_TEXT,
    Signature.ANSI_TEXT, Signature.PLAIN_TEXT,
})
PROGRAMS = frozenset({
    Signature.MS_EXECUTABLE, Signature.DOS_KWAJ, Signature.DOS_SZDD,
    Signature.MS_COMPOUND_FILE,
})
ARCHIVES = frozenset({
    Signature.PKZIP_SHRINK, Signature.PKZIP_REDUCE, Signature.PKZIP_IMPLODE,
    Signature.ZIP64, Signature.ZIP, Signature.ZIP_MULTI_VOLUME,
    Signature.PKLITE, Signature.PKSFX, Signature.TAR, Signature.RAR,
    Signature.RAR5, Signature.GZIP, Signature.BZIP2, Signature.SEVEN_ZIP,
    Signature.XZ, Signature.ZSTANDARD, Signature.FREEARC, Signature.ARC_SEA,
    Signature.LHA, Signature.ZOO, Signature.ARJ, Signature.CABINET,
    Signature.JAVA_ARCHIVE,
})

_CATEGORIES: Dict[Signature, Category] = {}
for _sign in IMAGES:
    _CATEGORIES[_sign] = Category.IMAGE
for _sign in TEXTS:
    _CATEGORIES[_sign] = Category.TEXT
for _sign in PROGRAMS:
    _CATEGORIES[_sign] = Category.PROGRAM
for _sign in ARCHIVES:
    _CATEGORIES[_sign] = Category.ARCHIVE

_EXTENSIONS: Dict[Signature, List[str]] = {
    Signature.ELECTRONIC_ARTS_IFF: [".iff"],
    Signature.AV1_IMAGE: [".avif"],
    Signature.JPEG: [".jpg", ".jpeg"],
    Signature.JPEG_2000: [".jp2", ".j2k", ".jpf", ".jpx", ".jpm", ".mj2"],
    Signature.PNG: [".png"],
    Signature.GIF: [".gif"],
    Signature.WEBP: [".webp"],
    Signature.TIFF: [".tif", ".tiff"],
    Signature.BMP: [".bmp"],
    Signature.PCX: [".pcx"],
    Signature.ILBM: [".ilbm", ".lbm"],
    Signature.ICO: [".ico"],
    Signature.MPEG4: [".mp4"],
    Signature.QUICKTIME_MOVIE: [".mov"],
    Signature.QUICKTIME_M4V: [".m4v"],
    Signature.AVI: [".avi"],
    Signature.WINDOWS_MEDIA: [".wmv"],
    Signature.MPEG: [".mpg", ".mpeg"],
    Signature.FLASH_VIDEO: [".flv"],
    Signature.REAL_PLAYER: [".rv", ".rm", ".rmvb"],
    Signature.MIDI: [".mid", ".midi"],
    Signature.MP3: [".mp3"],
    Signature.OGG: [".ogg"],
    Signature.FLAC: [".flac"],
    Signature.WAVE: [".wav"],
    Signature.PKZIP_SHRINK: [".zip"],
    Signature.PKZIP_REDUCE: [".zip"],
    Signature.PKZIP_IMPLODE: [".zip"],
    Signature.ZIP64: [".zip"],
    Signature.ZIP: [".zip"],
    Signature.ZIP_MULTI_VOLUME: [".zip"],
    Signature.PKLITE: [".zip"],
    Signature.PKSFX: [".zip"],
    Signature.TAR: [".tar"],
    Signature.RAR: [".rar"],
    Signature.RAR5: [".rar"],
    Signature.GZIP: [".gz"],
    Signature.BZIP2: [".bz2"],
    Signature.SEVEN_ZIP: [".7z"],
    Signature.XZ: [".xz"],
    Signature.ZSTANDARD: [".zst"],
    Signature.FREEARC: [".arc"],
    Signature.ARC_SEA: [".arc"],
    Signature.LHA: [".lzh", ".lha"],
    Signature.ZOO: [".zoo"],
    Signature.ARJ: [".arj"],
    Signature.CABINET: [".cab"],
    Signature.DOS_KWAJ: [".com"],
    Signature.DOS_SZDD: [".exe"],
    Signature.MS_EXECUTABLE: [".exe", ".com"],
    Signature.MS_COMPOUND_FILE: [".exe"],
    Signature.CD_ISO9660: [".iso"],
    Signature.CD_NERO: [".nri"],
    Signature.CD_POWERISO: [".daa"],
    Signature.CD_ALCOHOL120: [".mdf"],
    Signature.JAVA_ARCHIVE: [".jar"],
    Signature.WINDOWS_HELP: [".hlp"],
    Signature.PDF: [".pdf"],
    Signature.RTF: [".rtf"],
    Signature.UTF8_TEXT: [".txt"],
    Signature.UTF16_TEXT: [".txt"],
    Signature.UTF32_TEXT: [".txt"],
    Signature.ANSI_TEXT: [".ans"],
    Signature.PLAIN_TEXT: [".txt"],
}


# --- Matchers ---------------------------------------------------------------

def _at(p: bytes, offset: int, magic: bytes) -> bool:
    return p[offset:offset + len(magic)] == magic


def iff(p: bytes) -> bool:
    return p.startswith(b"CAT ")


def avif(p: bytes) -> bool:
    return _at(p, 4, b"ftypavif")


def jpeg_header(p: bytes) -> bool:
    if len(p) < 11 or not p.startswith(b"\xff\xd8\xff"):
        return False
    if p[3] not in (0xE0, 0xE1):
        return False
    return _at(p, 6, b"JFIF\x00") or _at(p, 6, b"Exif\x00")


def jpeg(p: bytes) -> bool:
    return jpeg_header(p) and p.endswith(b"\xff\xd9")


def jpeg2000(p: bytes) -> bool:
    return p.startswith(b"\x00\x00\x00\x0c\x6a\x50\x20\x20\x0d\x0a")


def png(p: bytes) -> bool:
    return p.startswith(b"\x89PNG\r\n\x1a\n")


def gif(p: bytes) -> bool:
    return p.startswith(b"GIF87a") or p.startswith(b"GIF89a")


def webp(p: bytes) -> bool:
    return p.startswith(b"RIFF") and _at(p, 8, b"WEBP")


def tiff(p: bytes) -> bool:
    return p.startswith(b"II*\x00") or p.startswith(b"MM\x00*")


def bmp(p: bytes) -> bool:
    return p.startswith(b"BM")


def pcx(p: bytes) -> bool:
    """ZSoft PCX: manufacturer 0x0A, version 0-5, encoding none or RLE."""
    if len(p) < 3:
        return False
    return p[0] == 0x0A and p[1] <= 5 and p[2] in (0, 1)


def ico(p: bytes) -> bool:
    return p.startswith(b"\x00\x00\x01\x00")


def ilbm(p: bytes) -> bool:
    return p.startswith(b"FORM") and _at(p, 8, b"ILBM")


def mp4(p: bytes) -> bool:
    return _at(p, 4, b"ftypMSNV") or _at(p, 4, b"ftypisom")


def m4v(p: bytes) -> bool:
    return _at(p, 4, b"ftypmp42")


def qtmov(p: bytes) -> bool:
    return _at(p, 4, b"moov") or _at(p, 4, b"ftypqt")


def avi(p: bytes) -> bool:
    return p.startswith(b"RIFF") and _at(p, 8, b"AVI LIST")


def wmv(p: bytes) -> bool:
    return p.startswith(b"\x30\x26\xb2\x75\x8e\x66\xcf\x11\xa6\xd9\x00\xaa\x00\x62\xce\x6c")


def mpeg(p: bytes) -> bool:
    if len(p) < 4:
        return False
    return p.startswith(b"\x00\x00\x01") and 0xBA <= p[3] <= 0xBF


def flv(p: bytes) -> bool:
    return p.startswith(b"FLV\x01")


def ivr(p: bytes) -> bool:
    return p.startswith(b".REC") or p.startswith(b".RMF")


def midi(p: bytes) -> bool:
    return p.startswith(b"MThd")


def mp3(p: bytes) -> bool:
    return p.startswith(b"ID3")


def ogg(p: bytes) -> bool:
    return p.startswith(b"OggS\x00\x02" + b"\x00" * 8)


def flac(p: bytes) -> bool:
    return p.startswith(b"fLaC\x00\x00\x00\x02")


def wave(p: bytes) -> bool:
    return p.startswith(b"RIFF") and _at(p, 8, b"WAVEfmt ")


def pkzip_method(p: bytes) -> Optional[Signature]:
    """
    Reads the compression method of the first local file header.
    Returns the zip signature for that method or None.
    """
    if len(p) < 30 or not p.startswith(b"PK\x03\x04"):
        return None
    if p[4] + p[5] == 0:
        return None
    method = p[8] + p[9]
    if method in (0, 8, 9):
        return Signature.ZIP
    if method == 1:
        return Signature.PKZIP_SHRINK
    if 2 <= method <= 5:
        return Signature.PKZIP_REDUCE
    if method == 6:
        return Signature.PKZIP_IMPLODE
    if method in (0x0A, 0x0C, 0x0E, 0x10, 0x12, 0x13) or 0x5D <= method <= 0x63:
        return Signature.ZIP
    return None


def zip64(p: bytes) -> bool:
    return p.startswith(b"PK\x03\x04") and b"\x06\x06\x4b\x50" in p and b"\x07\x06\x4b\x50" in p


def pkzip_multi(p: bytes) -> bool:
    return p.startswith(b"PK\x07\x08")


def pklite(p: bytes) -> bool:
    return _at(p, 30, b"PKLITE")


def pksfx(p: bytes) -> bool:
    return _at(p, 526, b"PKSpX")


def tar(p: bytes) -> bool:
    return _at(p, 257, b"ustar")


def rar(p: bytes) -> bool:
    return p.startswith(b"Rar!\x1a\x07\x00")


def rar5(p: bytes) -> bool:
    return p.startswith(b"Rar!\x1a\x07\x01\x00")


def gzip(p: bytes) -> bool:
    return p.startswith(b"\x1f\x8b\x08")


def bzip2(p: bytes) -> bool:
    return p.startswith(b"BZh")


def seven_zip(p: bytes) -> bool:
    return p.startswith(b"7z\xbc\xaf\x27\x1c")


def xz(p: bytes) -> bool:
    return p.startswith(b"\xfd7zXZ\x00")


def zstd(p: bytes) -> bool:
    return p.startswith(b"\x28\xb5\x2f\xfd")


def cab(p: bytes) -> bool:
    return p.startswith(b"MSCF")


def freearc(p: bytes) -> bool:
    return p.startswith(b"ArC\x01")


def arc_sea(p: bytes) -> bool:
    if len(p) < 2:
        return False
    return p[0] == 0x1A and p[1] <= 0x11


def lha(p: bytes) -> bool:
    return _at(p, 2, b"-lh")


def zoo(p: bytes) -> bool:
    return p.startswith(b"ZOO ")


def arj(p: bytes) -> bool:
    if len(p) < 11:
        return False
    return p.startswith(b"\x60\xea") and p[10] == 0x02


def ms_exe(p: bytes) -> bool:
    return p.startswith(b"MZ") or p.startswith(b"ZM")


def kwaj(p: bytes) -> bool:
    return p.startswith(b"KWAJ\x88\xf0\x27\xd1")


def szdd(p: bytes) -> bool:
    return p.startswith(b"SZDD\x88\xf0\x27\x33")


def ms_compound(p: bytes) -> bool:
    return p.startswith(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")


def iso(p: bytes) -> bool:
    return any(_at(p, offset, b"CD001") for offset in (0, 32769, 34817, 36865))


def nri(p: bytes) -> bool:
    return p.startswith(b"\x0eNeroISO")


def daa(p: bytes) -> bool:
    return p.startswith(b"DAA\x00\x00\x00\x00\x00")


def mdf(p: bytes) -> bool:
    return p.startswith(b"\x00" + b"\xff" * 10 + b"\x00\x00\x02\x00\x01")


def jar(p: bytes) -> bool:
    return p.startswith(b"PK\x03\x04\x14\x00\x08\x00\x08\x00")


def hlp(p: bytes) -> bool:
    if p.startswith(b"ITSF") or p.startswith(b"?_\x03\x00") or p.startswith(b"LN\x02\x00"):
        return True
    return _at(p, 6, b"\x00\x00\xff\xff\xff\xff")


def pdf_header(p: bytes) -> bool:
    return p.startswith(b"%PDF")


def pdf(p: bytes) -> bool:
    return pdf_header(p) and b"%%EOF" in p.rstrip()[-1024:]


def rtf_header(p: bytes) -> bool:
    return p.startswith(b"{\\rtf")


def rtf(p: bytes) -> bool:
    return rtf_header(p) and p.rstrip(b" \t\r\n\x00\x1a").endswith(b"}")


def utf8_bom(p: bytes) -> bool:
    return p.startswith(b"\xef\xbb\xbf")


def utf16_bom(p: bytes) -> bool:
    return p.startswith(b"\xff\xfe") or p.startswith(b"\xfe\xff")


def utf32_bom(p: bytes) -> bool:
    return p.startswith(b"\xff\xfe\x00\x00") or p.startswith(b"\x00\x00\xfe\xff")


# Bytes a legacy plain text file may contain besides printable ASCII and 0x80-0xFF.
_TEXT_CONTROLS = frozenset({0x00, 0x09, 0x0A, 0x0B, 0x0C, 0x0D, 0x1A, 0x1B})


def not_plain_text(b: int) -> bool:
    if 0x20 <= b <= 0x7F or b >= 0x80:
        return False
    return b not in _TEXT_CONTROLS


def plain_text(p: bytes) -> bool:
    return len(p) > 0 and not any(not_plain_text(b) for b in p)


def ansi(p: bytes) -> bool:
    if not plain_text(p):
        return False
    return b"\x1b[0;" in p or b"\x1b[1;" in p


Matcher = Callable[[bytes], bool]

# Order matters where headers overlap: JAR and zip64 before plain zip,
# PKLITE and PKSFX before the MZ executable header, UTF-32 before UTF-16.
_HEAD_MATCHERS: List[Tuple[Signature, Matcher]] = [
    (Signature.AV1_IMAGE, avif),
    (Signature.JPEG_2000, jpeg2000),
    (Signature.PNG, png),
    (Signature.GIF, gif),
    (Signature.WEBP, webp),
    (Signature.TIFF, tiff),
    (Signature.ILBM, ilbm),
    (Signature.ICO, ico),
    (Signature.ELECTRONIC_ARTS_IFF, iff),
    (Signature.MPEG4, mp4),
    (Signature.QUICKTIME_M4V, m4v),
    (Signature.QUICKTIME_MOVIE, qtmov),
    (Signature.AVI, avi),
    (Signature.WINDOWS_MEDIA, wmv),
    (Signature.MPEG, mpeg),
    (Signature.FLASH_VIDEO, flv),
    (Signature.REAL_PLAYER, ivr),
    (Signature.MIDI, midi),
    (Signature.MP3, mp3),
    (Signature.OGG, ogg),
    (Signature.FLAC, flac),
    (Signature.WAVE, wave),
    (Signature.JAVA_ARCHIVE, jar),
    (Signature.ZIP64, zip64),
    (Signature.ZIP_MULTI_VOLUME, pkzip_multi),
    (Signature.PKLITE, pklite),
    (Signature.PKSFX, pksfx),
    (Signature.TAR, tar),
    (Signature.RAR5, rar5),
    (Signature.RAR, rar),
    (Signature.GZIP, gzip),
    (Signature.BZIP2, bzip2),
    (Signature.SEVEN_ZIP, seven_zip),
    (Signature.XZ, xz),
    (Signature.ZSTANDARD, zstd),
    (Signature.CABINET, cab),
    (Signature.FREEARC, freearc),
    (Signature.LHA, lha),
    (Signature.ZOO, zoo),
    (Signature.ARJ, arj),
    (Signature.DOS_KWAJ, kwaj),
    (Signature.DOS_SZDD, szdd),
    (Signature.MS_EXECUTABLE, ms_exe),
    (Signature.MS_COMPOUND_FILE, ms_compound),
    (Signature.CD_ISO9660, iso),
    (Signature.CD_NERO, nri),
    (Signature.CD_POWERISO, daa),
    (Signature.CD_ALCOHOL120, mdf),
    (Signature.WINDOWS_HELP, hlp),
    (Signature.BMP, bmp),
    (Signature.PCX, pcx),
    (Signature.ARC_SEA, arc_sea),
]

_TEXT_MATCHERS: List[Tuple[Signature, Matcher]] = [
    (Signature.UTF8_TEXT, utf8_bom),
    (Signature.UTF32_TEXT, utf32_bom),
    (Signature.UTF16_TEXT, utf16_bom),
]

# Whole-file mode can see trailers, the prefix mode only headers.
_FULL_MATCHERS: List[Tuple[Signature, Matcher]] = [
    (Signature.JPEG, jpeg),
    (Signature.PDF, pdf),
    (Signature.RTF, rtf),
]
_PREFIX_MATCHERS: List[Tuple[Signature, Matcher]] = [
    (Signature.JPEG, jpeg_header),
    (Signature.PDF, pdf_header),
    (Signature.RTF, rtf_header),
]


# Extensions shared by several signatures.
_SNIFF_PREFERRED: Dict[str, Signature] = {
    ".zip": Signature.ZIP,
    ".exe": Signature.MS_EXECUTABLE,
    ".rar": Signature.RAR,
    ".arc": Signature.FREEARC,
    ".txt": Signature.PLAIN_TEXT,
}


def _find(data: bytes, matchers: List[Tuple[Signature, Matcher]]) -> Signature:
    if not data:
        return Signature.UNKNOWN
    for sign, match in matchers:
        if match(data):
            return sign
    zipped = pkzip_method(data)
    if zipped is not None:
        return zipped
    for sign, match in _TEXT_MATCHERS:
        if match(data):
            return sign
    if ansi(data):
        return Signature.ANSI_TEXT
    if plain_text(data):
        return Signature.PLAIN_TEXT
    return sniff(data)


def sniff(data: bytes) -> Signature:
    """
    Generic content sniff used after every legacy matcher has failed.
    Maps the guessed extension back onto a Signature, else UNKNOWN.
    """
    kind = filetype.guess(data)
    if kind is None:
        return Signature.UNKNOWN
    ext = f".{kind.extension.lower()}"
    if ext in _SNIFF_PREFERRED:
        return _SNIFF_PREFERRED[ext]
    candidates = find_by_extension(f"file{ext}")
    if not candidates:
        logger.debug(f"Generic sniff found unmapped type {kind.mime}")
        return Signature.UNKNOWN
    return candidates[0]


def classify(data: bytes) -> Signature:
    """Classifies a whole file. Never raises, UNKNOWN is the fallback."""
    return _find(data or b"", _FULL_MATCHERS + _HEAD_MATCHERS)


def classify_prefix(data: bytes) -> Signature:
    """Classifies the first PREFIX_SIZE bytes using header-only matchers."""
    return _find((data or b"")[:PREFIX_SIZE], _PREFIX_MATCHERS + _HEAD_MATCHERS)


def classify_text(data: bytes) -> Signature:
    """
    Checks a sample against the text signatures only.
    Returns one of TEXTS or UNKNOWN.
    """
    sample = (data or b"")[:PREFIX_SIZE]
    if not sample:
        return Signature.UNKNOWN
    for sign, match in _TEXT_MATCHERS:
        if match(sample):
            return sign
    if ansi(sample):
        return Signature.ANSI_TEXT
    if plain_text(sample):
        return Signature.PLAIN_TEXT
    return Signature.UNKNOWN


def classify_file(path: str) -> Signature:
    try:
        with open(path, "rb") as f:
            return classify(f.read())
    except OSError as e:
        logger.warning(f"Cannot read {path} for classification: {e}")
        return Signature.UNKNOWN


def classify_file_prefix(path: str) -> Signature:
    try:
        with open(path, "rb") as f:
            return classify_prefix(f.read(PREFIX_SIZE))
    except OSError as e:
        logger.warning(f"Cannot read {path} for classification: {e}")
        return Signature.UNKNOWN


def find_by_extension(filename: str) -> List[Signature]:
    """
    Returns the signatures conventionally stored with the filename extension,
    in declaration order.
    """
    ext = Path(filename.strip()).suffix.lower()
    if not ext:
        return []
    return [sign for sign in Signature if ext in sign.extensions()]


def match_extension(filename: str, data: bytes) -> bool:
    """Reports whether the content agrees with the filename extension."""
    return classify(data) in find_by_extension(filename)


from pathlib import PurePosixPath
from typing import List, Tuple

PRIORITY_EXTS = (".nfo", ".txt", ".unp", ".doc")
CANDIDATE_EXTS = (".diz", ".asc", ".1st", ".dox", ".me", ".cap", ".ans", ".pcb")

# Metadata and BBS or website advertising inserted into releases.
IGNORED_NAMES = ("file_id.diz", "scene.org", "scene.org.txt")


def _ext(name: str) -> str:
    return PurePosixPath(name.lower()).suffix


def _rank(name: str, exts: Tuple[str, ...]) -> int:
    ext = _ext(name)
    return exts.index(ext) if ext in exts else len(exts)


def sort_readmes(names: List[str], compact: bool = True) -> List[str]:
    """
    Orders possible readme files: shallowest path first, then priority
    extension, then candidate extension, then extension and name.
    With compact, names without a known text extension are dropped.
    """
    def key(name: str):
        lower = name.lower()
        return (
            lower.count("/"),
            _rank(lower, PRIORITY_EXTS),
            _rank(lower, CANDIDATE_EXTS),
            _ext(lower),
            lower,
        )

    paths = []
    for name in sorted((n.strip().replace("\\", "/") for n in names), key=key):
        if not name:
            continue
        if PurePosixPath(name).name.lower() in IGNORED_NAMES:
            continue
        ext = _ext(name)
        if compact and ext not in PRIORITY_EXTS and ext not in CANDIDATE_EXTS:
            continue
        paths.append(name)
    return paths


def suggest_readme(archive: str, group: str, names: List[str]) -> str:
    """
    Returns the most likely readme in an archive listing, or "".
    A file named after the release group or the archive wins, then any
    file with a priority extension, then the first text file.
    """
    finds = sort_readmes(names)
    if not finds:
        return ""
    if len(finds) == 1:
        return finds[0]

    base = PurePosixPath(archive.replace("\\", "/")).stem
    stems = [s.lower() for s in (group.strip(), base) if s]
    for exts in (PRIORITY_EXTS, CANDIDATE_EXTS):
        for ext in exts:
            for name in finds:
                if PurePosixPath(name).name.lower() in (f"{stem}{ext}" for stem in stems):
                    return name

    for name in finds:
        if _ext(name) in PRIORITY_EXTS:
            return name
    return finds[0]

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from app.core.config_loader import load_config
from app.core.content_lister import LIST_LIMIT, inspect_artifact
from app.core.extraction_cache import ExtractionCache
from app.core.inspection import signatures
from app.core.readme.render import ArtifactPaths, ReadmeDecodeError, render_readme
from app.core.stats import StatsCache, directory_counter
from app.models.artifacts import ArtifactSource

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="artifact-inspector", description="Inspect legacy artifact files.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("classify", help="Print the file signature.")
    p.add_argument("path")
    p.add_argument("--prefix", action="store_true", help="Only read the first 512 bytes.")

    p = sub.add_parser("list", help="Extract an archive and list its content.")
    p.add_argument("path")
    p.add_argument("--filename", help="Artifact filename used as the cache key.")
    p.add_argument("--platform", default="")
    p.add_argument("--limit", type=int, default=None)

    p = sub.add_parser("readme", help="Render a readme in both legacy encodings.")
    p.add_argument("path")
    p.add_argument("--platform", default="text")
    p.add_argument("--section", default="")
    p.add_argument("--magic", default="")
    p.add_argument("--encoding", choices=["latin1", "cp437"], default=None)

    p = sub.add_parser("stats", help="Count the download directory by category.")
    p.add_argument("--download-dir", default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config_status = load_config()
    config = config_status["data"] if config_status["status"] == "OK" else {}
    level = str(config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if config_status["status"] != "OK":
        logger.warning(f"Using defaults, config not loaded: {config_status['error']}")

    if args.command == "classify":
        sign = signatures.classify_file_prefix(args.path) if args.prefix else signatures.classify_file(args.path)
        print(f"{sign.label} ({sign.title}, {sign.category().value})")
        return 0

    if args.command == "list":
        cache = ExtractionCache.from_config(config)
        limit = args.limit or config.get("extraction", {}).get("list_limit", LIST_LIMIT)
        listing = inspect_artifact(cache, args.path, args.filename, args.platform, limit)
        print(listing.text())
        return 1 if listing.error else 0

    if args.command == "readme":
        source = ArtifactSource(filename=os.path.basename(args.path), platform=args.platform,
                                section=args.section, magic=args.magic, path=args.path)
        try:
            result = render_readme(source, ArtifactPaths.from_config(config))
        except ReadmeDecodeError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        if not result.available:
            print(f"no readme: {result.reason}", file=sys.stderr)
            return 1
        use_latin1 = args.encoding == "latin1" or (args.encoding is None and result.latin1_checked)
        print(result.latin1_text if use_latin1 else result.cp437_text)
        logger.info(f"{result.encoding.value}: {result.line_count} lines, {result.max_line_width} columns")
        return 0

    if args.command == "stats":
        download_dir = args.download_dir or config.get("paths", {}).get("download_dir")
        if not download_dir:
            print("error: no download directory configured", file=sys.stderr)
            return 2
        snapshot = StatsCache(directory_counter(download_dir)).refresh()
        for key, val in snapshot.describe().items():
            print(f"{key}: {val}")
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())

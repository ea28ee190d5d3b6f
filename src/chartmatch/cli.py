"""Command line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from chartmatch.config import load_config, override_config
from chartmatch.errors import InputMissingError, ScanError
from chartmatch.features.ahash import EMPTY_FINGERPRINT, Fingerprint, fingerprint_file
from chartmatch.logging_utils import setup_logging
from chartmatch.profile import profile_scan
from chartmatch.session import ScanSession
from chartmatch.similarity import fingerprint_similarity, hamming_distance

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="chartmatch")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--log-level", default=None, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Rank a folder of images against a reference image")
    scan_parser.add_argument("--reference", help="Reference image path")
    scan_parser.add_argument("--folder", help="Folder of candidate images (searched recursively)")
    scan_parser.add_argument("--top-k", type=int)
    scan_parser.add_argument("--workers", type=int, help="Worker threads for hashing candidates")
    scan_parser.add_argument("--progress", action="store_true", default=None, help="Show a progress bar")
    scan_parser.add_argument("--show-skipped", action="store_true", help="List files that could not be decoded")

    hash_parser = subparsers.add_parser("hash", help="Print the average hash of image(s)")
    hash_parser.add_argument("--image", dest="images", nargs="+", required=True)

    compare_parser = subparsers.add_parser("compare", help="Compare two images")
    compare_parser.add_argument("first")
    compare_parser.add_argument("second")

    profile_parser = subparsers.add_parser("profile", help="Profile a scan with cProfile")
    profile_parser.add_argument("--reference", required=True)
    profile_parser.add_argument("--folder", required=True)
    profile_parser.add_argument("--output", default=None)

    args = parser.parse_args(argv)

    cfg = load_config(args.config)
    cfg = override_config(
        cfg,
        {
            "log_level": args.log_level,
            "top_k": getattr(args, "top_k", None),
            "num_workers": getattr(args, "workers", None),
            "progress": getattr(args, "progress", None),
        },
    )
    setup_logging(cfg.log_level, cfg.log_file)
    resample = cfg.resample_filter()

    if args.command == "scan":
        session = ScanSession()
        if args.reference:
            session.select_reference(args.reference)
        if args.folder:
            session.select_folder(args.folder)
        try:
            results = session.scan(cfg)
        except InputMissingError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        except ScanError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        if not results:
            print("No matches yet")
        for result in results:
            print(f"{result.similarity * 100:.1f}%\t{result.path}")
        if args.show_skipped:
            for skipped in session.skipped:
                print(f"skipped\t{skipped.path}\t{skipped.reason}")
    elif args.command == "hash":
        status = 0
        for path in args.images:
            fingerprint = _safe_fingerprint(path, cfg.hash_size, resample)
            if not fingerprint:
                print(f"unreadable\t{path}", file=sys.stderr)
                status = 1
                continue
            print(f"{fingerprint.to_hex()}\t{fingerprint}\t{path}")
        return status
    elif args.command == "compare":
        first = _safe_fingerprint(args.first, cfg.hash_size, resample)
        second = _safe_fingerprint(args.second, cfg.hash_size, resample)
        for path, fingerprint in ((args.first, first), (args.second, second)):
            if not fingerprint:
                print(f"unreadable\t{path}", file=sys.stderr)
                return 1
        print(f"distance\t{hamming_distance(first, second)}")
        print(f"similarity\t{fingerprint_similarity(first, second):.4f}")
    elif args.command == "profile":
        try:
            out = profile_scan(cfg, args.reference, args.folder, args.output)
        except (InputMissingError, ScanError) as exc:
            print(str(exc), file=sys.stderr)
            return 1
        print(out)
    else:
        parser.print_help()
    return 0


def _safe_fingerprint(path: str, hash_size: int, resample) -> Fingerprint:
    try:
        return fingerprint_file(path, hash_size, resample)
    except OSError as exc:
        logger.error("Cannot read %s: %s", path, exc)
        return EMPTY_FINGERPRINT


if __name__ == "__main__":
    sys.exit(main())

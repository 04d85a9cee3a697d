#!/usr/bin/env python3
"""Entry point: harvest matching postings and apply to each one."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from autoapply.config import PROFILE_PATH
from autoapply.errors import AutoApplyError
from autoapply.log import configure, get_logger

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Harvest careers-site postings and auto-apply.")
    parser.add_argument("--profile", type=Path, default=PROFILE_PATH, help="YAML search profile")
    parser.add_argument("--limit", type=int, default=None, help="apply to at most N links")
    parser.add_argument("--harvest-only", action="store_true", help="list links, do not apply")
    parser.add_argument("--no-report", action="store_true", help="skip writing the Markdown report")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on the console")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        configure("DEBUG")

    if not args.profile.exists():
        print()
        print(f"  No profile found at {args.profile}.")
        print("  Copy config/profile.yaml and adjust the search section.")
        print()
        return 1

    from autoapply.agent import run

    try:
        result = run(
            profile_path=args.profile,
            limit=args.limit,
            harvest_only=args.harvest_only,
            write_report=not args.no_report,
        )
    except AutoApplyError as exc:
        log.error("%s", exc)
        return 1
    except Exception as exc:
        log.exception("Run aborted: %s", exc)
        return 1

    if args.harvest_only:
        for link in result.get("links", []):
            print(link)
    log.info("  Links found: %d", result["links_found"])
    log.info("  Processed: %d", result["links_processed"])
    log.info("  Submitted: %d", result["submitted"])
    log.info("  Already applied: %d", result["already_applied"])
    log.info("  Abandoned: %d", result["abandoned"])
    if result["report_path"]:
        log.info("  Report: %s", result["report_path"])
    return 0


if __name__ == "__main__":
    sys.exit(main())

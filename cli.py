#!/usr/bin/env python3
import argparse
import sys

from upgrade_guide.orchestrator import run_once


def main():
    parser = argparse.ArgumentParser(description="Upgrade Guide CLI")
    parser.add_argument("--config", help="Path to YAML config")
    parser.add_argument("--framework", help="Framework to upgrade (Next.JS, Angular)")
    parser.add_argument("--from", dest="from_version", type=float, help="Current version, e.g. 21.7")
    parser.add_argument("--to", dest="to_version", type=float, help="Target version, e.g. 22.0")
    parser.add_argument("--catalog-dir", dest="catalog_dir", help="Directory with *-upgrade-steps.json catalogs")
    parser.add_argument("--out-dir", dest="out_dir", help="Write outputs to this directory instead of stdout")
    parser.add_argument("--format", dest="formats", action="append", choices=["md", "json"], help="Output format (repeatable)")
    parser.add_argument("--details", dest="show_details", action="store_true", help="Include detailed descriptions")
    parser.add_argument("--no-details", dest="show_details", action="store_false", help="Only list step titles")
    parser.set_defaults(show_details=None)
    args = parser.parse_args()

    overrides = {
        "framework": args.framework,
        "from_version": args.from_version,
        "to_version": args.to_version,
        "catalog_dir": args.catalog_dir,
        "out_dir": args.out_dir,
        "formats": args.formats,
        "show_details": args.show_details,
    }

    try:
        result = run_once(args.config, overrides=overrides)
    except ValueError as e:
        parser.exit(2, f"error: {e}\n")

    if not result["files"]:
        sys.stdout.write(result["markdown"])


if __name__ == "__main__":
    main()

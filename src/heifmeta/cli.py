"""
Command-line interface for heifmeta.

Usage:
  heifmeta photo.heic                        # Default mode
  heifmeta --full photo.heic                 # Every tag and the box inventory
  heifmeta -o report.json *.heic             # JSON export
  heifmeta -q *.heic                         # Quick summary
  heifmeta --dump-exif exif.bin photo.heic   # Write EXIF+ICC bytes
"""

from __future__ import annotations

import argparse
import sys

from heifmeta._version import __version__
from heifmeta.config import get_config
from heifmeta.exceptions import HeifMetaError
from heifmeta.formatters import (
    format_default,
    format_full,
    format_json_list,
    format_quiet,
)
from heifmeta.heif.assembler import assemble_exif_and_icc
from heifmeta.icc.display_p3 import is_display_p3
from heifmeta.reader import read_metadata


def main(argv: list[str] | None = None) -> int:
    """Main entry point for heifmeta CLI."""
    parser = argparse.ArgumentParser(
        prog="heifmeta",
        description="HEIF metadata toolkit - extract EXIF and ICC data, detect Display P3.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  (default)    Container summary, EXIF items, ICC profile and Display P3 check
  --full       Every HEIF and ICC tag plus the box inventory
  -q/--quiet   Quick summary only

Export:
  -o FILE          Save all reports as a JSON array
  --dump-exif FILE Write the EXIF bytes followed by the ICC profile (one input)

Configuration:
  ~/.heifmeta/config.yaml or HEIFMETA_* environment variables

Examples:
  heifmeta photo.heic                        # Default mode
  heifmeta --full photo.heic                 # Full details
  heifmeta -o report.json *.heic             # JSON export
  heifmeta -q *.heic                         # Quick summary
  heifmeta --dump-exif exif.bin photo.heic   # Raw bytes
        """,
    )
    parser.add_argument("files", nargs="+", help="HEIF file(s) to read")
    parser.add_argument("-o", "--output", help="Save report to JSON file")
    parser.add_argument(
        "--dump-exif",
        metavar="PATH",
        help="Write the combined EXIF and ICC bytes of a single file to PATH",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--full",
        action="store_true",
        help="Full mode: show every tag and the box inventory",
    )
    mode_group.add_argument("-q", "--quiet", action="store_true", help="Quick summary only")

    args = parser.parse_args(argv)

    if args.dump_exif and len(args.files) != 1:
        print("Error: --dump-exif requires exactly one input file", file=sys.stderr)
        return 1

    try:
        p3_settings = get_config().display_p3
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    all_metadata = []
    errors = 0

    for file_path in args.files:
        try:
            metadata = read_metadata(file_path)
            all_metadata.append(metadata)
            p3 = is_display_p3(metadata, p3_settings)

            if args.quiet:
                print(format_quiet(metadata, p3))
            elif args.full:
                print(format_full(metadata, p3))
            else:
                print(format_default(metadata, p3))
                print()

            if args.dump_exif:
                data = assemble_exif_and_icc(metadata.exif_payloads, metadata.icc_payloads)
                if data is None:
                    print(f"Error: no EXIF or ICC data in {file_path}", file=sys.stderr)
                    errors += 1
                else:
                    with open(args.dump_exif, "wb") as f:
                        f.write(data)
                    print(f"EXIF data saved to: {args.dump_exif} ({len(data)} bytes)")

        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            errors += 1
        except (HeifMetaError, ValueError, OSError) as e:
            print(f"Error reading {file_path}: {e}", file=sys.stderr)
            errors += 1

    # JSON export
    if args.output and all_metadata:
        json_output = format_json_list(all_metadata)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(json_output)
        print(f"Report saved to: {args.output}")

    return 1 if errors > 0 else 0


if __name__ == "__main__":
    sys.exit(main())

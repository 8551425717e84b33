"""ecmacompat CLI: check a feature catalog against target runtimes."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import List, Optional

from .codes import ReasonCode

EXIT_OK = 0
EXIT_UNSUPPORTED = 1
EXIT_ERROR = 2


def _render_text(report) -> str:
    lines = []
    targets = ", ".join(str(t) for t in report.targets)
    lines.append(f"Targets: {targets}")
    if report.ok:
        lines.append(f"[OK] All {report.checked_count} feature(s) supported")
        return "\n".join(lines)

    lines.append(f"[UNSUPPORTED] {len(report.unsupported)} of {report.checked_count} feature(s)")
    for finding in report.unsupported:
        if finding.description:
            lines.append(f"  {finding.name}: {finding.description}")
        else:
            lines.append(f"  {finding.name}")
        for failure in finding.failures:
            if failure.reason is ReasonCode.NOT_SUPPORTED:
                detail = "not supported"
            else:
                detail = f"added in {failure.version_added}"
            lines.append(f"    - {failure.target}: {detail}")
    return "\n".join(lines)


def _collect_targets(args) -> List:
    from .targets import parse_targets
    from ._internal.io.catalog import load_json

    entries: list = list(args.targets or [])
    if args.targets_file is not None:
        file_entries = load_json(args.targets_file)
        if not isinstance(file_entries, list):
            raise ValueError(f"Targets file must contain a JSON list: {args.targets_file}")
        entries.extend(file_entries)
    if not entries:
        raise ValueError("No targets given. Use --targets and/or --targets-file.")
    return parse_targets(entries, skip_unknown=not args.strict_targets)


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point for ecmacompat commands."""
    try:
        ecmacompat_version = get_version("ecmacompat")
    except PackageNotFoundError:
        ecmacompat_version = "dev"

    parser = argparse.ArgumentParser(
        prog="ecmacompat",
        description="ecmacompat: find language features unsupported by target runtimes"
    )
    parser.add_argument("--version", action="version", version=f"ecmacompat {ecmacompat_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging."
    )
    parent_parser.add_argument(
        "--targets",
        nargs="+",
        default=None,
        help="Targets as browserslist entries, e.g. 'chrome 73' 'and_chr 120' 'node 12.0.0'"
    )
    parent_parser.add_argument(
        "--targets-file",
        type=Path,
        default=None,
        help="JSON list of browserslist strings or {\"name\", \"version\"} objects"
    )
    parent_parser.add_argument(
        "--strict-targets",
        action="store_true",
        help="Fail on targets with no compat-data family instead of skipping them"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Report catalog features unsupported by the targets",
        parents=[parent_parser]
    )
    check_parser.add_argument(
        "--catalog",
        type=Path,
        required=True,
        help="Path to feature catalog JSON"
    )
    check_parser.add_argument(
        "--compat-data",
        type=Path,
        required=True,
        help="Path to browser-compat-data JSON"
    )
    check_parser.add_argument(
        "--aliases",
        type=Path,
        default=None,
        help="JSON object of variant family -> base family overrides"
    )
    check_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format"
    )
    check_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write compat_report.json to this directory instead of stdout"
    )

    # targets command
    subparsers.add_parser(
        "targets",
        help="Show how targets map to compat-data families",
        parents=[parent_parser]
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(EXIT_ERROR)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from .kernel.compatibility import SparseCompatDataError

    if args.command == "check":
        from .api import check_catalog
        from ._internal.canonical_json import canonical_dumps

        try:
            targets = _collect_targets(args)
            report = check_catalog(
                args.catalog.resolve(),
                args.compat_data.resolve(),
                [t.model_dump() for t in targets],
                aliases=args.aliases.resolve() if args.aliases else None,
            )
        except (SparseCompatDataError, ValueError) as e:
            # ValueError covers CatalogError, TargetParseError and bad alias files
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(EXIT_ERROR)

        if args.output_dir is not None:
            output_dir = args.output_dir.resolve()
            output_dir.mkdir(parents=True, exist_ok=True)
            report_out = output_dir / "compat_report.json"
            report_out.write_text(canonical_dumps(report.model_dump(mode="json")) + "\n", encoding="utf-8")
            if not args.quiet:
                print("[OK] Check complete")
                print(f"  Report: {report_out}")
        elif not args.quiet:
            if args.format == "json":
                print(canonical_dumps(report.model_dump(mode="json")))
            else:
                print(_render_text(report))

        sys.exit(EXIT_OK if report.ok else EXIT_UNSUPPORTED)
    elif args.command == "targets":
        try:
            targets = _collect_targets(args)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(EXIT_ERROR)
        if not args.quiet:
            for target in targets:
                print(target)
        sys.exit(EXIT_OK)
    else:
        parser.print_help()
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()

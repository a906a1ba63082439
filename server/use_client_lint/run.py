import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, TextIO

import uvicorn

from use_client_lint.config import RULE_ID
from use_client_lint.models import LintReport
from use_client_lint.services.options import ConfigError, load_options
from use_client_lint.services.project_scan import lint_paths


def format_stylish(report: LintReport) -> str:
    """ESLint's default formatter: one block per file with problems, then a summary."""
    lines: list[str] = []
    problems = 0
    for file_report in report.files:
        if not file_report.diagnostics and file_report.error is None:
            continue
        lines.append(file_report.filename)
        if file_report.error is not None:
            problems += 1
            lines.append(f"  0:0  error  Parsing error: {file_report.error}")
        for d in file_report.diagnostics:
            problems += 1
            lines.append(f"  {d.line}:{d.column}  {d.severity}  {d.message}  {d.rule_id}")
        lines.append("")

    if problems:
        noun = "problem" if problems == 1 else "problems"
        lines.append(f"✖ {problems} {noun} ({problems} errors, 0 warnings)")
    if report.fixed_count:
        lines.append(f"Fixed {report.fixed_count} file(s).")
    return "\n".join(lines)


def format_json(report: LintReport) -> str:
    return report.model_dump_json(by_alias=True, indent=2)


def _option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Rule options given as flags; only flags actually passed override the options file."""
    overrides: Dict[str, Any] = {}
    if args.allowed_server_hook:
        overrides["allowed_server_hooks"] = args.allowed_server_hook
    if args.strict_directive_position:
        overrides["strict_directive_position"] = True
    if args.no_function_identifier_props:
        overrides["function_identifier_props"] = False
    if args.client_namespace:
        overrides["client_component_namespaces"] = args.client_namespace
    if args.react_pragma:
        overrides["react_pragma"] = args.react_pragma
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="use-client-lint",
        description=(
            f"Check that React modules carry the 'use client' directive exactly when they need it "
            f"(the `{RULE_ID}` rule). By default, lints the current working directory."
        ),
    )
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to lint (default: current directory).",
    )
    parser.add_argument("--fix", action="store_true", help="Write fixes back to the files.")
    parser.add_argument(
        "--format",
        choices=("stylish", "json"),
        default="stylish",
        help="Output format (default: stylish).",
    )
    parser.add_argument(
        "--allowed-server-hook",
        action="append",
        metavar="NAME",
        help="Hook that also works in Server Components. May be repeated.",
    )
    parser.add_argument(
        "--strict-directive-position",
        action="store_true",
        help="Only accept the directive at the top of the file.",
    )
    parser.add_argument(
        "--no-function-identifier-props",
        action="store_true",
        help="Do not treat `prop={handler}` with a local function as a callback prop.",
    )
    parser.add_argument(
        "--client-namespace",
        action="append",
        metavar="NAME",
        help="JSX namespace whose components always need the client, e.g. motion. May be repeated.",
    )
    parser.add_argument("--react-pragma", metavar="NAME", help="React namespace for class components (default: React).")
    parser.add_argument("--config", metavar="FILE", help="Options file (default: nearest .use-client-lint.json).")
    parser.add_argument("--jobs", type=int, default=1, help="Worker processes for large projects (default: 1).")
    parser.add_argument("--verbose", action="store_true", help="Log debugging output to stderr.")
    parser.add_argument("--serve", action="store_true", help="Start the HTTP API instead of linting.")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind the server to (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000).",
    )
    return parser


def main(argv: list[str] | None = None, stdout: TextIO | None = None) -> int:
    """
    Entry point for the CLI.

    Returns 1 when any problem is reported or a file could not be linted.
    """
    args = build_parser().parse_args(argv)
    out = stdout or sys.stdout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        print(f"\U0001f680 Starting server at http://{args.host}:{args.port}", file=out)
        print("   Press Ctrl+C to stop.", file=out)
        uvicorn.run(
            "use_client_lint.main:app",
            host=args.host,
            port=args.port,
            reload=False,
        )
        return 0

    paths = [Path(p) for p in args.paths]
    for path in paths:
        if not path.exists():
            raise SystemExit(f"Path does not exist: {path}")

    try:
        options = load_options(
            config_path=Path(args.config) if args.config else None,
            start=paths[0],
            overrides=_option_overrides(args),
        )
    except ConfigError as e:
        raise SystemExit(str(e))

    report = lint_paths(paths, options, fix=args.fix, jobs=max(1, args.jobs))

    text = format_json(report) if args.format == "json" else format_stylish(report)
    if text:
        print(text, file=out)

    failed = any(f.error is not None for f in report.files)
    return 1 if report.error_count or failed else 0


if __name__ == "__main__":
    sys.exit(main())

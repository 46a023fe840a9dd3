import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .core.filters import LineFilter, parse_range
from .core.models import LineRecord
from .core.reader import TextFile, open_textfile
from .core.scanner import DEFAULT_EXCLUDE_DIRS, FileInspector, configure_logging, iter_paths

VERSION = "0.1"


def _range_arg(value: str) -> str:
    try:
        parse_range(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lines",
        description="Print lines of text files, whatever their newline convention.",
    )
    p.add_argument("-v", "--version", action="version", version=f"LINES version {VERSION}")
    sub = p.add_subparsers(dest="mode", required=True)

    # show mode
    s = sub.add_parser("show", help="Print the lines of one or more files.")
    s.add_argument("files", type=Path, nargs="+", help="Files to print.")
    s.add_argument("-n", "--number", action="store_true", help="Number the lines, starting at 1.")
    s.add_argument("-r", "--range", type=_range_arg, default=None, help="Print only lines in the range <a>:<b>, e.g. --range 4:16.")
    s.add_argument("-s", "--search", default=None, help="Print only lines containing this text, e.g. --search dog.")
    s.add_argument("--errors", choices=("replace", "strict"), default="replace", help="How undecodable UTF-8 bytes are handled.")
    s.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    # info mode
    i = sub.add_parser("info", help="Report encoding and newline convention of files.")
    i.add_argument("paths", type=Path, nargs="+", help="Files or directories to inspect.")
    i.add_argument("--include", default="*", help="Glob(s) to include when walking directories, comma-separated.")
    i.add_argument("--exclude", default=",".join(DEFAULT_EXCLUDE_DIRS), help="Dir names to exclude, comma-separated.")
    i.add_argument("--count-lines", action="store_true", help="Also count the lines of supported files.")
    i.add_argument("--json", action="store_true", help="Print reports as a JSON array.")
    i.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    i.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    return p


def print_lines(textfile: TextFile, line_filter: LineFilter, number: bool, errors: str) -> None:
    for record in iter_records(textfile, errors):
        if line_filter.past_range(record.line_num):
            break
        if not line_filter.accepts(record.line_num, record.text):
            continue
        if number:
            print(f"{record.line_num:3d}| {record.text}")
        else:
            print(f"| {record.text}")


def iter_records(textfile: TextFile, errors: str = "replace"):
    for line_num, text in enumerate(textfile.lines(errors=errors), start=1):
        yield LineRecord(line_num=line_num, text=text)


def run_show(args: argparse.Namespace) -> int:
    logger = configure_logging(verbose=args.verbose)
    line_filter = LineFilter.from_range(args.range, search=args.search)
    status = 0
    for path in args.files:
        textfile = open_textfile(path, logger=logger)
        if textfile is None:
            print(f"{path} : unable to open", file=sys.stderr)
            status = 1
            continue
        with textfile:
            print(f"{path} : {textfile.encoding.label} : {textfile.newline.label}")
            if textfile.is_supported:
                try:
                    print_lines(textfile, line_filter, args.number, args.errors)
                except UnicodeDecodeError as exc:
                    print(f"{path} : invalid UTF-8 ({exc.reason})", file=sys.stderr)
                    status = 1
            else:
                print("  << not supported >>")
        print()
    return status


def run_info(args: argparse.Namespace) -> int:
    logger = configure_logging(verbose=args.verbose)
    paths = list(
        iter_paths(
            args.paths,
            include_globs=[g.strip() for g in args.include.split(",") if g.strip()],
            exclude_dirs=[e.strip() for e in args.exclude.split(",") if e.strip()],
        )
    )
    inspector = FileInspector(
        count_lines=args.count_lines,
        logger=logger,
        verbose=args.verbose,
        show_progress=not args.no_progress,
    )
    reports = inspector.inspect_all(paths)

    if args.json:
        print(json.dumps([r.to_dict() for r in reports], indent=2))
    else:
        for r in reports:
            if r.error:
                print(f"{r.path} : {r.error}")
                continue
            parts = [str(r.path), r.encoding.label, r.newline.label]
            if not r.supported:
                parts.append("not supported")
            if r.charset_hint:
                parts.append(f"charset={r.charset_hint}")
            if r.line_count is not None:
                parts.append(f"lines={r.line_count}")
            print(" : ".join(parts))
    return 1 if any(r.error for r in reports) else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.mode == "show":
        return run_show(args)
    elif args.mode == "info":
        return run_info(args)
    else:
        parser.print_help()
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

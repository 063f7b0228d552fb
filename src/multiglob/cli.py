#!/usr/bin/env python3
"""
multiglob: match `*`, `?` and `**` globs against directory trees and paths

Common usage:
  multiglob list 'src/**/*.py'
  multiglob list '/var/log/*.log' '/var/log/**/*.gz'
  multiglob list -i --type file '**/*.TXT'
  multiglob test 'docs/**/*.md' docs/index.md README.md

Patterns sharing a base directory are matched in a single walk. Quote
patterns so the shell does not expand them first.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

import pathspec
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from multiglob.config import (
    ENTRY_TYPES,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from multiglob.excludes import (
    build_exclude_spec,
    excluded_directories,
    filter_matches,
    load_ignore_file,
)
from multiglob.globber import Globber
from multiglob.patterns import split_pattern
from multiglob.walker import Match

log = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the multiglob tool."""

    command: str | None
    patterns: list[str] = field(default_factory=list)
    glob: str | None = None
    paths: list[str] = field(default_factory=list)
    ignore_case: bool = False
    entry_type: str = "any"
    exclude: list[str] = field(default_factory=list)
    respect_ignore_file: bool = True
    verbose: int = 0
    version: bool = False


def _add_matching_args(parser: argparse.ArgumentParser) -> None:
    # Defaults are None so that explicitly passed flags can be told apart
    # from unset ones when merging with the config file.
    parser.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        default=None,
        help="Compare names case-insensitively",
    )


def _build_parser() -> argparse.ArgumentParser:
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="multiglob",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more details to stderr (repeat for debug output)",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    list_parser = subparsers.add_parser(
        "list", help="Print entries matching one or more glob patterns"
    )
    list_parser.add_argument("patterns", nargs="+", metavar="PATTERN", help="Glob patterns")
    _add_matching_args(list_parser)
    list_parser.add_argument(
        "--type",
        dest="entry_type",
        choices=ENTRY_TYPES,
        default=None,
        help="Only list files or only directories (default: any)",
    )
    list_parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Gitignore-style pattern of results to leave out (e.g. 'build/'). Can be repeated",
    )
    list_parser.add_argument(
        "--no-ignore-file",
        action="store_false",
        dest="respect_ignore_file",
        default=None,
        help="Do not read .multiglobignore files",
    )

    test_parser = subparsers.add_parser(
        "test", help="Check whether paths match a glob, without touching the filesystem"
    )
    test_parser.add_argument("glob", metavar="GLOB", help="Glob expression")
    test_parser.add_argument("paths", nargs="+", metavar="PATH", help="Paths to check")
    _add_matching_args(test_parser)

    return parser


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` names the
    `Options` fields the user set on the command line.
    """
    opts = _build_parser().parse_args(args)

    options = Options(command=opts.command, verbose=opts.verbose, version=opts.version)
    explicit_flags: set[str] = set()

    for name in ("patterns", "glob", "paths"):
        if hasattr(opts, name):
            setattr(options, name, getattr(opts, name))

    for name in ("ignore_case", "entry_type", "exclude", "respect_ignore_file"):
        value = getattr(opts, name, None)
        if value is not None:
            setattr(options, name, value)
            explicit_flags.add(name)

    return options, explicit_flags


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


def _group_by_base(patterns: list[str]) -> dict[str, list[str]]:
    """Split each pattern into base and remainder, grouping remainders by base."""
    groups: dict[str, list[str]] = {}
    for pattern in patterns:
        base, remainder = split_pattern(pattern)
        if not remainder:
            log.warning("Pattern %r has nothing to match below %r; skipping", pattern, base)
            continue
        groups.setdefault(base, []).append(remainder)
    return groups


def _wanted(match: Match, entry_type: str) -> bool:
    if entry_type == "file":
        return not match.is_dir
    if entry_type == "dir":
        return match.is_dir
    return True


def _list_matches(options: Options) -> int:
    for base, globs in _group_by_base(options.patterns).items():
        log.info("Matching %s in %s", ", ".join(globs), base)
        globber = Globber(*globs, ignore_case=options.ignore_case)

        specs: list[pathspec.PathSpec] = []
        exclude_spec = build_exclude_spec(options.exclude)
        if exclude_spec is not None:
            specs.append(exclude_spec)
        if options.respect_ignore_file:
            ignore_spec = load_ignore_file(Path(base))
            if ignore_spec is not None:
                specs.append(ignore_spec)

        prune = excluded_directories(Path(base), specs)
        matches = filter_matches(globber.get_matches(base, prune=prune), Path(base), specs)
        for match in sorted(matches, key=lambda m: m.path):
            if _wanted(match, options.entry_type):
                print(match.path)
    return 0


def _test_paths(options: Options) -> int:
    if options.glob is None:
        raise ValueError("The test command needs a glob expression")
    globber = Globber(options.glob, ignore_case=options.ignore_case)
    console = Console()
    all_matched = True

    for path in options.paths:
        if globber.is_match(path):
            label = Text("MATCH", style="green")
        else:
            label = Text("NOT MATCH", style="red")
            all_matched = False
        console.print(Text.assemble(label, f": {path}"), soft_wrap=True)

    return 0 if all_matched else 1


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the multiglob CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors or, for `test`, paths
        that did not match)
    """
    options, explicit_flags = _parse_args(args)
    _configure_logging(options.verbose)

    if options.version:
        try:
            version = importlib.metadata.version("multiglob")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if options.command is None:
        print(
            "Error: No command given. Use 'multiglob list PATTERN...' or"
            " 'multiglob test GLOB PATH...' (--help for more options).",
            file=sys.stderr,
        )
        return 1

    config_path = find_config_file(Path.cwd())
    if config_path:
        log.debug("Using config file %s", config_path)
        merge_cli_with_config(options, load_config(config_path), explicit_flags)

    try:
        if options.command == "list":
            return _list_matches(options)
        return _test_paths(options)
    except ValueError as e:
        # Invalid combinations of expressions and search origins.
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        # A directory that could not be listed aborts the listing.
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

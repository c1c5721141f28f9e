#!/usr/bin/env python3
"""
ciselect: Select the test files and parallel test commands for a CI run

Common usage:
  ciselect --profile default
  ciselect --profile approvals --root path/to/repo
  ciselect --profile default --print

Reads `solano.yml` (or `config/solano.yml`, `tddium.yml`, `config/tddium.yml`),
matches the repository's files against the profile's include/exclude patterns,
and writes the selection to `test_list.json`. Without --profile, the profile
named by `next_profile` in `solano-plan-variables.json` is used.
If neither names one, --default-profile gives the fallback (for example `default`).
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from ciselect.config import YamlConfigLoader, resolve_profile_name
from ciselect.listing import FileLister, FileListingError, FindFileLister, WalkFileLister
from ciselect.plan import DEFAULT_OUTPUT, build_plan, write_plan

logger = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the ciselect tool."""

    profile: str | None
    default_profile: str | None
    root: str
    output: str
    lister: str
    respect_gitignore: bool
    print_plan: bool
    verbose: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> Options:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-p",
        "--profile",
        type=str,
        default=None,
        help="Configuration profile to select tests for",
    )
    parser.add_argument(
        "--default-profile",
        type=str,
        default=None,
        dest="default_profile",
        metavar="NAME",
        help="Profile to use when neither --profile nor the plan variables file names one",
    )
    parser.add_argument(
        "-r",
        "--root",
        type=str,
        default=".",
        help="Repository root holding the configuration and files (default: %(default)s)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        help="Output file, relative to the repository root (default: %(default)s)",
    )
    parser.add_argument(
        "--lister",
        type=str,
        choices=["walk", "find"],
        default="walk",
        help="How to list repository files: walk the tree in-process, or run `find` "
        "(default: %(default)s)",
    )
    parser.add_argument(
        "--respect-gitignore",
        action="store_true",
        dest="respect_gitignore",
        help="Skip files ignored by .gitignore (only applies to the walk lister)",
    )
    parser.add_argument(
        "--print",
        action="store_true",
        dest="print_plan",
        help="Print the plan JSON to stdout instead of writing the output file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log selection details to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    return Options(
        profile=opts.profile,
        default_profile=opts.default_profile,
        root=opts.root,
        output=opts.output,
        lister=opts.lister,
        respect_gitignore=opts.respect_gitignore,
        print_plan=opts.print_plan,
        verbose=opts.verbose,
        version=opts.version,
    )


def _make_lister(options: Options, root: Path) -> FileLister:
    if options.lister == "find":
        return FindFileLister(root)
    return WalkFileLister(root, respect_gitignore=options.respect_gitignore)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the ciselect CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options = _parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("ciselect")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    root = Path(options.root)
    try:
        profile_name = resolve_profile_name(options.profile, root, options.default_profile)
        logger.info("Using profile %r", profile_name)

        loader = YamlConfigLoader(root)
        config = loader.load()
        logger.info("Loaded configuration from %s", loader.path)

        plan = build_plan(config, profile_name, _make_lister(options, root))
    except (ValueError, FileListingError) as e:
        # Bad configuration or patterns abort the run.
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if options.print_plan:
        sys.stdout.write(plan.to_json())
        return 0

    output_path = root / options.output
    try:
        write_plan(plan, output_path)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"Generated {options.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
git-semver command-line interface

Manages semantic version tags in a git repository.

Usage:
    git-semver get                       # Show current version tag
    git-semver major [-p PRE] [-b BUILD] # Tag next major version (breaking changes)
    git-semver minor [-p PRE] [-b BUILD] # Tag next minor version (new features)
    git-semver patch [-p PRE] [-b BUILD] # Tag next patch version (bug fixes)
    git-semver pre-release -p PRE        # Tag current version with a pre-release
    git-semver build -b BUILD            # Tag current version with build metadata

Add -d/--dryrun to print the next tag without creating it.
"""

import argparse
import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import git
from .commands import NoVersionError, get_version, tag_next_version
from .config import ConfigError, load_config
from .selector import Increment
from .version import ValidationError

__version__ = '1.0.0'

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_LOOKUP = 2
EXIT_TAG = 3


def setup_logging(console: Console, verbose: bool = False) -> None:
    """Send git_semver log records to stderr through rich."""
    logger = logging.getLogger('git_semver')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _add_dryrun(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-d', '--dryrun', action='store_true',
                        help='Show version without creating a git tag')


def _add_pre_release(parser: argparse.ArgumentParser, required: bool = False) -> None:
    parser.add_argument('-p', '--pre-release', dest='pre_release', required=required,
                        help='Sets the pre-release version component')


def _add_build(parser: argparse.ArgumentParser, required: bool = False) -> None:
    parser.add_argument('-b', '--build', required=required,
                        help='Sets the build version component')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='git-semver',
                                     description='Manage semantic version tags')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show debug output')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    subparsers.add_parser('get', help='Gets the current version tag')

    increments = [
        ('major', [], 'Generate a tag for the next major version', Increment.MAJOR),
        ('minor', [], 'Generate a tag for the next minor version', Increment.MINOR),
        ('patch', ['next'], 'Generate a tag for the next patch version', Increment.PATCH),
    ]
    for name, aliases, help_text, increment in increments:
        sub = subparsers.add_parser(name, aliases=aliases, help=help_text)
        _add_dryrun(sub)
        _add_pre_release(sub)
        _add_build(sub)
        sub.set_defaults(increment=increment)

    sub = subparsers.add_parser('pre-release', help='Generate a tag for the specified pre-release')
    _add_dryrun(sub)
    _add_pre_release(sub, required=True)
    _add_build(sub)
    sub.set_defaults(increment=Increment.NONE)

    sub = subparsers.add_parser('build', help='Generate a tag for the specified build')
    _add_dryrun(sub)
    _add_build(sub, required=True)
    sub.set_defaults(increment=Increment.NONE, pre_release=None)

    return parser


def _report(console: Console, message: str) -> None:
    console.print(f"[bold red]error:[/bold red] {escape(message)}", soft_wrap=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Run git-semver and return the process exit code."""
    args = build_parser().parse_args(argv)
    out = Console()
    err = Console(stderr=True)
    setup_logging(err, args.verbose)

    try:
        config = load_config()
    except ConfigError as e:
        _report(err, str(e))
        return EXIT_CONFIG

    if args.command == 'get':
        try:
            tag_name = get_version(config, lister=git.list_tags)
        except git.ExecutionError as e:
            if e.output:
                err.out(e.output.rstrip(), highlight=False)
            _report(err, str(e))
            return EXIT_LOOKUP
        except NoVersionError as e:
            _report(err, str(e))
            return EXIT_LOOKUP
        out.out(tag_name, highlight=False)
        return EXIT_OK

    try:
        tag_name = tag_next_version(
            config,
            args.increment,
            pre_release=args.pre_release,
            build=args.build,
            dry_run=args.dryrun,
            lister=git.list_tags,
            creator=git.create_tag,
        )
    except ValidationError as e:
        _report(err, f"invalid version component: {e}")
        return EXIT_TAG
    except git.ExecutionError as e:
        if e.output:
            err.out(e.output.rstrip(), highlight=False)
        _report(err, str(e))
        return EXIT_TAG if isinstance(e, git.TagCreationError) else EXIT_LOOKUP

    out.out(tag_name, highlight=False)
    return EXIT_OK

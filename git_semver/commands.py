"""
Command handlers shared by every git-semver sub-command.

The handlers take the loaded Config and the git collaborators as arguments,
so they can run against fake tag lists in tests.
"""

import logging
from typing import Callable, List, Optional

from . import git
from .config import Config
from .selector import Increment, Selection, next_version, select_latest

logger = logging.getLogger(__name__)

TagLister = Callable[[], List[str]]
TagCreator = Callable[[str, str, bool], None]


class NoVersionError(LookupError):
    """Raised when no tag holds a semantic version."""


def current_version(config: Config, lister: TagLister = git.list_tags) -> Selection:
    """Find the highest version tag, logging tags that could not be parsed."""
    tags = lister()
    logger.debug(f"Found {len(tags)} tags")
    selection = select_latest(tags, config.version_prefix)
    for skipped in selection.skipped:
        logger.warning(f"error parsing tag {skipped.tag!r}: {skipped.reason}")
    return selection


def get_version(config: Config, lister: TagLister = git.list_tags) -> str:
    """Return the current version tag, prefix included."""
    selection = current_version(config, lister)
    if selection.version is None:
        raise NoVersionError("no valid semver tags found")
    return config.version_prefix + str(selection.version)


def tag_next_version(config: Config, increment: Increment,
                     pre_release: Optional[str] = None,
                     build: Optional[str] = None,
                     dry_run: bool = False,
                     lister: TagLister = git.list_tags,
                     creator: TagCreator = git.create_tag) -> str:
    """Compute the next version and tag it unless ``dry_run`` is set.

    Returns the new tag name. A malformed pre-release or build raises
    ValidationError before anything is tagged.
    """
    current = current_version(config, lister).version
    if current is None:
        logger.info("No version tags found, starting from 0.1.0")

    new_version = next_version(current, increment, pre_release, build)
    tag_name = config.version_prefix + str(new_version)

    if dry_run:
        logger.debug(f"Dry run, not creating tag {tag_name}")
    else:
        creator(tag_name, f"Version {tag_name}", config.sign)
    return tag_name

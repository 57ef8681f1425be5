"""
Tag selection and next-version computation.

Both functions are pure: reporting skipped tags and talking to git is left
to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .version import ParseError, SemanticVersion

BOOTSTRAP_VERSION = SemanticVersion(0, 1, 0)


class Increment(Enum):
    NONE = 'none'
    MAJOR = 'major'
    MINOR = 'minor'
    PATCH = 'patch'


@dataclass
class SkippedTag:
    """A tag that matched the prefix but is not a semantic version."""
    tag: str
    reason: str


@dataclass
class Selection:
    version: Optional[SemanticVersion] = None
    skipped: List[SkippedTag] = field(default_factory=list)


def select_latest(tags: Iterable[str], prefix: str = '') -> Selection:
    """Pick the highest version among tags starting with ``prefix``.

    The prefix is removed before parsing. Tags that fail to parse are
    collected in ``Selection.skipped``; among equal versions the first
    tag seen wins.
    """
    selection = Selection()
    for tag in tags:
        if not tag.startswith(prefix):
            continue
        try:
            version = SemanticVersion.parse(tag[len(prefix):])
        except ParseError as e:
            selection.skipped.append(SkippedTag(tag, str(e)))
            continue
        if selection.version is None or version > selection.version:
            selection.version = version
    return selection


def next_version(current: Optional[SemanticVersion], increment: Increment,
                 pre_release: Optional[str] = None,
                 build: Optional[str] = None) -> SemanticVersion:
    """Compute the version that follows ``current``.

    With no current version the result starts at 0.1.0 whatever the
    increment. ``pre_release`` and ``build`` are applied afterwards when not
    None; an empty string clears the component.

    Raises:
        ValidationError: if ``pre_release`` or ``build`` is malformed.
    """
    if current is None:
        new_version = BOOTSTRAP_VERSION
    elif increment is Increment.MAJOR:
        new_version = current.inc_major()
    elif increment is Increment.MINOR:
        new_version = current.inc_minor()
    elif increment is Increment.PATCH:
        new_version = current.inc_patch()
    else:
        new_version = current

    if pre_release is not None:
        new_version = new_version.set_prerelease(pre_release)
    if build is not None:
        new_version = new_version.set_metadata(build)
    return new_version

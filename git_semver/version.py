"""
Semantic version model for git-semver.

Versions follow the semantic versioning 2.0.0 format:
    MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]
- MAJOR: Breaking changes
- MINOR: New features (backward compatible)
- PATCH: Bug fixes (backward compatible)
- PRERELEASE: Dot-separated identifiers marking an unstable release (e.g. beta.1)
- BUILD: Dot-separated metadata, ignored when ordering versions
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

VERSION_PATTERN = re.compile(
    r'(?P<major>0|[1-9][0-9]*)\.(?P<minor>0|[1-9][0-9]*)\.(?P<patch>0|[1-9][0-9]*)'
    r'(?:-(?P<prerelease>[0-9A-Za-z.-]+))?'
    r'(?:\+(?P<build>[0-9A-Za-z.-]+))?'
)
IDENTIFIER_PATTERN = re.compile(r'[0-9A-Za-z-]+')
NUMERIC_PATTERN = re.compile(r'[0-9]+')


class ParseError(ValueError):
    """Raised when a string is not a valid semantic version."""


class ValidationError(ValueError):
    """Raised when a pre-release or build component is malformed."""


def _check_prerelease(identifiers: Tuple[str, ...]) -> None:
    for ident in identifiers:
        if not IDENTIFIER_PATTERN.fullmatch(ident):
            raise ValidationError(f"Invalid pre-release identifier {ident!r}")
        if NUMERIC_PATTERN.fullmatch(ident) and len(ident) > 1 and ident[0] == '0':
            raise ValidationError(f"Numeric pre-release identifier {ident!r} has a leading zero")


def _check_build(identifiers: Tuple[str, ...]) -> None:
    for ident in identifiers:
        if not IDENTIFIER_PATTERN.fullmatch(ident):
            raise ValidationError(f"Invalid build identifier {ident!r}")


def _split_prerelease(text: str) -> Tuple[str, ...]:
    identifiers = tuple(text.split('.'))
    _check_prerelease(identifiers)
    return identifiers


def _split_build(text: str) -> Tuple[str, ...]:
    identifiers = tuple(text.split('.'))
    _check_build(identifiers)
    return identifiers


def _compare_identifiers(a: str, b: str) -> int:
    a_numeric = NUMERIC_PATTERN.fullmatch(a) is not None
    b_numeric = NUMERIC_PATTERN.fullmatch(b) is not None
    if a_numeric and b_numeric:
        # No leading zeros, so a longer number is always the larger one
        x, y = (len(a), a), (len(b), b)
    elif a_numeric:
        # Numeric identifiers always have lower precedence than alphanumeric ones
        return -1
    elif b_numeric:
        return 1
    else:
        x, y = a, b
    return (x > y) - (x < y)


def compare(a: 'SemanticVersion', b: 'SemanticVersion') -> int:
    """Compare two versions by precedence.

    Returns -1, 0 or 1. Build metadata is ignored.
    """
    core_a = (a.major, a.minor, a.patch)
    core_b = (b.major, b.minor, b.patch)
    if core_a != core_b:
        return -1 if core_a < core_b else 1

    # A release outranks any pre-release of the same core version
    if not a.is_prerelease or not b.is_prerelease:
        return (not a.is_prerelease) - (not b.is_prerelease)

    for x, y in zip(a.prerelease, b.prerelease):
        result = _compare_identifiers(x, y)
        if result:
            return result
    return (len(a.prerelease) > len(b.prerelease)) - (len(a.prerelease) < len(b.prerelease))


@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """An immutable semantic version.

    New values are produced by the ``inc_*`` and ``set_*`` methods; an
    instance is never modified in place.
    """
    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    def __post_init__(self):
        for name in ('major', 'minor', 'patch'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(f"{name} must be a non-negative integer, got {value!r}")
        # Accept any sequence of identifiers but always store tuples
        object.__setattr__(self, 'prerelease', tuple(self.prerelease))
        object.__setattr__(self, 'build', tuple(self.build))
        _check_prerelease(self.prerelease)
        _check_build(self.build)

    @classmethod
    def parse(cls, text: str) -> 'SemanticVersion':
        """Parse a string in format 'MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]'."""
        match = VERSION_PATTERN.fullmatch(text)
        if not match:
            raise ParseError(f"Invalid semantic version: {text!r}")

        try:
            prerelease = _split_prerelease(match.group('prerelease')) if match.group('prerelease') else ()
            build = _split_build(match.group('build')) if match.group('build') else ()
            major, minor, patch = (int(match.group(g)) for g in ('major', 'minor', 'patch'))
        except ValueError as e:
            # ValidationError, or a component too long for int()
            raise ParseError(f"Invalid semantic version: {text!r} ({e})") from e

        return cls(major, minor, patch, prerelease, build)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def render(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += '-' + '.'.join(self.prerelease)
        if self.build:
            text += '+' + '.'.join(self.build)
        return text

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"SemanticVersion({self.render()!r})"

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def __eq__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) == 0

    def __lt__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) < 0

    def __le__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) <= 0

    def __gt__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) > 0

    def __ge__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) >= 0

    def inc_major(self) -> 'SemanticVersion':
        """Increment major version and reset minor and patch to 0."""
        return SemanticVersion(self.major + 1, 0, 0)

    def inc_minor(self) -> 'SemanticVersion':
        """Increment minor version and reset patch to 0."""
        return SemanticVersion(self.major, self.minor + 1, 0)

    def inc_patch(self) -> 'SemanticVersion':
        """Increment patch version.

        A pre-release becomes its own release: 1.2.4-rc.1 -> 1.2.4.
        """
        if self.is_prerelease:
            return SemanticVersion(self.major, self.minor, self.patch)
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def set_prerelease(self, text: Optional[str]) -> 'SemanticVersion':
        """Return a copy with the pre-release replaced. Empty text clears it."""
        prerelease = _split_prerelease(text) if text else ()
        return SemanticVersion(self.major, self.minor, self.patch, prerelease, self.build)

    def set_metadata(self, text: Optional[str]) -> 'SemanticVersion':
        """Return a copy with the build metadata replaced. Empty text clears it."""
        build = _split_build(text) if text else ()
        return SemanticVersion(self.major, self.minor, self.patch, self.prerelease, build)

"""
Configuration loading for git-semver.

The configuration file holds one KEY=VALUE assignment per line:

    # Tags look like v1.2.3
    VERSION_PREFIX=v
    GIT_SIGN=true

Blank lines and lines starting with '#' are ignored and keys are
case-insensitive. Values may be wrapped in double quotes, in which case
backslash escapes are interpreted.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

TRUE_VALUES = {'1', 't', 'T', 'TRUE', 'true', 'True'}
FALSE_VALUES = {'0', 'f', 'F', 'FALSE', 'false', 'False'}

SIMPLE_ESCAPES = {
    'a': '\a', 'b': '\b', 'f': '\f', 'n': '\n', 'r': '\r',
    't': '\t', 'v': '\v', '\\': '\\', '"': '"',
}
HEX_DIGITS = '0123456789abcdefABCDEF'
OCTAL_DIGITS = '01234567'


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


@dataclass(frozen=True)
class Config:
    version_prefix: str = ''
    sign: bool = False


def config_search_paths(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Candidate configuration files, most specific first."""
    if environ is None:
        environ = os.environ
    paths = ['.git-semver']
    if 'XDG_CONFIG_HOME' in environ:
        paths.append(os.path.join(environ['XDG_CONFIG_HOME'], 'git-semver'))
    if 'HOME' in environ:
        home = environ['HOME']
        paths.append(os.path.join(home, '.config', 'git-semver'))
        paths.append(os.path.join(home, '.git-semver', 'config'))
    return paths


def _unquote(value: str) -> str:
    """Interpret a double-quoted string, raising ValueError if malformed."""
    if len(value) < 2 or value[0] != '"' or value[-1] != '"':
        raise ValueError("not a quoted string")

    body = value[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        c = body[i]
        if c == '"' or c == '\n':
            raise ValueError("unexpected character in quoted string")
        if c != '\\':
            out += c.encode('utf-8')
            i += 1
            continue

        if i + 1 >= len(body):
            raise ValueError("dangling backslash")
        esc = body[i + 1]
        i += 2
        if esc in SIMPLE_ESCAPES:
            out += SIMPLE_ESCAPES[esc].encode('utf-8')
        elif esc in 'xuU':
            width = {'x': 2, 'u': 4, 'U': 8}[esc]
            digits = body[i:i + width]
            if len(digits) != width or any(d not in HEX_DIGITS for d in digits):
                raise ValueError(f"invalid \\{esc} escape")
            code = int(digits, 16)
            i += width
            if esc == 'x':
                out.append(code)
            else:
                if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                    raise ValueError("invalid code point")
                out += chr(code).encode('utf-8')
        elif esc in OCTAL_DIGITS:
            digits = body[i - 1:i + 2]
            if len(digits) != 3 or any(d not in OCTAL_DIGITS for d in digits):
                raise ValueError("invalid octal escape")
            code = int(digits, 8)
            if code > 255:
                raise ValueError("octal escape out of range")
            out.append(code)
            i += 2
        else:
            raise ValueError(f"unknown escape \\{esc}")

    return out.decode('utf-8')


def _parse_bool(value: str) -> bool:
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(value)


def parse_config(lines: Iterable[str]) -> Config:
    """Parse configuration lines into a Config.

    Raises:
        ConfigError: with the offending line, e.g.
            "error parsing GIT_SIGN=wibble: invalid boolean value"
    """
    version_prefix = ''
    sign = False

    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith('#'):
            continue

        key, sep, value = line.partition('=')
        if not sep:
            raise ConfigError(f"error parsing {line}: invalid syntax")
        key, value = key.strip(), value.strip()

        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            try:
                value = _unquote(value)
            except (ValueError, UnicodeDecodeError):
                raise ConfigError(f"error parsing {line}: invalid quoted string") from None

        name = key.upper()
        if name == 'VERSION_PREFIX':
            version_prefix = value
        elif name == 'GIT_SIGN':
            try:
                sign = _parse_bool(value)
            except ValueError:
                raise ConfigError(f"error parsing {line}: invalid boolean value") from None
        else:
            raise ConfigError(f"error parsing {line}: unrecognized variable")

    return Config(version_prefix=version_prefix, sign=sign)


def load_config(paths: Optional[Iterable[str]] = None,
                environ: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration from the first existing file in the search path.

    Returns the default Config when none of the files exist.
    """
    if paths is None:
        paths = config_search_paths(environ)

    for path in paths:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                logger.debug(f"Reading configuration from {path}")
                try:
                    return parse_config(f)
                except ConfigError as e:
                    raise ConfigError(f"error parsing {path}: {e}") from e
        except FileNotFoundError:
            continue
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"error reading {path}: {e}") from e

    logger.debug("No configuration file found, using defaults")
    return Config()

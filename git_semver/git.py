"""Thin wrappers around the git command line."""

import logging
import subprocess
from typing import List, Optional

logger = logging.getLogger(__name__)


class ExecutionError(Exception):
    """Raised when a git command fails.

    ``output`` holds whatever git wrote to stdout/stderr.
    """

    def __init__(self, message: str, output: str = ''):
        super().__init__(message)
        self.output = output


class TagCreationError(ExecutionError):
    """Raised when git refuses to create a tag (e.g. it already exists)."""


def _run_git(args: List[str], cwd: Optional[str] = None, error=ExecutionError) -> str:
    command = ['git'] + args
    logger.debug(f"Running {' '.join(command)}")
    try:
        result = subprocess.run(command, cwd=cwd, stdout=subprocess.PIPE,
                                stderr=subprocess.STDOUT, text=True, check=True)
    except subprocess.CalledProcessError as e:
        raise error(str(e), output=e.stdout or '') from e
    except FileNotFoundError as e:
        raise error("git not found. Make sure git is installed.") from e
    return result.stdout


def list_tags(cwd: Optional[str] = None) -> List[str]:
    """Return all tag names in the repository."""
    output = _run_git(['tag'], cwd=cwd)
    return [line for line in output.splitlines() if line]


def create_tag(tag_name: str, message: str, sign: bool = False, cwd: Optional[str] = None) -> None:
    """Create an annotated tag, or a signed one if ``sign`` is set."""
    flag = '-s' if sign else '-a'
    _run_git(['tag', flag, '-m', message, tag_name], cwd=cwd, error=TagCreationError)
    logger.debug(f"Created tag {tag_name}")

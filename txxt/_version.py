"""Version information for txxt.

The version is statically defined here and should match pyproject.toml.
When running from a git checkout, the short commit hash is appended to the
version string shown by ``txxt --version``.
"""

import subprocess
from functools import lru_cache
from pathlib import Path

__version__ = "0.1.0"


@lru_cache(maxsize=1)
def get_git_sha() -> str | None:
    """Short commit hash of the checkout containing this package, if any."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=Path(__file__).parent,
        )
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def get_version() -> str:
    """Get the version string, e.g. "0.1.0"."""
    return __version__


def get_full_version_string() -> str:
    """Get a human-readable version string.

    Returns:
        String like "txxt 0.1.0 (abc1234)" or "txxt 0.1.0"
    """
    sha = get_git_sha()
    if sha:
        return f"txxt {__version__} ({sha})"
    return f"txxt {__version__}"

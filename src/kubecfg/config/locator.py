"""Kubeconfig file discovery.

Search order: the ``kubeconfig`` option (``KUBECONFIG`` in the environment)
when set, else ``<home>/.kube/config``. Candidates that are not regular
files, or whose contents cannot be read as non-empty text, are skipped
with a log message. Finding nothing is normal, e.g. inside a pod.
"""

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

from . import properties as props
from .env import EnvironmentProbe
from .filesystem import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

__all__ = ["find_kubeconfig_files", "get_home_dir", "get_kubeconfig_filenames", "load_contents"]


def get_home_dir(
    is_dir: Callable[[str], bool],
    getenv: Callable[[str], str | None],
    windows: bool | None = None,
) -> str:
    """Return the user's home directory.

    ``HOME`` wins when it names an existing directory. On Windows,
    ``HOMEDRIVE`` + ``HOMEPATH`` and then ``USERPROFILE`` are tried. The
    platform's own notion of the home directory is the last resort.
    """
    home = getenv("HOME")
    if home and is_dir(home):
        return home

    if windows is None:
        windows = sys.platform.startswith("win")
    if windows:
        drive = getenv("HOMEDRIVE")
        path = getenv("HOMEPATH")
        if drive and path:
            home_dir = drive + path
            if is_dir(home_dir):
                return home_dir
        profile = getenv("USERPROFILE")
        if profile and is_dir(profile):
            return profile

    try:
        return str(Path.home())
    except RuntimeError:
        return "."


def get_kubeconfig_filenames(
    probe: EnvironmentProbe,
    home_dir: str | None = None,
    fs: FileSystem | None = None,
) -> list[str]:
    """Return the candidate kubeconfig paths in search order.

    When the override names several paths (``os.pathsep`` separated) only
    the first one is considered.
    """
    if home_dir is None:
        fs = fs or LocalFileSystem()
        home_dir = get_home_dir(fs.is_dir, probe.get)
    default = os.path.join(home_dir, ".kube", "config")
    value = probe.get(props.KUBECONFIG_FILE, default)
    first = value.split(os.pathsep)[0]
    return [first] if first else []


def load_contents(path: str | Path, fs: FileSystem) -> str | None:
    """Read a kubeconfig file, logging and returning None on failure."""
    try:
        return fs.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not load Kubernetes config file from {path}: {e}")
        return None


def find_kubeconfig_files(
    probe: EnvironmentProbe,
    fs: FileSystem | None = None,
    home_dir: str | None = None,
) -> list[Path]:
    """Return the usable kubeconfig files, possibly none."""
    logger.debug("Trying to configure client from Kubernetes config...")
    if not probe.get_bool(props.TRY_KUBECONFIG, True):
        logger.debug(f"Kubeconfig discovery disabled by {props.TRY_KUBECONFIG}")
        return []

    fs = fs or LocalFileSystem()
    found: list[Path] = []
    for filename in get_kubeconfig_filenames(probe, home_dir, fs):
        if not fs.is_file(filename):
            logger.debug(f"Did not find Kubernetes config at: [{filename}]. Ignoring.")
            continue
        contents = load_contents(filename, fs)
        if not contents or not contents.strip():
            logger.debug(f"Kubernetes config at [{filename}] is empty. Ignoring.")
            continue
        found.append(Path(filename))
    return found

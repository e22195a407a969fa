"""Final normalization pass.

Runs last on every resolution path:

- the master URL gets an explicit scheme (``https://`` when TLS can be set
  up for the configuration, ``http://`` otherwise) unless it already has one
- the master URL ends with exactly one ``/``
- the client key algorithm is taken from ``kubernetes.certs.client.key.algo``
  or sniffed from the PEM headers of the client key

Key sniffing scans every line and keeps the last header it saw, so a bundle
holding an RSA key followed by an EC key is reported as EC.
"""

import base64
import binascii
import logging
from collections.abc import Callable

from kubecfg.errors import KubeConfigError

from . import properties as props
from .env import EnvironmentProbe
from .filesystem import FileSystem, LocalFileSystem
from .models import KeyAlgorithm, ResolvedConfig

logger = logging.getLogger(__name__)

__all__ = [
    "decode_data",
    "detect_key_algorithm",
    "ensure_scheme",
    "ensure_trailing_slash",
    "has_scheme",
    "key_algorithm_for",
    "normalize",
]

_EC_HEADER = "BEGIN EC PRIVATE KEY"
_RSA_HEADER = "BEGIN RSA PRIVATE KEY"


def has_scheme(master_url: str) -> bool:
    lowered = master_url.lower()
    return lowered.startswith(props.HTTP_PROTOCOL_PREFIX) or lowered.startswith(
        props.HTTPS_PROTOCOL_PREFIX
    )


def ensure_scheme(master_url: str, https_available: bool) -> str:
    if has_scheme(master_url):
        return master_url
    prefix = props.HTTPS_PROTOCOL_PREFIX if https_available else props.HTTP_PROTOCOL_PREFIX
    return prefix + master_url


def ensure_trailing_slash(master_url: str) -> str:
    return master_url.rstrip("/") + "/"


def detect_key_algorithm(pem: str) -> KeyAlgorithm | None:
    """Return the algorithm of the last private-key header in ``pem``."""
    algorithm = None
    for line in pem.splitlines():
        if _EC_HEADER in line:
            algorithm = KeyAlgorithm.EC
        elif _RSA_HEADER in line:
            algorithm = KeyAlgorithm.RSA
    return algorithm


def decode_data(data: str) -> str:
    """Decode inline material that may be base64 encoded or plain PEM."""
    try:
        return base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return data


def key_algorithm_for(
    client_key_file: str | None,
    client_key_data: str | None,
    fs: FileSystem | None = None,
) -> KeyAlgorithm | None:
    """Sniff the algorithm of the client key given inline or as a file."""
    try:
        if client_key_data is not None:
            return detect_key_algorithm(decode_data(client_key_data))
        if client_key_file is not None:
            fs = fs or LocalFileSystem()
            return detect_key_algorithm(fs.read_text(client_key_file))
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Failure in determining private key algorithm type: {e}")
    return None


def normalize(
    config: ResolvedConfig,
    https_available: Callable[[ResolvedConfig], bool],
    probe: EnvironmentProbe | None = None,
    fs: FileSystem | None = None,
) -> ResolvedConfig:
    """Return the normalized snapshot of ``config``.

    Args:
        config: The candidate configuration
        https_available: Predicate telling whether TLS can be set up for a configuration
        probe: When given, ``kubernetes.certs.client.key.algo`` short-circuits sniffing
        fs: Filesystem used to read a client key file

    Raises:
        KubeConfigError: If no master URL is left to normalize
    """
    if not config.master_url:
        raise KubeConfigError("No master URL configured")

    master_url = config.master_url
    if not has_scheme(master_url):
        master_url = ensure_scheme(master_url, https_available(config))
    master_url = ensure_trailing_slash(master_url)

    algorithm = probe.key_algorithm() if probe is not None else None
    if algorithm is None:
        algorithm = key_algorithm_for(config.client_key_file, config.client_key_data, fs)

    return config.evolve(master_url=master_url, client_key_algo=algorithm)

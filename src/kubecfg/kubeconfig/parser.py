"""Kubeconfig parsing.

Turns kubeconfig YAML into :class:`KubeConfigDocument` instances. Any
problem with the document itself is reported as
:class:`~kubecfg.errors.KubeConfigParseError`; this module does not try to
recover a partially valid file.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from kubecfg.errors import KubeConfigParseError

from .models import KubeConfigDocument

logger = logging.getLogger(__name__)

__all__ = ["parse_file", "parse_string"]


def parse_string(text: str, source: str | None = None) -> KubeConfigDocument:
    """Parse kubeconfig YAML text.

    Args:
        text: The YAML contents
        source: Optional description of where the text came from, used in errors

    Returns:
        The parsed document

    Raises:
        KubeConfigParseError: If the text is empty, not YAML, not a mapping,
            or does not match the kubeconfig layout
    """
    if not text or not text.strip():
        raise KubeConfigParseError("kubeconfig is empty", source)

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise KubeConfigParseError(f"invalid YAML: {e}", source) from e

    if not isinstance(raw, dict):
        raise KubeConfigParseError(
            f"expected a mapping at the top level, got {type(raw).__name__}", source
        )

    try:
        return KubeConfigDocument.model_validate(raw)
    except ValidationError as e:
        raise KubeConfigParseError(f"invalid kubeconfig: {e}", source) from e


def parse_file(path: str | Path) -> KubeConfigDocument:
    """Read and parse a kubeconfig file.

    The returned document, and every cluster, user and context in it,
    records ``path`` so later stages can resolve relative file references
    and find the backing file of a context.

    Raises:
        OSError: If the file cannot be read
        KubeConfigParseError: If the contents are malformed
    """
    path = Path(path)
    logger.debug(f"Parsing kubeconfig file: {path}")
    text = path.read_text(encoding="utf-8")
    return parse_string(text, str(path)).with_source(path.absolute())

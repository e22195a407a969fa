"""Base Pydantic models for kubecfg.

This module provides the base model class that the resolved configuration
and its sub-entities inherit from. It establishes consistent configuration
across all models:

- Strict field validation (no extra fields allowed)
- Immutable instances, so a resolved snapshot can be shared between threads

Example:
    >>> from kubecfg.models import KubecfgBaseModel
    >>>
    >>> class Endpoint(KubecfgBaseModel):
    ...     url: str
    ...     port: int = 443
    >>>
    >>> Endpoint(url="https://example").model_dump()
    {'url': 'https://example', 'port': 443}
"""

from pydantic import BaseModel, ConfigDict


class KubecfgBaseModel(BaseModel):
    """Base model for kubecfg configuration snapshots.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable; use ``model_copy(update=...)``
      to derive a new snapshot

    Documents read from disk (kubeconfig files) do not inherit from this
    class because they must tolerate keys this package does not model.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

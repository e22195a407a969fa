"""Pydantic models for kubeconfig documents.

The models follow the on-disk layout of a kubeconfig file: named clusters,
named users (auth infos) and named contexts tying the two together, plus
the ``current-context`` marker. Keys use the kebab-case spelling of the
file format through aliases; keys this package does not use (``exec``,
``extensions``, ``preferences``...) are ignored rather than rejected.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _ensure_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class _DocumentModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class AuthProviderConfig(_DocumentModel):
    """Auth-provider plugin settings (``users[].user.auth-provider``)."""

    name: str
    config: dict[str, Any] = Field(default_factory=dict)

    @field_validator("config", mode="before")
    @classmethod
    def _ensure_dict(cls, value: Any) -> dict[str, Any]:
        return value or {}


class Cluster(_DocumentModel):
    server: str | None = None
    certificate_authority: str | None = Field(default=None, alias="certificate-authority")
    certificate_authority_data: str | None = Field(default=None, alias="certificate-authority-data")
    insecure_skip_tls_verify: bool | None = Field(default=None, alias="insecure-skip-tls-verify")
    proxy_url: str | None = Field(default=None, alias="proxy-url")
    tls_server_name: str | None = Field(default=None, alias="tls-server-name")


class NamedCluster(_DocumentModel):
    name: str
    cluster: Cluster = Field(default_factory=Cluster)
    source_file: Path | None = Field(default=None, exclude=True)


class AuthInfo(_DocumentModel):
    client_certificate: str | None = Field(default=None, alias="client-certificate")
    client_certificate_data: str | None = Field(default=None, alias="client-certificate-data")
    client_key: str | None = Field(default=None, alias="client-key")
    client_key_data: str | None = Field(default=None, alias="client-key-data")
    token: str | None = None
    token_file: str | None = Field(default=None, alias="tokenFile")
    username: str | None = None
    password: str | None = None
    auth_provider: AuthProviderConfig | None = Field(default=None, alias="auth-provider")
    impersonate: str | None = Field(default=None, alias="as")
    impersonate_groups: list[str] = Field(default_factory=list, alias="as-groups")
    impersonate_user_extra: dict[str, list[str]] = Field(default_factory=dict, alias="as-user-extra")

    @field_validator("impersonate_groups", mode="before")
    @classmethod
    def _groups_list(cls, value: Any) -> list[Any]:
        return _ensure_list(value)

    @field_validator("impersonate_user_extra", mode="before")
    @classmethod
    def _extra_lists(cls, value: Any) -> dict[str, list[Any]]:
        if not value:
            return {}
        return {key: _ensure_list(items) for key, items in value.items()}


class NamedAuthInfo(_DocumentModel):
    name: str
    user: AuthInfo = Field(default_factory=AuthInfo)
    source_file: Path | None = Field(default=None, exclude=True)


class Context(_DocumentModel):
    cluster: str | None = None
    user: str | None = None
    namespace: str | None = None


class NamedContext(_DocumentModel):
    """A named (cluster, user, namespace) triple.

    ``source_file`` is the kubeconfig file the context was read from, or
    None when it was parsed from a string. It is not serialized.
    """

    name: str
    context: Context = Field(default_factory=Context)
    source_file: Path | None = Field(default=None, exclude=True)


class KubeConfigDocument(_DocumentModel):
    """One parsed kubeconfig file."""

    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    clusters: list[NamedCluster] = Field(default_factory=list)
    users: list[NamedAuthInfo] = Field(default_factory=list)
    contexts: list[NamedContext] = Field(default_factory=list)
    current_context: str | None = Field(default=None, alias="current-context")
    source_file: Path | None = Field(default=None, exclude=True)

    @field_validator("clusters", "users", "contexts", mode="before")
    @classmethod
    def _ensure_entries(cls, value: Any) -> list[Any]:
        return _ensure_list(value)

    def with_source(self, path: Path) -> KubeConfigDocument:
        """Return a copy in which the document and all its entries remember ``path``."""
        return self.model_copy(
            update={
                "source_file": path,
                "clusters": [c.model_copy(update={"source_file": path}) for c in self.clusters],
                "users": [u.model_copy(update={"source_file": path}) for u in self.users],
                "contexts": [c.model_copy(update={"source_file": path}) for c in self.contexts],
            }
        )

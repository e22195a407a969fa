"""Fluent construction of :class:`ResolvedConfig` snapshots.

Values set on the builder are *explicit*: they are layered over whatever
auto-configuration found and survive :meth:`ConfigResolver.refresh`.

Example:
    >>> config = (
    ...     ConfigBuilder()
    ...     .with_master_url("api.example.com:6443")
    ...     .with_namespace("team-a")
    ...     .with_request_timeout(30_000)
    ...     .build()
    ... )
    >>> config.namespace
    'team-a'
"""

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from kubecfg.errors import InvalidPropertyError

from .models import KeyAlgorithm, RequestConfig, ResolvedConfig, TlsVersion, TokenProvider
from .resolver import ConfigResolver, apply_explicit_overrides

logger = logging.getLogger(__name__)

__all__ = ["ConfigBuilder"]

_REQUEST_FIELDS = frozenset(RequestConfig.model_fields)
_CONFIG_FIELDS = frozenset(ResolvedConfig.model_fields) - {
    "request_config",
    "contexts",
    "current_context",
    "auto_configured",
    "source",
    "default_namespace",
}


def _validate_field(model: type[BaseModel], name: str, value: Any) -> Any:
    """Return ``value`` as ``model`` would store it in field ``name``."""
    try:
        return getattr(model.model_validate({name: value}), name)
    except ValidationError as e:
        raise InvalidPropertyError(name, str(value), e.errors()[0]["msg"].lower()) from e


class ConfigBuilder:
    """Collects explicit values and builds a configuration from them.

    Args:
        resolver: Resolver used for auto-configuration; a default one if None
        auto_configure: Start from auto-configuration rather than from defaults.
            Ignored (treated as False) when ``kubernetes.disable.autoConfig``
            is set.
        context: Kubeconfig context to select during auto-configuration
    """

    def __init__(
        self,
        resolver: ConfigResolver | None = None,
        auto_configure: bool = True,
        context: str | None = None,
    ):
        self.resolver = resolver or ConfigResolver()
        self.auto_configure = auto_configure
        self.context = context
        self._values: dict[str, Any] = {}
        self._request_values: dict[str, Any] = {}

    def set(self, **values: Any) -> "ConfigBuilder":
        """Set explicit values by field name.

        RequestConfig fields (``request_timeout`` and friends) may be given
        here as well. Values are validated and coerced the same way the
        model fields are.

        Raises:
            ValueError: If a name is not a settable field
            InvalidPropertyError: If a value is not valid for its field
        """
        for name, value in values.items():
            if name in _REQUEST_FIELDS:
                self._request_values[name] = _validate_field(RequestConfig, name, value)
            elif name in _CONFIG_FIELDS:
                self._values[name] = _validate_field(ResolvedConfig, name, value)
            else:
                raise ValueError(f"Unknown configuration field: {name}")
        return self

    def with_context(self, context: str | None) -> "ConfigBuilder":
        self.context = context
        return self

    def with_auto_configure(self, enabled: bool = True) -> "ConfigBuilder":
        self.auto_configure = enabled
        return self

    def with_master_url(self, master_url: str) -> "ConfigBuilder":
        return self.set(master_url=master_url)

    def with_api_version(self, api_version: str) -> "ConfigBuilder":
        return self.set(api_version=api_version)

    def with_namespace(self, namespace: str) -> "ConfigBuilder":
        return self.set(namespace=namespace)

    def with_trust_certs(self, trust_certs: bool = True) -> "ConfigBuilder":
        return self.set(trust_certs=trust_certs)

    def with_disable_hostname_verification(self, disable: bool = True) -> "ConfigBuilder":
        return self.set(disable_hostname_verification=disable)

    def with_ca_cert_file(self, path: str) -> "ConfigBuilder":
        return self.set(ca_cert_file=path)

    def with_ca_cert_data(self, data: str) -> "ConfigBuilder":
        return self.set(ca_cert_data=data)

    def with_client_cert_file(self, path: str) -> "ConfigBuilder":
        return self.set(client_cert_file=path)

    def with_client_cert_data(self, data: str) -> "ConfigBuilder":
        return self.set(client_cert_data=data)

    def with_client_key_file(self, path: str) -> "ConfigBuilder":
        return self.set(client_key_file=path)

    def with_client_key_data(self, data: str) -> "ConfigBuilder":
        return self.set(client_key_data=data)

    def with_client_key_algo(self, algorithm: KeyAlgorithm | str) -> "ConfigBuilder":
        return self.set(client_key_algo=algorithm)

    def with_client_key_passphrase(self, passphrase: str) -> "ConfigBuilder":
        return self.set(client_key_passphrase=passphrase)

    def with_oauth_token(self, token: str) -> "ConfigBuilder":
        return self.set(oauth_token=token)

    def with_oauth_token_provider(self, provider: TokenProvider) -> "ConfigBuilder":
        return self.set(oauth_token_provider=provider)

    def with_username(self, username: str) -> "ConfigBuilder":
        return self.set(username=username)

    def with_password(self, password: str) -> "ConfigBuilder":
        return self.set(password=password)

    def with_impersonate_username(self, username: str) -> "ConfigBuilder":
        return self.set(impersonate_username=username)

    def with_impersonate_groups(self, *groups: str) -> "ConfigBuilder":
        return self.set(impersonate_groups=list(groups))

    def with_impersonate_extras(self, extras: dict[str, list[str]]) -> "ConfigBuilder":
        return self.set(impersonate_extras=dict(extras))

    def with_http_proxy(self, proxy: str) -> "ConfigBuilder":
        return self.set(http_proxy=proxy)

    def with_https_proxy(self, proxy: str) -> "ConfigBuilder":
        return self.set(https_proxy=proxy)

    def with_proxy_credentials(self, username: str, password: str) -> "ConfigBuilder":
        return self.set(proxy_username=username, proxy_password=password)

    def with_no_proxy(self, *hosts: str) -> "ConfigBuilder":
        return self.set(no_proxy=list(hosts))

    def with_tls_versions(self, *versions: TlsVersion | str) -> "ConfigBuilder":
        return self.set(tls_versions=list(versions))

    def with_user_agent(self, user_agent: str) -> "ConfigBuilder":
        return self.set(user_agent=user_agent)

    def with_custom_headers(self, headers: dict[str, str]) -> "ConfigBuilder":
        return self.set(custom_headers=dict(headers))

    def with_http2_disable(self, disable: bool = True) -> "ConfigBuilder":
        return self.set(http2_disable=disable)

    def with_connection_timeout(self, millis: int) -> "ConfigBuilder":
        return self.set(connection_timeout=millis)

    def with_websocket_ping_interval(self, millis: int) -> "ConfigBuilder":
        return self.set(websocket_ping_interval=millis)

    def with_max_concurrent_requests(
        self, total: int, per_host: int | None = None
    ) -> "ConfigBuilder":
        self.set(max_concurrent_requests=total)
        if per_host is not None:
            self.set(max_concurrent_requests_per_host=per_host)
        return self

    def with_request_timeout(self, millis: int) -> "ConfigBuilder":
        return self.set(request_timeout=millis)

    def with_watch_reconnect(self, interval: int, limit: int = -1) -> "ConfigBuilder":
        return self.set(watch_reconnect_interval=interval, watch_reconnect_limit=limit)

    def with_request_config(self, request_config: RequestConfig) -> "ConfigBuilder":
        return self.set(**request_config.model_dump())

    def overrides(self) -> dict[str, Any]:
        """The explicit values collected so far, as stored on the built snapshot."""
        overrides = dict(self._values)
        if self._request_values:
            overrides["request_config"] = dict(self._request_values)
        return overrides

    def build(self) -> ResolvedConfig:
        """Resolve the base configuration and layer the explicit values over it.

        Raises:
            ContextNotFoundError: If the selected context does not exist
            KubeConfigError: If the resulting configuration has no master URL
        """
        resolver = self.resolver
        probe = None
        if self.auto_configure and resolver.probe.disable_auto_config():
            logger.debug("Auto-configuration disabled, building from defaults")
            base = resolver.empty()
        elif self.auto_configure:
            base = resolver.auto_configure(self.context)
            probe = resolver.probe
        else:
            base = resolver.empty()

        return apply_explicit_overrides(
            base, self.overrides(), resolver.https_available, resolver.fs, probe
        )

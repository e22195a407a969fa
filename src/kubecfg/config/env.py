"""Environment probe.

Reads the recognized options (see :mod:`kubecfg.config.properties`) from a
property overrides mapping and from the process environment, and layers
them over a configuration snapshot. A present option always replaces the
current value; an absent one never clears it.
"""

import logging
import os
from collections.abc import Callable, Mapping
from typing import Any

from kubecfg.errors import InvalidPropertyError

from . import properties as props
from .models import KeyAlgorithm, ResolvedConfig, TlsVersion

logger = logging.getLogger(__name__)

__all__ = ["EnvironmentProbe", "Lookup"]

Lookup = Callable[[str], str | None]

_STRING_OPTIONS: list[tuple[str, str]] = [
    (props.MASTER, "master_url"),
    (props.API_VERSION, "api_version"),
    (props.NAMESPACE, "namespace"),
    (props.CA_CERT_FILE, "ca_cert_file"),
    (props.CA_CERT_DATA, "ca_cert_data"),
    (props.CLIENT_CERT_FILE, "client_cert_file"),
    (props.CLIENT_CERT_DATA, "client_cert_data"),
    (props.CLIENT_KEY_FILE, "client_key_file"),
    (props.CLIENT_KEY_DATA, "client_key_data"),
    (props.CLIENT_KEY_PASSPHRASE, "client_key_passphrase"),
    (props.USER_AGENT, "user_agent"),
    (props.TRUSTSTORE_PASSPHRASE, "trust_store_passphrase"),
    (props.TRUSTSTORE_FILE, "trust_store_file"),
    (props.KEYSTORE_PASSPHRASE, "key_store_passphrase"),
    (props.KEYSTORE_FILE, "key_store_file"),
    (props.BASIC_USERNAME, "username"),
    (props.BASIC_PASSWORD, "password"),
    (props.IMPERSONATE_USERNAME, "impersonate_username"),
    (props.PROXY_USERNAME, "proxy_username"),
    (props.PROXY_PASSWORD, "proxy_password"),
]

_BOOL_OPTIONS: list[tuple[str, str]] = [
    (props.TRUST_CERTIFICATES, "trust_certs"),
    (props.DISABLE_HOSTNAME_VERIFICATION, "disable_hostname_verification"),
    (props.HTTP2_DISABLE, "http2_disable"),
]

_INT_OPTIONS: list[tuple[str, str]] = [
    (props.CONNECTION_TIMEOUT, "connection_timeout"),
    (props.WEBSOCKET_PING_INTERVAL, "websocket_ping_interval"),
    (props.MAX_CONCURRENT_REQUESTS, "max_concurrent_requests"),
    (props.MAX_CONCURRENT_REQUESTS_PER_HOST, "max_concurrent_requests_per_host"),
]

# Options that land on the RequestConfig sub-entity
_REQUEST_INT_OPTIONS: list[tuple[str, str]] = [
    (props.WATCH_RECONNECT_INTERVAL, "watch_reconnect_interval"),
    (props.WATCH_RECONNECT_LIMIT, "watch_reconnect_limit"),
    (props.SCALE_TIMEOUT, "scale_timeout"),
    (props.LOGGING_INTERVAL, "logging_interval"),
    (props.UPLOAD_REQUEST_TIMEOUT, "upload_request_timeout"),
    (props.REQUEST_TIMEOUT, "request_timeout"),
    (props.REQUEST_RETRY_BACKOFF_LIMIT, "request_retry_backoff_limit"),
    (props.REQUEST_RETRY_BACKOFF_INTERVAL, "request_retry_backoff_interval"),
]


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class EnvironmentProbe:
    """Looks up options by property name.

    The default lookup checks ``properties`` (the equivalent of process-wide
    system properties) under the dotted name, then ``os.environ`` under the
    derived variable name. Empty values are treated as absent. Tests inject
    their own lookup with :meth:`from_mapping`.

    Example:
        >>> probe = EnvironmentProbe.from_mapping({"KUBERNETES_MASTER": "https://api:6443"})
        >>> probe.get("kubernetes.master")
        'https://api:6443'
    """

    def __init__(
        self,
        lookup: Lookup | None = None,
        properties: Mapping[str, str] | None = None,
    ):
        self._properties = dict(properties or {})
        self._lookup = lookup or self._environ_lookup(os.environ)

    @classmethod
    def from_mapping(
        cls, environ: Mapping[str, str], properties: Mapping[str, str] | None = None
    ) -> "EnvironmentProbe":
        """Create a probe that reads from ``environ`` instead of the process environment."""
        return cls(lookup=cls._environ_lookup(environ), properties=properties)

    @staticmethod
    def _environ_lookup(environ: Mapping[str, str]) -> Lookup:
        def lookup(name: str) -> str | None:
            return environ.get(props.env_var_name(name))

        return lookup

    def get(self, name: str, default: str | None = None) -> str | None:
        value = self._properties.get(name)
        if value:
            return value
        value = self._lookup(name)
        if value:
            return value
        return default

    def get_bool(self, name: str, default: bool) -> bool:
        value = self.get(name)
        if value is None:
            return default
        return value.strip().lower() == "true"

    def get_int(self, name: str, default: int | None = None) -> int | None:
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value.strip())
        except ValueError as e:
            raise InvalidPropertyError(name, value, "an integer") from e

    def get_list(self, name: str) -> list[str] | None:
        value = self.get(name)
        if value is None:
            return None
        return _split_list(value)

    def disable_auto_config(self) -> bool:
        return self.get_bool(props.DISABLE_AUTO_CONFIG, False)

    def key_algorithm(self) -> KeyAlgorithm | None:
        """Return the key algorithm forced by ``kubernetes.certs.client.key.algo``, if set."""
        value = self.get(props.CLIENT_KEY_ALGO)
        if value is None:
            return None
        try:
            return KeyAlgorithm(value.strip().upper())
        except ValueError as e:
            raise InvalidPropertyError(props.CLIENT_KEY_ALGO, value, "RSA or EC") from e

    def tls_versions(self) -> list[TlsVersion] | None:
        values = self.get_list(props.TLS_VERSIONS)
        if not values:
            return None
        try:
            return [TlsVersion(v) for v in values]
        except ValueError as e:
            raise InvalidPropertyError(
                props.TLS_VERSIONS, ",".join(values), "a list of TLS protocol names"
            ) from e

    def apply(self, config: ResolvedConfig) -> ResolvedConfig:
        """Layer every present option over ``config`` and return the new snapshot."""
        changes: dict[str, Any] = {}

        for name, field in _STRING_OPTIONS:
            value = self.get(name)
            if value is not None:
                changes[field] = value

        for name, field in _BOOL_OPTIONS:
            if self.get(name) is not None:
                changes[field] = self.get_bool(name, getattr(config, field))

        for name, field in _INT_OPTIONS:
            value = self.get_int(name)
            if value is not None:
                changes[field] = value

        request_changes: dict[str, Any] = {}
        for name, field in _REQUEST_INT_OPTIONS:
            value = self.get_int(name)
            if value is not None:
                request_changes[field] = value
        if request_changes:
            changes["request_config"] = config.request_config.model_copy(update=request_changes)

        groups = self.get_list(props.IMPERSONATE_GROUP)
        if groups:
            changes["impersonate_groups"] = groups

        # A proxy from the kubeconfig wins; the environment only fills empty slots
        if not config.http_proxy:
            proxy = self.get(props.HTTP_PROXY, self.get(props.ALL_PROXY))
            if proxy is not None:
                changes["http_proxy"] = proxy
        if not config.https_proxy:
            proxy = self.get(props.HTTPS_PROXY, self.get(props.ALL_PROXY))
            if proxy is not None:
                changes["https_proxy"] = proxy

        no_proxy = self.get_list(props.NO_PROXY)
        if no_proxy is not None:
            changes["no_proxy"] = no_proxy

        tls_versions = self.tls_versions()
        if tls_versions:
            changes["tls_versions"] = tls_versions

        token = self.get(props.OAUTH_TOKEN)
        if token is not None:
            changes["auto_oauth_token"] = token

        if changes:
            logger.debug(f"Applying environment overrides: {sorted(changes)}")
        return config.evolve(**changes)

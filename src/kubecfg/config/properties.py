"""Recognized option names and compiled-in defaults.

Every option is looked up first in the property overrides mapping under
the dotted name below, then in the process environment under the derived
variable name (``kubernetes.master`` -> ``KUBERNETES_MASTER``).
"""

DISABLE_AUTO_CONFIG = "kubernetes.disable.autoConfig"
MASTER = "kubernetes.master"
API_VERSION = "kubernetes.api.version"
NAMESPACE = "kubernetes.namespace"
TRUST_CERTIFICATES = "kubernetes.trust.certificates"
DISABLE_HOSTNAME_VERIFICATION = "kubernetes.disable.hostname.verification"
CA_CERT_FILE = "kubernetes.certs.ca.file"
CA_CERT_DATA = "kubernetes.certs.ca.data"
CLIENT_CERT_FILE = "kubernetes.certs.client.file"
CLIENT_CERT_DATA = "kubernetes.certs.client.data"
CLIENT_KEY_FILE = "kubernetes.certs.client.key.file"
CLIENT_KEY_DATA = "kubernetes.certs.client.key.data"
CLIENT_KEY_ALGO = "kubernetes.certs.client.key.algo"
CLIENT_KEY_PASSPHRASE = "kubernetes.certs.client.key.passphrase"
BASIC_USERNAME = "kubernetes.auth.basic.username"
BASIC_PASSWORD = "kubernetes.auth.basic.password"
TRY_KUBECONFIG = "kubernetes.auth.tryKubeConfig"
TRY_SERVICE_ACCOUNT = "kubernetes.auth.tryServiceAccount"
SERVICE_ACCOUNT_TOKEN_FILE = "kubernetes.auth.serviceAccount.token"
OAUTH_TOKEN = "kubernetes.auth.token"
WATCH_RECONNECT_INTERVAL = "kubernetes.watch.reconnectInterval"
WATCH_RECONNECT_LIMIT = "kubernetes.watch.reconnectLimit"
CONNECTION_TIMEOUT = "kubernetes.connection.timeout"
UPLOAD_REQUEST_TIMEOUT = "kubernetes.upload.request.timeout"
REQUEST_TIMEOUT = "kubernetes.request.timeout"
REQUEST_RETRY_BACKOFF_LIMIT = "kubernetes.request.retry.backoffLimit"
REQUEST_RETRY_BACKOFF_INTERVAL = "kubernetes.request.retry.backoffInterval"
LOGGING_INTERVAL = "kubernetes.logging.interval"
SCALE_TIMEOUT = "kubernetes.scale.timeout"
WEBSOCKET_PING_INTERVAL = "kubernetes.websocket.ping.interval"
MAX_CONCURRENT_REQUESTS = "kubernetes.max.concurrent.requests"
MAX_CONCURRENT_REQUESTS_PER_HOST = "kubernetes.max.concurrent.requests.per.host"
IMPERSONATE_USERNAME = "kubernetes.impersonate.username"
IMPERSONATE_GROUP = "kubernetes.impersonate.group"
TRUSTSTORE_FILE = "kubernetes.truststore.file"
TRUSTSTORE_PASSPHRASE = "kubernetes.truststore.passphrase"
KEYSTORE_FILE = "kubernetes.keystore.file"
KEYSTORE_PASSPHRASE = "kubernetes.keystore.passphrase"
TLS_VERSIONS = "kubernetes.tls.versions"
TRY_NAMESPACE_PATH = "kubernetes.tryNamespacePath"
NAMESPACE_FILE = "kubenamespace"
KUBECONFIG_FILE = "kubeconfig"
HTTP2_DISABLE = "http2.disable"
HTTP_PROXY = "http.proxy"
HTTPS_PROXY = "https.proxy"
ALL_PROXY = "all.proxy"
NO_PROXY = "no.proxy"
PROXY_USERNAME = "proxy.username"
PROXY_PASSWORD = "proxy.password"
USER_AGENT = "kubernetes.user.agent"

SERVICE_HOST = "KUBERNETES_SERVICE_HOST"
SERVICE_PORT = "KUBERNETES_SERVICE_PORT"

SERVICE_ACCOUNT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"
SERVICE_ACCOUNT_CA_CRT_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"
SERVICE_ACCOUNT_NAMESPACE_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"

HTTP_PROTOCOL_PREFIX = "http://"
HTTPS_PROTOCOL_PREFIX = "https://"
SOCKS5_PROTOCOL_PREFIX = "socks5://"

# Defaults; durations are milliseconds
DEFAULT_MASTER_URL = "https://kubernetes.default.svc"
DEFAULT_API_VERSION = "v1"
DEFAULT_CLIENT_KEY_PASSPHRASE = "changeit"
DEFAULT_WATCH_RECONNECT_INTERVAL = 1000
DEFAULT_WATCH_RECONNECT_LIMIT = -1
DEFAULT_CONNECTION_TIMEOUT = 10 * 1000
DEFAULT_REQUEST_TIMEOUT = 10 * 1000
DEFAULT_UPLOAD_REQUEST_TIMEOUT = 120 * 1000
DEFAULT_REQUEST_RETRY_BACKOFF_LIMIT = 10
DEFAULT_REQUEST_RETRY_BACKOFF_INTERVAL = 100
DEFAULT_SCALE_TIMEOUT = 10 * 60 * 1000
DEFAULT_LOGGING_INTERVAL = 20 * 1000
DEFAULT_WEBSOCKET_PING_INTERVAL = 30 * 1000
DEFAULT_MAX_CONCURRENT_REQUESTS = 64
DEFAULT_MAX_CONCURRENT_REQUESTS_PER_HOST = 5


def env_var_name(property_name: str) -> str:
    """Return the environment variable consulted for a property name."""
    return property_name.upper().replace(".", "_").replace("-", "_")

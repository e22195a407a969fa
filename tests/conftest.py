"""
Global pytest configuration and fixtures.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from kubecfg.config import ConfigResolver, EnvironmentProbe

SAMPLE_KUBECONFIG = """
apiVersion: v1
kind: Config
clusters:
  - name: prod
    cluster:
      server: https://prod.example.com:6443
      certificate-authority-data: Y2EtZGF0YQ==
  - name: staging
    cluster:
      server: http://staging.example.com:8080
      insecure-skip-tls-verify: true
users:
  - name: admin
    user:
      token: admin-token
  - name: dev
    user:
      username: dev
      password: secret
contexts:
  - name: prod-admin
    context:
      cluster: prod
      user: admin
      namespace: kube-system
  - name: staging-dev
    context:
      cluster: staging
      user: dev
current-context: prod-admin
"""


class FakeFileSystem:
    """In-memory filesystem keyed by path string."""

    def __init__(self, files: dict[str, str] | None = None, unreadable: set[str] | None = None):
        self.files = {str(k): v for k, v in (files or {}).items()}
        self.unreadable = {str(p) for p in (unreadable or set())}

    def is_file(self, path) -> bool:
        return str(path) in self.files or str(path) in self.unreadable

    def is_dir(self, path) -> bool:
        prefix = str(path).rstrip("/") + "/"
        return any(name.startswith(prefix) for name in self.files)

    def read_text(self, path) -> str:
        if str(path) in self.unreadable:
            raise PermissionError(f"Permission denied: {path}")
        try:
            return self.files[str(path)]
        except KeyError:
            raise FileNotFoundError(f"No such file: {path}") from None


@pytest.fixture
def write_kubeconfig(tmp_path):
    """Factory writing kubeconfig YAML under tmp_path and returning its path."""

    def _write(content: str = SAMPLE_KUBECONFIG, name: str = "config") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def make_probe():
    """Factory for probes that read from a given mapping instead of os.environ."""

    def _make(env: dict[str, str] | None = None, **properties: str) -> EnvironmentProbe:
        return EnvironmentProbe.from_mapping(env or {}, properties)

    return _make


@pytest.fixture
def make_resolver(tmp_path):
    """Factory for resolvers isolated from the real home directory and TLS setup.

    Scheme-less master URLs resolve to https unless ``https`` is False.
    """

    def _make(
        env: dict[str, str] | None = None,
        fs=None,
        https: bool = True,
        properties: dict[str, str] | None = None,
    ) -> ConfigResolver:
        probe = EnvironmentProbe.from_mapping(env or {}, properties)
        return ConfigResolver(
            probe=probe,
            fs=fs or FakeFileSystem(),
            https_available=lambda config: https,
            home_dir=str(tmp_path / "home"),
        )

    return _make


@pytest.fixture
def fake_fs():
    return FakeFileSystem


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the root logger changes made by the CLI's configure_logging."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("kubecfg"):
            logging.getLogger(name).setLevel(logging.NOTSET)

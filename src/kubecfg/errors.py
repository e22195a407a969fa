"""Exceptions raised by kubecfg.

Most problems met while resolving a configuration are soft: a missing file
or variable is logged and the field is left unset. The exceptions below
cover the cases where the caller's intent cannot be honored.
"""


class KubeConfigError(Exception):
    """Base class for all kubecfg errors."""


class KubeConfigParseError(KubeConfigError):
    """A kubeconfig document is malformed and cannot be used."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ContextNotFoundError(KubeConfigError):
    """The requested context does not exist in the merged kubeconfig documents."""

    def __init__(self, context: str, available: list[str] | None = None):
        self.context = context
        self.available = available or []
        message = f"Context '{context}' not found in kubeconfig"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class InvalidPropertyError(KubeConfigError, ValueError):
    """An override property carries a value that cannot be parsed."""

    def __init__(self, name: str, value: str, expected: str):
        self.name = name
        self.value = value
        super().__init__(f"Invalid value for {name}: {value!r} (expected {expected})")

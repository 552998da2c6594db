"""
Constants and runtime settings for kube-gone.

Defines the API groups that register types dynamically, the table of
renamed APIs, and kubectl invocation settings.
"""

import os

from .errors import ConfigError
from .models import GroupResourceKind

# ANSI escape sequences for terminal output
BOLD = "\033[1m"   # Start bold
SGR0 = "\033[0m"   # Reset (end bold)

# Groups whose objects register other API groups at runtime.
CRD_GROUP = "apiextensions.k8s.io"
API_REGISTRATION_GROUP = "apiregistration.k8s.io"

# Old "<groupVersion>/<Kind>" key -> where the same objects are served now.
DELETED_API_REPLACEMENTS = {
    "extensions/v1beta1/Ingress": GroupResourceKind("networking.k8s.io/v1", "ingresses", "Ingress"),
}

# kubectl binary and per-call timeout (seconds).
KUBECTL = os.environ.get("KUBE_GONE_KUBECTL", "kubectl")
DEFAULT_KUBECTL_TIMEOUT = 120


def kubectl_timeout() -> int:
    """
    Per-call kubectl timeout from KUBE_GONE_TIMEOUT, in whole seconds.

    Raises:
        ConfigError: the value is not a positive integer.
    """
    raw = os.environ.get("KUBE_GONE_TIMEOUT", "").strip()
    if not raw:
        return DEFAULT_KUBECTL_TIMEOUT
    message = f"KUBE_GONE_TIMEOUT must be a positive number of seconds, got {raw!r}"
    try:
        timeout = int(raw)
    except ValueError as e:
        raise ConfigError(message) from e
    if timeout <= 0:
        raise ConfigError(message)
    return timeout

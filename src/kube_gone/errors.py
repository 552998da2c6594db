"""Exceptions raised while talking to the cluster or loading inputs."""


class KubeGoneError(Exception):
    """Base class for every kube-gone failure."""


class ClusterError(KubeGoneError):
    """kubectl failed or the API server returned an unexpected error."""

    def __init__(self, message: str, reason: str = ""):
        super().__init__(message)
        self.reason = reason


class NotFoundError(ClusterError):
    """The requested path or resource type is not served (404)."""


class MethodNotSupportedError(ClusterError):
    """The resource type has no working list verb (405)."""


class ForbiddenError(ClusterError):
    """The current credentials may not read the resource (403)."""


class CatalogError(KubeGoneError):
    """The known API catalog file is missing or malformed."""


class ConfigError(KubeGoneError):
    """An environment setting holds an unusable value."""

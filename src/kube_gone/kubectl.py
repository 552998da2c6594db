"""
Kubectl invocation and Kubernetes API JSON helpers.

All cluster access goes through subprocess kubectl calls against raw API
paths (`kubectl get --raw`). Failures are mapped onto the exceptions in
kube_gone.errors using the reason kubectl prints for server errors.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
from typing import Any, Optional

from . import config
from .discovery import preferred_resources
from .errors import ClusterError, ForbiddenError, MethodNotSupportedError, NotFoundError
from .models import APIResourceList, GroupVersionResource

logger = logging.getLogger(__name__)

# e.g. "Error from server (NotFound): the server could not find the requested resource"
_SERVER_ERROR = re.compile(r"Error from server \((\w+)\)")

_REASON_ERRORS = {
    "NotFound": NotFoundError,
    "MethodNotAllowed": MethodNotSupportedError,
    "Forbidden": ForbiddenError,
}


def run_kubectl(
    args: list[str],
    context: Optional[str] = None,
    kubeconfig: Optional[str] = None,
    capture: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run kubectl with the given args.

    Args:
        args: List of arguments (e.g. ["get", "--raw", "/api"]).
        context: Optional kubeconfig context (--context).
        kubeconfig: Optional kubeconfig path (--kubeconfig).
        capture: If True, capture stdout/stderr; otherwise inherit from process.

    Returns:
        CompletedProcess with returncode, stdout, stderr.

    Raises:
        ClusterError: kubectl is missing or did not finish in time.
        ConfigError: KUBE_GONE_TIMEOUT is not a positive integer.
    """
    cmd = [config.KUBECTL]
    if kubeconfig:
        cmd += ["--kubeconfig", kubeconfig]
    if context:
        cmd += ["--context", context]
    timeout = config.kubectl_timeout()
    cmd += args
    logger.debug("Executing: %s", " ".join(cmd))
    try:
        return subprocess.run(
            cmd,
            capture_output=capture,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ClusterError(f"kubectl executable not found: {config.KUBECTL}") from e
    except subprocess.TimeoutExpired as e:
        raise ClusterError(
            f"kubectl timed out after {timeout}s: {' '.join(args)}"
        ) from e


def error_from_result(result: subprocess.CompletedProcess, what: str) -> ClusterError:
    """Build the exception matching a failed kubectl call."""
    stderr = (result.stderr or "").strip()
    match = _SERVER_ERROR.search(stderr)
    reason = match.group(1) if match else ""
    error_cls = _REASON_ERRORS.get(reason, ClusterError)
    message = f"{what}: {stderr}" if stderr else f"{what}: kubectl exited with code {result.returncode}"
    return error_cls(message, reason=reason)


def nested_string(obj: dict, *fields: str) -> Optional[str]:
    """
    Return the string at obj[fields[0]][fields[1]]..., or None.

    A missing key, a non-dict on the way, or a non-string leaf all yield
    None, so malformed objects can be skipped by the caller.
    """
    value: Any = obj
    for f in fields:
        if not isinstance(value, dict) or f not in value:
            return None
        value = value[f]
    if not isinstance(value, str):
        return None
    return value


class Kubectl:
    """
    Cluster access through kubectl.

    Provides discovery of server-preferred resources and namespace-agnostic
    listing of any group/version/resource.
    """

    def __init__(self, context: Optional[str] = None, kubeconfig: Optional[str] = None):
        self.context = context
        self.kubeconfig = kubeconfig

    def get_raw(self, path: str) -> dict:
        """
        GET an API server path and return the decoded JSON document.

        Raises:
            NotFoundError, MethodNotSupportedError, ForbiddenError: server said so.
            ClusterError: any other failure, including non-JSON output.
        """
        result = run_kubectl(
            ["get", "--raw", path],
            context=self.context,
            kubeconfig=self.kubeconfig,
        )
        if result.returncode != 0:
            raise error_from_result(result, f"GET {path} failed")
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ClusterError(f"GET {path} returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ClusterError(f"GET {path} returned {type(data).__name__}, expected an object")
        return data

    def server_preferred_resources(self) -> list[APIResourceList]:
        """
        Discover every resource the API server serves, preferred versions only.

        Reads /api and /apis, then each group/version's resource list.
        """
        core = self.get_raw("/api")
        groups = [
            {
                "name": "",
                "versions": [{"groupVersion": v, "version": v} for v in core.get("versions") or []],
            }
        ]
        groups.extend(self.get_raw("/apis").get("groups") or [])

        resources_by_gv: dict[str, dict] = {}
        for group in groups:
            for version in group.get("versions") or []:
                gv = version.get("groupVersion", "")
                path = f"/api/{gv}" if not group.get("name") else f"/apis/{gv}"
                logger.debug("Discovering resources of %s", gv)
                resources_by_gv[gv] = self.get_raw(path)
        return preferred_resources(groups, resources_by_gv)

    def list_objects(self, gvr: GroupVersionResource) -> list[dict]:
        """List all objects of one resource type across all namespaces."""
        data = self.get_raw(gvr.api_path())
        return [item for item in data.get("items") or [] if isinstance(item, dict)]

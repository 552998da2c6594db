"""
Detection logic: find live objects stored under API types that are gone.

detect_deleted() walks server-preferred discovery, skips groups registered by
CRDs or aggregated APIServices, and lists every top-level resource type whose
"<groupVersion>/<Kind>" key is missing from the known API catalog. Types that
still hold objects are reported as DeletedAPI entries.

Every error other than a benign "not found" / "method not allowed" on a list
call propagates: a partial scan could hide a deleted API.
"""

from __future__ import annotations

import logging
from collections.abc import Container
from typing import Protocol

from .config import API_REGISTRATION_GROUP, CRD_GROUP, DELETED_API_REPLACEMENTS
from .errors import ClusterError, ForbiddenError, MethodNotSupportedError, NotFoundError
from .kubectl import nested_string
from .models import (
    APIResourceList,
    DeletedAPI,
    GroupResourceKind,
    GroupVersionResource,
    list_objects,
    parse_group_version,
)

logger = logging.getLogger(__name__)


class ClusterAccess(Protocol):
    def server_preferred_resources(self) -> list[APIResourceList]: ...

    def list_objects(self, gvr: GroupVersionResource) -> list[dict]: ...


def _list_or_empty(cluster: ClusterAccess, gvr: GroupVersionResource) -> list[dict]:
    """List objects; a group missing on older clusters means no objects."""
    try:
        return cluster.list_objects(gvr)
    except NotFoundError:
        logger.debug("%s not served, nothing to list", gvr.api_path())
        return []


def crd_groups(cluster: ClusterAccess, version: str) -> set[str]:
    """Groups declared by CustomResourceDefinitions of the given version."""
    logger.debug("Populating CRD groups of version %s", version)
    gvr = GroupVersionResource(CRD_GROUP, version, "customresourcedefinitions")
    groups = set()
    for crd in _list_or_empty(cluster, gvr):
        group = nested_string(crd, "spec", "group")
        if not group:
            continue
        groups.add(group)
    return groups


def apiservice_groups(cluster: ClusterAccess, version: str) -> set[str]:
    """
    Groups served by aggregated APIServices of the given version.

    Only APIServices backed by a Service count: one without spec.service
    is a built-in API and stays in the scan.
    """
    logger.debug("Populating APIService groups of version %s", version)
    gvr = GroupVersionResource(API_REGISTRATION_GROUP, version, "apiservices")
    groups = set()
    for svc in _list_or_empty(cluster, gvr):
        service_name = nested_string(svc, "spec", "service", "name")
        group = nested_string(svc, "spec", "group")
        if service_name is None or not group:
            continue
        groups.add(group)
    return groups


def build_ignore_set(cluster: ClusterAccess, resource_lists: list[APIResourceList]) -> frozenset[str]:
    """
    Build the set of API groups excluded from deletion analysis.

    Scans CRDs and APIServices under every version of their groups that
    discovery reports, and unions the declared groups.
    """
    crds: set[str] = set()
    apiservices: set[str] = set()
    for resource_list in resource_lists:
        group, version = parse_group_version(resource_list.group_version)
        if group == CRD_GROUP:
            crds |= crd_groups(cluster, version)
        elif group == API_REGISTRATION_GROUP:
            apiservices |= apiservice_groups(cluster, version)
    ignored = frozenset(crds | apiservices)
    logger.debug("Ignoring %d API groups: %s", len(ignored), ", ".join(sorted(ignored)))
    return ignored


def list_resources(cluster: ClusterAccess, grk: GroupResourceKind) -> tuple[GroupVersionResource, list[dict]]:
    """
    List all live objects of one resource type.

    Returns:
        The resolved GroupVersionResource and the object documents. A type
        that is not found or has no list verb yields an empty list.

    Raises:
        ForbiddenError: missing permission to list the type.
        ClusterError: any other failure, including a malformed group/version.
    """
    try:
        group, version = parse_group_version(grk.group_version)
    except ValueError as e:
        raise ClusterError(f"Failed to parse GroupVersion of resource: {e}") from e

    gvr = GroupVersionResource(group, version, grk.resource_name)
    what = f"{group}/{version}/{grk.resource_kind}"
    try:
        return gvr, cluster.list_objects(gvr)
    except (NotFoundError, MethodNotSupportedError):
        return gvr, []
    except ForbiddenError as e:
        raise ForbiddenError(
            f"Failed to list objects of type {what}. Permission denied! "
            f"Please check if you have the proper authorization",
            reason=e.reason,
        ) from e
    except ClusterError as e:
        raise ClusterError(f"Failed to list objects of type {what}: {e}", reason=e.reason) from e


def _uid(obj: dict):
    meta = obj.get("metadata")
    return meta.get("uid") if isinstance(meta, dict) else None


def fix_replaced_items(cluster: ClusterAccess, old_items: list[dict], replacement: GroupResourceKind) -> list[dict]:
    """
    Drop old-API objects that are also served under the replacement API.

    The API server can serve the same stored object under the old and the
    new path (e.g. extensions/v1beta1 and networking.k8s.io/v1 Ingress).
    Objects are matched by metadata.uid; objects without a uid never match.
    """
    _, new_items = list_resources(cluster, replacement)
    new_uids = {str(uid) for uid in map(_uid, new_items) if uid is not None}
    return [item for item in old_items if _uid(item) is None or str(_uid(item)) not in new_uids]


def detect_deleted(known_apis: Container[str], cluster: ClusterAccess) -> list[DeletedAPI]:
    """
    Find resource types whose live objects are not covered by the catalog.

    Args:
        known_apis: "<groupVersion>/<Kind>" keys of every known API kind.
        cluster: Cluster access handle (see ClusterAccess).

    Returns:
        One DeletedAPI per affected resource type, in discovery order.
    """
    logger.debug("Getting all the server resources")
    resource_lists = cluster.server_preferred_resources()
    ignored = build_ignore_set(cluster, resource_lists)

    deleted: list[DeletedAPI] = []
    logger.debug("Walking through %d resource types", len(resource_lists))
    for resource_list in resource_lists:
        if resource_list.group in ignored:
            continue

        for resource in resource_list.resources:
            # Sub-resources (pods/status) are not types of their own
            if "/" in resource.name:
                continue

            key = f"{resource_list.group_version}/{resource.kind}"
            if key in known_apis:
                continue

            gvr, items = list_resources(
                cluster, GroupResourceKind(resource_list.group_version, resource.name, resource.kind)
            )
            replacement = DELETED_API_REPLACEMENTS.get(key)
            if replacement is not None:
                items = fix_replaced_items(cluster, items, replacement)

            if items:
                logger.debug("Found %d deleted items in %s/%s", len(items), gvr.group, resource.kind)
                deleted.append(
                    DeletedAPI(
                        group=gvr.group,
                        version=gvr.version,
                        name=resource.name,
                        kind=resource.kind,
                        deleted=True,
                        items=list_objects(items),
                    )
                )
    return deleted

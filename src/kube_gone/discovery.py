"""
Server-preferred resource selection from raw discovery documents.

A resource served by several versions of its group is kept once: under the
first version that serves it, unless the group's preferred version also serves
it, in which case the preferred version wins.
"""

from __future__ import annotations

import logging

from .models import APIResource, APIResourceList

logger = logging.getLogger(__name__)


def _preferred_version(group: dict) -> str:
    preferred = group.get("preferredVersion") or {}
    if preferred.get("version"):
        return preferred["version"]
    versions = group.get("versions") or []
    # The core group (/api) has no preferredVersion; its first version is it.
    return versions[0].get("version", "") if versions else ""


def preferred_resources(groups: list[dict], resources_by_gv: dict[str, dict]) -> list[APIResourceList]:
    """
    Reduce discovery to one version per group/resource.

    Args:
        groups: APIGroup documents in server order (core group first). Each has
            "name", "versions" ([{"groupVersion", "version"}]) and optionally
            "preferredVersion".
        resources_by_gv: APIResourceList documents keyed by groupVersion.
            Versions without an entry are skipped.

    Returns:
        One APIResourceList per discovered group/version, in server order.
        Lists may be empty when every resource moved to the preferred version.
        Sub-resources ("pods/status") are never included.
    """
    chosen: dict[tuple[str, str], str] = {}
    order: list[tuple[str, str, str]] = []  # (group_version, group, version)

    for group in groups:
        name = group.get("name", "")
        preferred = _preferred_version(group)
        for version in group.get("versions") or []:
            gv = version.get("groupVersion", "")
            ver = version.get("version", "")
            if gv not in resources_by_gv:
                continue
            order.append((gv, name, ver))
            for res in resources_by_gv[gv].get("resources") or []:
                res_name = res.get("name", "")
                if "/" in res_name:
                    continue
                key = (name, res_name)
                if key in chosen and ver != preferred:
                    continue
                chosen[key] = ver

    result = []
    for gv, name, ver in order:
        resources = [
            APIResource.from_discovery(res)
            for res in resources_by_gv[gv].get("resources") or []
            if "/" not in res.get("name", "") and chosen.get((name, res.get("name", ""))) == ver
        ]
        result.append(APIResourceList(group_version=gv, resources=resources))
    logger.debug("Discovered %d group versions", len(result))
    return result

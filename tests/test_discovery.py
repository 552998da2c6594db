"""Tests for server-preferred resource selection."""

from kube_gone.discovery import preferred_resources


def _group(name, versions, preferred=None):
    g = {
        "name": name,
        "versions": [{"groupVersion": f"{name}/{v}" if name else v, "version": v} for v in versions],
    }
    if preferred:
        g["preferredVersion"] = {"groupVersion": f"{name}/{preferred}", "version": preferred}
    return g


def _rl(gv, *names):
    return {"groupVersion": gv, "resources": [{"name": n, "kind": n.title(), "verbs": ["list"]} for n in names]}


def _names(result):
    return {r.group_version: [res.name for res in r.resources] for r in result}


def test_core_group_first_and_subresources_dropped():
    groups = [_group("", ["v1"]), _group("apps", ["v1"], "v1")]
    by_gv = {"v1": _rl("v1", "pods", "pods/status", "services"), "apps/v1": _rl("apps/v1", "deployments")}
    result = preferred_resources(groups, by_gv)
    assert [r.group_version for r in result] == ["v1", "apps/v1"]
    assert _names(result)["v1"] == ["pods", "services"]


def test_resource_in_several_versions_kept_under_preferred():
    """The preferred version wins, even when listed after another version."""
    groups = [_group("autoscaling", ["v1", "v2"], "v2")]
    by_gv = {
        "autoscaling/v1": _rl("autoscaling/v1", "horizontalpodautoscalers"),
        "autoscaling/v2": _rl("autoscaling/v2", "horizontalpodautoscalers"),
    }
    assert _names(preferred_resources(groups, by_gv)) == {
        "autoscaling/v1": [],
        "autoscaling/v2": ["horizontalpodautoscalers"],
    }


def test_resource_only_in_non_preferred_version_is_kept():
    groups = [_group("extensions", ["v1beta1"], "v1beta1"), _group("networking.k8s.io", ["v1", "v1beta1"], "v1")]
    by_gv = {
        "extensions/v1beta1": _rl("extensions/v1beta1", "ingresses"),
        "networking.k8s.io/v1": _rl("networking.k8s.io/v1", "networkpolicies"),
        "networking.k8s.io/v1beta1": _rl("networking.k8s.io/v1beta1", "ingresses", "networkpolicies"),
    }
    names = _names(preferred_resources(groups, by_gv))
    assert names["extensions/v1beta1"] == ["ingresses"]
    assert names["networking.k8s.io/v1"] == ["networkpolicies"]
    assert names["networking.k8s.io/v1beta1"] == ["ingresses"]


def test_first_version_wins_when_preferred_does_not_serve_it():
    groups = [_group("batch", ["v1beta1", "v2alpha1", "v1"], "v1")]
    by_gv = {
        "batch/v1beta1": _rl("batch/v1beta1", "cronjobs"),
        "batch/v2alpha1": _rl("batch/v2alpha1", "cronjobs"),
        "batch/v1": _rl("batch/v1", "jobs"),
    }
    names = _names(preferred_resources(groups, by_gv))
    assert names["batch/v1beta1"] == ["cronjobs"]
    assert names["batch/v2alpha1"] == []


def test_versions_without_resource_list_are_skipped():
    groups = [_group("metrics.k8s.io", ["v1beta1"], "v1beta1")]
    assert preferred_resources(groups, {}) == []


def test_kind_and_flags_are_kept():
    groups = [_group("", ["v1"])]
    by_gv = {"v1": {"groupVersion": "v1", "resources": [
        {"name": "pods", "kind": "Pod", "namespaced": True, "verbs": ["get", "list"]},
    ]}}
    (result,) = preferred_resources(groups, by_gv)
    pod = result.resources[0]
    assert (pod.kind, pod.namespaced, pod.verbs) == ("Pod", True, ["get", "list"])

"""Shared test helpers: an in-memory cluster and object builders."""

from kube_gone.models import APIResource, APIResourceList, GroupVersionResource


class FakeCluster:
    """In-memory cluster: discovery lists plus objects and errors per GVR."""

    def __init__(self, resource_lists=None, objects=None, errors=None):
        self.resource_lists = resource_lists or []
        self.objects = objects or {}
        self.errors = errors or {}
        self.listed = []

    def server_preferred_resources(self):
        return self.resource_lists

    def list_objects(self, gvr):
        self.listed.append(gvr)
        if gvr in self.errors:
            raise self.errors[gvr]
        return list(self.objects.get(gvr, []))


def resources(group_version, *pairs):
    """APIResourceList from (name, kind) pairs."""
    return APIResourceList(
        group_version=group_version,
        resources=[APIResource(name=name, kind=kind, verbs=["list"]) for name, kind in pairs],
    )


def obj(name, uid, namespace="default", **spec):
    o = {"metadata": {"name": name, "namespace": namespace, "uid": uid}}
    if spec:
        o["spec"] = spec
    return o


def gvr(group, version, resource):
    return GroupVersionResource(group, version, resource)



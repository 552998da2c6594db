"""
kube_gone: Find live Kubernetes objects stored under removed API types.

Walks the server-preferred discovery output, skips CRD and aggregated API
groups, and reports every top-level resource type whose key is missing from a
known API catalog but still holds live objects.
"""

__version__ = "0.1.0"

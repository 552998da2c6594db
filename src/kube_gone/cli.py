"""
CLI entry point for kube-gone.

Loads the known API catalog, runs detect_deleted() against the current
kubectl context, and lists every live object found under a deleted API.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from .catalog import load_catalog
from .config import BOLD, SGR0
from .detect import detect_deleted
from .errors import KubeGoneError
from .kubectl import Kubectl
from .models import DeletedAPI

# Shown at the bottom of kube-gone --help / kube-gone -h
EPILOG = """
Examples:

  kube-gone --catalog apis.json                  # Scan the current kubectl context
  kube-gone --catalog apis.json --context prod   # Scan another context
  kube-gone --catalog apis.json -v               # Log discovery and listing steps

The catalog is a JSON list (or object) of "<groupVersion>/<Kind>" keys,
e.g. ["v1/Pod", "apps/v1/Deployment"].
"""


def print_deleted(deleted: list[DeletedAPI]) -> None:
    """Print one line per live object stored under a deleted API."""
    print()
    print(f"{BOLD}Objects under deleted APIs{SGR0}")
    print("----------------------------------------")
    if not deleted:
        print("  (none found)")
        print()
        return
    for api in deleted:
        qualified = f"{api.name}.{api.group}" if api.group else api.name
        print(f"  {api.kind} ({qualified}/{api.version}):")
        for item in api.items:
            ns_suffix = f" (ns: {item.namespace})" if item.namespace else ""
            print(f"    {item.name}{ns_suffix}")
    print()


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option(
    "-c",
    "--catalog",
    "catalog_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="JSON file with the known API keys",
)
@click.option("--context", metavar="CTX", help="kubeconfig context to use")
@click.option("--kubeconfig", metavar="FILE", help="Path to the kubeconfig file")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Log discovery and listing steps",
)
def main(
    catalog_path: str,
    context: Optional[str],
    kubeconfig: Optional[str],
    verbose: bool,
) -> int:
    """
    Find live Kubernetes objects whose API type is no longer known.

    Every served, top-level resource type missing from the catalog is
    listed; types with live objects are reported. CRD and aggregated API
    groups are skipped.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        known_apis = load_catalog(catalog_path)
        deleted = detect_deleted(known_apis, Kubectl(context=context, kubeconfig=kubeconfig))
    except KubeGoneError as e:
        raise click.ClickException(str(e)) from e

    print_deleted(deleted)
    return 0


if __name__ == "__main__":
    sys.exit(main())

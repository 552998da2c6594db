"""
Loading of the known API catalog.

The catalog is a JSON file with the "<groupVersion>/<Kind>" keys of every
API kind considered current, either as a list or as the keys of an object
(e.g. {"apps/v1/Deployment": {}, "v1/Pod": {}}).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Union

from .errors import CatalogError

logger = logging.getLogger(__name__)


def load_catalog(path: Union[str, Path]) -> frozenset[str]:
    """
    Read the known API catalog from a JSON file.

    Raises:
        CatalogError: the file cannot be read, is not JSON, or holds
            anything other than a list of strings or an object.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise CatalogError(f"Cannot read API catalog {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"API catalog {path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        keys = list(data)
    elif isinstance(data, list) and all(isinstance(k, str) for k in data):
        keys = data
    else:
        raise CatalogError(
            f"API catalog {path} must be a list of \"<groupVersion>/<Kind>\" strings or an object keyed by them"
        )
    logger.debug("Loaded %d known APIs from %s", len(keys), path)
    return frozenset(keys)

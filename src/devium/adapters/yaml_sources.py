"""YAML-backed unit and layer sources.

Layout of one app under the apps root::

    <App>/pages.yaml          page name -> ordered list of unit names
    <App>/ui_map/<tag>.yaml   version suffix -> nested locator mapping

Version suffixes such as ``12_1`` are valid YAML 1.1 integers (``121``),
so documents are parsed with a SafeLoader variant whose integer resolver
does not accept underscores.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from typing import Any, Dict, List, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

_INT_TAG = "tag:yaml.org,2002:int"


class DocumentLoader(yaml.SafeLoader):
    """SafeLoader that keeps ``1_0``-style scalars as strings."""


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _INT_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
DocumentLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"""^(?:[-+]?0b[0-1]+
                    |[-+]?0[0-7]+
                    |[-+]?(?:0|[1-9][0-9]*)
                    |[-+]?0x[0-9a-fA-F]+)$""", re.X),
    list("-+0123456789"),
)


def load_document(path: str) -> Optional[Any]:
    """Parse a YAML document, or return None if the file does not exist.

    Raises:
        yaml.YAMLError: If the file is not valid YAML
    """
    if not os.path.isfile(path):
        return None
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.load(handle, Loader=DocumentLoader)


class _DocumentCache:
    """Parsed-document cache shared by the YAML sources."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._documents: Dict[str, Optional[Any]] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Optional[Any]:
        if not self.enabled:
            return load_document(path)
        with self._lock:
            if path not in self._documents:
                self._documents[path] = load_document(path)
                logger.debug("Loaded document %s", path)
            return self._documents[path]

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()


class YamlUnitSource:
    """UnitSource reading ``pages.yaml`` of an app directory."""

    def __init__(self, app_dir: str, pages_file: str = "pages.yaml", cache: bool = True) -> None:
        self.path = os.path.join(app_dir, pages_file)
        self._cache = _DocumentCache(enabled=cache)

    def _pages(self) -> Mapping[str, Any]:
        document = self._cache.get(self.path)
        if document is None:
            return {}
        if not isinstance(document, Mapping):
            raise ValueError(
                f"{self.path} must map page names to unit lists, "
                f"got {type(document).__name__}"
            )
        return document

    def enumerate_units(self, page: str) -> Optional[List[str]]:
        units = self._pages().get(page)
        if units is None:
            return None
        if isinstance(units, str) or not isinstance(units, list):
            raise ValueError(f"Units of page '{page}' in {self.path} must be a list")
        return [str(unit) for unit in units]

    def list_pages(self) -> List[str]:
        return [str(page) for page in self._pages()]

    def clear_cache(self) -> None:
        self._cache.clear()


class YamlLayerSource:
    """LayerSource reading ``<ui_map_dir>/<tag>.yaml`` documents.

    The file name is matched case-insensitively against the tag, so the
    ``Android`` units may keep their layers in ``android.yaml`` or
    ``ANDROID.yaml``.
    """

    def __init__(self, ui_map_dir: str, cache: bool = True) -> None:
        self.ui_map_dir = ui_map_dir
        self._cache = _DocumentCache(enabled=cache)

    def _path_for(self, tag: str) -> Optional[str]:
        if not os.path.isdir(self.ui_map_dir):
            return None
        wanted = {f"{tag.lower()}.yaml", f"{tag.lower()}.yml"}
        for name in sorted(os.listdir(self.ui_map_dir)):
            if name.lower() in wanted:
                return os.path.join(self.ui_map_dir, name)
        return None

    def load_layer_document(self, tag: str) -> Optional[Mapping[str, Any]]:
        path = self._path_for(tag)
        if path is None:
            return None
        document = self._cache.get(path)
        if document is None:
            return None
        if not isinstance(document, Mapping):
            logger.warning("Ignoring locator document %s: root is not a mapping", path)
            return None
        # single-segment suffixes such as 10 still parse as integers
        return {str(key): value for key, value in document.items()}

    def clear_cache(self) -> None:
        self._cache.clear()

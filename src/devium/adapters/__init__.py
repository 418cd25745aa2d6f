"""Storage adapters for the page resolution sources."""

from devium.adapters.yaml_sources import (
    DocumentLoader,
    YamlLayerSource,
    YamlUnitSource,
    load_document,
)

__all__ = ["DocumentLoader", "YamlLayerSource", "YamlUnitSource", "load_document"]

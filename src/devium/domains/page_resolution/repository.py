"""Source protocols for the Page Resolution Context.

The resolution core never reads files itself. Unit declarations and
locator layer documents are provided through these protocols; the YAML
adapters in ``devium.adapters`` are the default implementations.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class UnitSource(Protocol):
    """Provides the ordered unit declarations of an app's pages."""

    def enumerate_units(self, page: str) -> Optional[List[str]]:
        """Return the unit names declared for ``page`` in declaration order.

        Args:
            page: The page name (``Login``)

        Returns:
            The declared names, or None if the page is not declared
        """
        ...

    def list_pages(self) -> List[str]:
        """Return every declared page name."""
        ...


@runtime_checkable
class LayerSource(Protocol):
    """Provides locator layer documents per dimension tag."""

    def load_layer_document(self, tag: str) -> Optional[Mapping[str, Any]]:
        """Return the layer document for a dimension tag.

        The document's top-level keys are version suffixes (``"12_1"``)
        mapping to nested locator mappings.

        Args:
            tag: The dimension tag of the units being merged (``Android``)

        Returns:
            The parsed document, or None if the tag has no document
        """
        ...

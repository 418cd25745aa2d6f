"""Robot Framework libraries for devium."""

from devium.lib.PageLibrary import PageLibrary

__all__ = ["PageLibrary"]

"""Domain bounded contexts for devium.

This package contains:
- Page Resolution Context: Unit filtering, version resolution, chain
  building and locator layering
"""

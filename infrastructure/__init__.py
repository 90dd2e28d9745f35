"""
infrastructure package

Shared infrastructure components for the Shrdlite planner.

Modules:
    - interfaces: Graph interface, edges and search results for the A* engine
"""

from infrastructure.interfaces import BaseGraph, Edge, SearchResult

__all__ = [
    "BaseGraph",
    "Edge",
    "SearchResult",
]

"""
infrastructure/interfaces.py

Base interfaces for the search layer of the Shrdlite planner.

This module defines the contract between the generic A* engine and the graphs
it searches, so the engine never depends on the blocks world:

Interface Contract:
    A graph implements BaseGraph. It must:
    - generate the outgoing edges of a node (each with a positive cost)
    - map nodes to a hashable structural key; two nodes that describe the
      same configuration must produce equal keys, even if they are distinct
      objects (successor generation always allocates fresh nodes)

Usage:
    from infrastructure.interfaces import BaseGraph, Edge, SearchResult

    class GridGraph(BaseGraph[Cell]):
        def outgoing_edges(self, node: Cell) -> List[Edge[Cell]]:
            ...
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, Hashable, List, Optional, TypeVar

N = TypeVar("N")


@dataclass(frozen=True)
class Edge(Generic[N]):
    """
    A directed, labelled edge.

    Attributes:
        source: Node the edge leaves from
        target: Node the edge leads to
        cost: Positive traversal cost
        action: Label of the edge (e.g. the robot action letter)
    """

    source: N
    target: N
    cost: float = 1.0
    action: Optional[str] = None


@dataclass
class SearchResult(Generic[N]):
    """
    Outcome of a graph search.

    A failed search is a normal result (success=False), never an exception.

    Attributes:
        success: Whether a goal node was reached
        path: Nodes from start to goal (inclusive); empty on failure
        actions: Edge labels along the path
        cost: Total path cost (0.0 on failure)
        reason: "found", "exhausted" or "timeout"
        expansions: Number of nodes expanded
        generated: Number of nodes pushed onto the open set
        elapsed: Wall-clock seconds spent searching
    """

    success: bool
    path: List[N] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    cost: float = 0.0
    reason: str = ""
    expansions: int = 0
    generated: int = 0
    elapsed: float = 0.0

    @property
    def timed_out(self) -> bool:
        return self.reason == "timeout"


class BaseGraph(ABC, Generic[N]):
    """
    Abstract base class for graphs searched by the A* engine.

    Design Pattern:
        Strategy: the engine receives the graph, the goal predicate and the
        heuristic as interchangeable collaborators.
    """

    @abstractmethod
    def outgoing_edges(self, node: N) -> List[Edge[N]]:
        """
        Compute the edges that leave from a node.

        Args:
            node: Node to expand

        Returns:
            List of edges; every edge.source is `node`
        """

    def node_key(self, node: N) -> Hashable:
        """
        Structural key of a node, used for the open, closed and came-from maps.

        The default uses the node itself, which is correct for nodes with
        value-based __eq__/__hash__ (frozen dataclasses, tuples).
        """
        return node

"""
Directed multigraph over a process model.

Vertices are node IDs and edges are connection IDs, so parallel connections
between the same pair of nodes stay distinct. Provides the two algorithms
path search needs: bounded enumeration of simple paths and single-source
shortest paths over non-negative integer weights.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Set, Tuple
from dataclasses import dataclass, field
import heapq
import logging

from .models import Connection, Path, ProcessModel

logger = logging.getLogger(__name__)


@dataclass
class EnumerationResult:
    """Outcome of a bounded path enumeration: either all paths or an overflow."""
    paths: List[Path] = field(default_factory=list)
    overflow: bool = False
    reason: str = ""

    @property
    def ok(self) -> bool:
        return not self.overflow

    @classmethod
    def exceeded(cls, reason: str) -> "EnumerationResult":
        return cls(paths=[], overflow=True, reason=reason)


class ProcessGraph:
    """Adjacency-list multigraph keyed by node and connection IDs."""

    def __init__(self, vertices: Iterable[str], connections: Iterable[Connection]):
        self._vertices: List[str] = list(dict.fromkeys(vertices))
        self._connections: Dict[str, Connection] = {}
        self._outgoing: Dict[str, List[str]] = {v: [] for v in self._vertices}

        for connection in connections:
            if connection.source not in self._outgoing or connection.target not in self._outgoing:
                raise ValueError(f"Connection {connection.id} references a vertex outside the graph")
            self._connections[connection.id] = connection
            self._outgoing[connection.source].append(connection.id)

    @classmethod
    def from_process(cls, process: ProcessModel) -> "ProcessGraph":
        """Build the graph with one vertex per node and one edge per connection."""
        graph = cls((node.id for node in process.nodes), process.connections)
        logger.debug(f"Built graph with {graph.vertex_count} vertices and {graph.edge_count} edges")
        return graph

    @property
    def vertices(self) -> List[str]:
        return list(self._vertices)

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def edge_count(self) -> int:
        return len(self._connections)

    @property
    def connections(self) -> List[Connection]:
        return list(self._connections.values())

    def connection(self, edge_id: str) -> Connection:
        return self._connections[edge_id]

    def outgoing(self, vertex: str) -> List[Connection]:
        return [self._connections[e] for e in self._outgoing[vertex]]

    def without_edges(self, edge_ids: Iterable[str]) -> "ProcessGraph":
        """Return a copy of the graph with the given edges removed."""
        excluded = set(edge_ids)
        return ProcessGraph(
            self._vertices,
            (c for c in self._connections.values() if c.id not in excluded)
        )

    def simplified(self) -> "ProcessGraph":
        """Return a copy where parallel connections collapse into the first one."""
        seen: Set[Tuple[str, str]] = set()
        kept = []
        for connection in self._connections.values():
            pair = (connection.source, connection.target)
            if pair in seen:
                continue
            seen.add(pair)
            kept.append(connection)
        return ProcessGraph(self._vertices, kept)

    def all_simple_paths(
        self,
        sources: Iterable[str],
        targets: Iterable[str],
        max_paths: Optional[int] = None,
        max_depth: Optional[int] = None,
        max_expansions: Optional[int] = None
    ) -> EnumerationResult:
        """
        Enumerate every simple path from a source vertex to a target vertex.

        Paths are produced in depth-first order following connection order,
        so the result is deterministic for a given model.

        Args:
            sources: Vertices paths may start at
            targets: Vertices paths may end at
            max_paths: Give up once more than this many paths are found
            max_depth: Give up when a path would need more edges than this
            max_expansions: Give up after stepping onto this many edges in total,
                counting partial paths that never reach a target

        Returns:
            EnumerationResult with all paths, or flagged as overflow
        """
        target_set = set(targets)
        paths: List[Path] = []
        expansions = 0

        for source in sources:
            vertices = [source]
            edges: List[str] = []
            on_path = {source}
            stack = [iter(self._outgoing[source])]

            if source in target_set:
                paths.append(Path((source,), ()))

            while stack:
                edge_id = next(stack[-1], None)
                if edge_id is None:
                    stack.pop()
                    on_path.discard(vertices.pop())
                    if edges:
                        edges.pop()
                    continue

                target = self._connections[edge_id].target
                if target in on_path:
                    continue

                if max_depth is not None and len(edges) >= max_depth:
                    return EnumerationResult.exceeded(
                        f"path from {source} exceeds maximum depth of {max_depth} edges"
                    )

                expansions += 1
                if max_expansions is not None and expansions > max_expansions:
                    return EnumerationResult.exceeded(
                        f"search exceeded {max_expansions} edge expansions"
                    )

                vertices.append(target)
                edges.append(edge_id)
                on_path.add(target)

                if target in target_set:
                    paths.append(Path(tuple(vertices), tuple(edges)))
                    if max_paths is not None and len(paths) > max_paths:
                        return EnumerationResult.exceeded(
                            f"more than {max_paths} paths between start and end nodes"
                        )

                stack.append(iter(self._outgoing[target]))

        return EnumerationResult(paths=paths)

    def shortest_path(
        self,
        source: str,
        target: str,
        weights: Dict[str, int]
    ) -> Optional[Path]:
        """
        Dijkstra shortest path by total weight; None if target is unreachable.

        Edges missing from ``weights`` count as weight 1. Ties keep the path
        found first in connection order.
        """
        distances: Dict[str, int] = {source: 0}
        previous: Dict[str, str] = {}
        visited: Set[str] = set()
        counter = 0
        queue: List[Tuple[int, int, str]] = [(0, counter, source)]

        while queue:
            distance, _, vertex = heapq.heappop(queue)
            if vertex in visited:
                continue
            visited.add(vertex)
            if vertex == target:
                break

            for edge_id in self._outgoing[vertex]:
                weight = weights.get(edge_id, 1)
                if weight < 0:
                    raise ValueError(f"Negative weight on edge {edge_id}")
                neighbour = self._connections[edge_id].target
                candidate = distance + weight
                if neighbour not in distances or candidate < distances[neighbour]:
                    distances[neighbour] = candidate
                    previous[neighbour] = edge_id
                    counter += 1
                    heapq.heappush(queue, (candidate, counter, neighbour))

        if target not in visited:
            return None

        edges: List[str] = []
        vertex = target
        while vertex != source:
            edge_id = previous[vertex]
            edges.append(edge_id)
            vertex = self._connections[edge_id].source
        edges.reverse()

        vertices = [source] + [self._connections[e].target for e in edges]
        return Path(tuple(vertices), tuple(edges))

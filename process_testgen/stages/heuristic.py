"""
Heuristic path generation.

Fallback for graphs whose paths are too many to enumerate. For each
condition, every connection in a simplified graph is weighted so that the
shortest-path search prefers connections carrying the condition. Each still
uncovered connection is then wrapped into a path: the shortest path from the
start node to its source, the connection itself, and the shortest path from
its target to the nearest end node.
"""

from __future__ import annotations
from typing import Dict, List, Optional
import logging

from ..exceptions import UnreachableNodeError
from ..graph import ProcessGraph
from ..models import Path
from .conditions import ConditionAnalyzer, same_condition

logger = logging.getLogger(__name__)


class HeuristicPathGenerator:
    """Stitches shortest-path segments around each uncovered connection."""

    def __init__(self, analyzer: ConditionAnalyzer, start_id: str, end_ids: List[str]):
        self.analyzer = analyzer
        self.graph: ProcessGraph = analyzer.graph
        self.start_id = start_id
        self.end_ids = list(end_ids)
        # Parallel connections collapse to one edge here; the condition edge
        # itself is always inserted explicitly when a path is stitched.
        self.simplified = self.graph.simplified()

    def process(self) -> List[Path]:
        """Generate paths for all conditions, one condition after another."""
        paths: List[Path] = []
        for condition in self.analyzer.all_conditions():
            condition_paths = self.paths_for_condition(condition)
            logger.debug(f"Heuristic search for '{condition}' produced {len(condition_paths)} paths")
            paths.extend(condition_paths)
        return paths

    def weights_for(self, condition: str) -> Dict[str, int]:
        """Weight 0 for connections labelled ``condition``, vertex count otherwise."""
        penalty = self.graph.vertex_count
        return {
            c.id: 0 if same_condition(c.condition, condition) else penalty
            for c in self.simplified.connections
        }

    def paths_for_condition(self, condition: str) -> List[Path]:
        """
        Cover every connection labelled ``condition`` with stitched paths.

        Raises:
            UnreachableNodeError: If a connection cannot be reached from the
                start node or no end node is reachable from its target
        """
        weights = self.weights_for(condition)
        uncovered = self.analyzer.edges_with_condition(condition)
        paths: List[Path] = []

        while uncovered:
            connection = self.graph.connection(uncovered[0])

            start_path = self.simplified.shortest_path(self.start_id, connection.source, weights)
            if start_path is None:
                raise UnreachableNodeError(
                    connection.source, connection.id,
                    f"Could not find path from start node to {connection.source}"
                )

            end_path = self._best_end_path(connection.target, weights)
            if end_path is None:
                raise UnreachableNodeError(
                    connection.target, connection.id,
                    f"Could not find path to end node from {connection.target}"
                )

            edges = start_path.edges + (connection.id,) + end_path.edges
            vertices = start_path.vertices + end_path.vertices
            path = Path(vertices, edges)
            paths.append(path)

            covered = set(edges)
            uncovered = [e for e in uncovered if e not in covered]

        return paths

    def _best_end_path(self, source: str, weights: Dict[str, int]) -> Optional[Path]:
        """Shortest path to whichever end node needs the fewest connections."""
        best: Optional[Path] = None
        for end_id in self.end_ids:
            candidate = self.simplified.shortest_path(source, end_id, weights)
            if candidate is not None and (best is None or candidate.length < best.length):
                best = candidate
        return best

"""
Exact path generation.

For each condition, removes the connections whose conditions conflict with
it, enumerates every simple start-to-end path of what remains, and greedily
picks the shortest conflict-free paths until all connections carrying the
condition are covered.
"""

from __future__ import annotations
from typing import List, Optional
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging

from ..graph import ProcessGraph
from ..models import Path
from .conditions import ConditionAnalyzer

logger = logging.getLogger(__name__)


@dataclass
class ConditionPaths:
    """Paths selected for one condition and the edges they failed to cover."""
    condition: str
    paths: List[Path] = field(default_factory=list)
    uncovered_edges: List[str] = field(default_factory=list)
    overflow_reason: Optional[str] = None


@dataclass
class ExactResult:
    """Either the per-condition selections or an overflow that requires fallback."""
    selections: List[ConditionPaths] = field(default_factory=list)
    overflow: bool = False
    reason: str = ""

    @property
    def paths(self) -> List[Path]:
        return [path for selection in self.selections for path in selection.paths]


class ExactPathGenerator:
    """Enumerates paths per condition and selects a small covering set."""

    def __init__(
        self,
        analyzer: ConditionAnalyzer,
        start_id: str,
        end_ids: List[str],
        max_paths: Optional[int] = None,
        max_depth: Optional[int] = None,
        max_expansions: Optional[int] = None,
        workers: int = 1
    ):
        self.analyzer = analyzer
        self.graph: ProcessGraph = analyzer.graph
        self.start_id = start_id
        self.end_ids = list(end_ids)
        self.max_paths = max_paths
        self.max_depth = max_depth
        self.max_expansions = max_expansions
        self.workers = workers

    def process(self) -> ExactResult:
        """
        Select paths for every condition in the graph.

        Returns:
            ExactResult; ``overflow`` is set as soon as any condition's
            enumeration exceeds the configured limits, since the fallback
            decision applies to the whole run.
        """
        conditions = self.analyzer.all_conditions()
        logger.debug(f"Exact search over {len(conditions)} conditions with {self.workers} worker(s)")

        if self.workers > 1 and len(conditions) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                outcomes = list(executor.map(self.paths_for_condition, conditions))
        else:
            outcomes = [self.paths_for_condition(c) for c in conditions]

        for outcome in outcomes:
            if outcome.overflow_reason:
                return ExactResult(overflow=True, reason=outcome.overflow_reason)
        return ExactResult(selections=outcomes)

    def paths_for_condition(self, condition: str) -> ConditionPaths:
        """
        Shortest conflict-free paths covering every edge labelled ``condition``.

        When the enumeration is cut off, only ``overflow_reason`` is set.
        """
        excluded = [
            c.id for c in self.graph.connections
            if c.has_condition() and self.analyzer.conflicts_with(condition, c.condition)
        ]
        filtered = self.graph.without_edges(excluded)

        enumeration = filtered.all_simple_paths(
            [self.start_id], self.end_ids,
            max_paths=self.max_paths, max_depth=self.max_depth,
            max_expansions=self.max_expansions
        )
        if enumeration.overflow:
            logger.debug(f"Enumeration for condition '{condition}' overflowed: {enumeration.reason}")
            return ConditionPaths(condition=condition, overflow_reason=enumeration.reason)

        # sorted() is stable, so equal lengths keep enumeration order
        candidates = sorted(enumeration.paths, key=lambda p: p.length)
        candidates = [p for p in candidates if not self.analyzer.path_has_conflict(p)]

        edges_to_cover = set(self.analyzer.edges_with_condition(condition))
        selected: List[Path] = []
        for path in candidates:
            if not edges_to_cover:
                break
            if edges_to_cover.isdisjoint(path.edges):
                continue
            selected.append(path)
            edges_to_cover.difference_update(path.edges)

        uncovered = [e for e in self.analyzer.edges_with_condition(condition) if e in edges_to_cover]
        logger.debug(
            f"Condition '{condition}': {len(enumeration.paths)} candidates, "
            f"{len(selected)} selected, {len(uncovered)} edges uncovered"
        )
        return ConditionPaths(condition=condition, paths=selected, uncovered_edges=uncovered)

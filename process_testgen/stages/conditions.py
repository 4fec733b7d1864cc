"""
Condition analysis over a process graph.

Two conditions conflict when they label alternative outgoing connections of
the same decision node: a single path through the process can never satisfy
both. Decision matching is case-insensitive.
"""

from __future__ import annotations
from typing import Dict, FrozenSet, Iterable, List, Optional, Set
import logging

from ..graph import ProcessGraph
from ..models import Connection, Path, ProcessModel

logger = logging.getLogger(__name__)


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def same_condition(first: Optional[str], second: Optional[str]) -> bool:
    """Case-insensitive condition equality; blank never matches."""
    if is_blank(first) or is_blank(second):
        return False
    return first.casefold() == second.casefold()


class ConditionAnalyzer:
    """Answers condition and conflict questions for one process model."""

    def __init__(self, process: ProcessModel, graph: ProcessGraph):
        self.graph = graph
        self._decisions = [node.id for node in process.nodes_of_kind("decision")]
        self._conflicts: Dict[str, FrozenSet[str]] = {}
        # Filled up front so worker threads only read the cache
        for condition in self.all_conditions():
            self.conflicting_conditions(condition)

    def all_conditions(self) -> List[str]:
        """Distinct non-blank conditions, in order of first appearance."""
        conditions: List[str] = []
        for connection in self.graph.connections:
            if connection.has_condition() and connection.condition not in conditions:
                conditions.append(connection.condition)
        return conditions

    def conflicting_conditions(self, condition: str) -> FrozenSet[str]:
        """
        Conditions that cannot hold on the same path as ``condition``.

        For every decision with an outgoing connection labelled ``condition``,
        the conditions on its other outgoing connections are collected.
        """
        key = condition.casefold()
        if key not in self._conflicts:
            conflicts: Set[str] = set()
            for decision in self._decisions:
                outgoing = self.graph.outgoing(decision)
                if not any(same_condition(c.condition, condition) for c in outgoing):
                    continue
                conflicts.update(
                    c.condition for c in outgoing
                    if c.has_condition() and not same_condition(c.condition, condition)
                )
            self._conflicts[key] = frozenset(conflicts)
        return self._conflicts[key]

    def conflicts_with(self, condition: str, other: str) -> bool:
        """Case-insensitive membership of ``other`` in the conflict set of ``condition``."""
        return any(same_condition(other, c) for c in self.conflicting_conditions(condition))

    def conditions_of(self, path: Path) -> Set[str]:
        """Distinct non-blank conditions along the path's connections."""
        return {
            connection.condition
            for connection in self.connections_of(path)
            if connection.has_condition()
        }

    def path_has_conflict(self, path: Path) -> bool:
        """True if the path uses two mutually exclusive branch conditions."""
        conditions = self.conditions_of(path)
        keys = {c.casefold() for c in conditions}
        for condition in conditions:
            if any(c.casefold() in keys for c in self.conflicting_conditions(condition)):
                return True
        return False

    def edges_with_condition(self, condition: str,
                             connections: Optional[Iterable[Connection]] = None) -> List[str]:
        """IDs of connections labelled ``condition``, in model order."""
        if connections is None:
            connections = self.graph.connections
        return [c.id for c in connections if same_condition(c.condition, condition)]

    def connections_of(self, path: Path) -> List[Connection]:
        return [self.graph.connection(edge_id) for edge_id in path.edges]

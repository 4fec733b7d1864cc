"""Removal of paths whose connections are all covered by another path."""

from __future__ import annotations
from typing import List, Set
import logging

from ..models import Path

logger = logging.getLogger(__name__)


class PathDeduplicator:

    @staticmethod
    def process(paths: List[Path]) -> List[Path]:
        """
        Drop every path whose edge set is contained in another surviving path.

        Paths already marked obsolete cannot make others obsolete. When several
        paths share the same edge set, the last one in the list survives.
        """
        edge_sets = [path.edge_set for path in paths]
        obsolete: Set[int] = set()

        for i, edges in enumerate(edge_sets):
            for j, other in enumerate(edge_sets):
                if i == j or j in obsolete:
                    continue
                if edges <= other:
                    obsolete.add(i)
                    break

        kept = [path for i, path in enumerate(paths) if i not in obsolete]
        logger.debug(f"Deduplication kept {len(kept)} of {len(paths)} paths")
        return kept

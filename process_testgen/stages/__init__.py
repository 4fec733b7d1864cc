"""
Generation stages, run in order by the workflow:

1. ConditionAnalyzer - Branch conditions and their conflicts
2. ExactPathGenerator - Enumerated, conflict-free covering paths per condition
3. HeuristicPathGenerator - Shortest-path fallback when enumeration overflows
4. PathDeduplicator - Drops paths dominated by another path
5. TestCaseSynthesizer - Test cases, parameters and procedures per path
"""

from .conditions import ConditionAnalyzer
from .exact import ExactPathGenerator, ExactResult, ConditionPaths
from .heuristic import HeuristicPathGenerator
from .dedup import PathDeduplicator
from .synthesizer import TestCaseSynthesizer

__all__ = [
    "ConditionAnalyzer",
    "ExactPathGenerator",
    "ExactResult",
    "ConditionPaths",
    "HeuristicPathGenerator",
    "PathDeduplicator",
    "TestCaseSynthesizer"
]

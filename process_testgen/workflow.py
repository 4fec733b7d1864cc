"""
Process Test Case Generation Workflow

Orchestrates the stages:
1. Graph build + ConditionAnalyzer → 2. ExactPathGenerator
(→ HeuristicPathGenerator on overflow) → 3. PathDeduplicator
→ 4. TestCaseSynthesizer

Validates the start/end invariants, chooses the search mode, and reports
which conditions the generated test cases cover.
"""

from __future__ import annotations
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
import logging

from .config import GeneratorSettings
from .exceptions import ProcessStructureError
from .graph import ProcessGraph
from .models import (
    CoverageReport,
    Path,
    ProcessModel,
    TestCase,
    TestParameter,
    TestSpecification
)
from .registry import ParameterRegistry
from .stages import (
    ConditionAnalyzer,
    ExactPathGenerator,
    HeuristicPathGenerator,
    PathDeduplicator,
    TestCaseSynthesizer
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Everything one generation run produced."""
    mode: str
    paths: List[Path]
    test_cases: List[TestCase]
    parameters: List[TestParameter]
    coverage: CoverageReport
    execution_stats: Dict[str, Any] = field(default_factory=dict)


class TestGenerationWorkflow:
    """
    Main orchestrator for generating test cases from a process model.

    The generator only reads the process and only appends to the
    specification it is given.
    """
    __test__ = False

    def __init__(self, settings: Optional[GeneratorSettings] = None):
        self.settings = settings or GeneratorSettings()
        self._execution_stats: Dict[str, Any] = {}

    def run(self, process: ProcessModel, specification: TestSpecification) -> GenerationResult:
        """
        Generate test cases for the process and append them to the specification.

        Args:
            process: Process model to derive test cases from
            specification: Container receiving new parameters and test cases

        Returns:
            GenerationResult with the created entities and a coverage report

        Raises:
            ProcessStructureError: If there is not exactly one start node or no end node
            UnreachableNodeError: If heuristic search cannot reach an end node
        """
        logger.info(f"Starting test generation for process: {process.name or '<unnamed>'}")
        self._execution_stats = {}

        start_id = self._start_node(process)
        end_ids = self._end_nodes(process)

        graph = ProcessGraph.from_process(process)
        analyzer = ConditionAnalyzer(process, graph)
        conditions = analyzer.all_conditions()
        self._execution_stats["conditions"] = len(conditions)
        logger.info(f"Found {len(conditions)} conditions in {graph.edge_count} connections")

        mode, paths = self._search_paths(analyzer, start_id, end_ids)
        self._execution_stats["mode"] = mode
        self._execution_stats["candidate_paths"] = len(paths)

        paths = PathDeduplicator.process(paths)
        self._execution_stats["paths"] = len(paths)
        logger.info(f"Selected {len(paths)} paths after deduplication ({mode} mode)")

        registry = ParameterRegistry(specification)
        synthesizer = TestCaseSynthesizer(process, graph, registry)
        test_cases = synthesizer.process(paths, specification)
        self._execution_stats["test_cases"] = len(test_cases)
        self._execution_stats["parameters"] = len(registry)
        logger.info(f"Generated {len(test_cases)} test cases with {len(registry)} parameters")

        coverage = self._build_coverage_report(mode, analyzer, paths)
        if not coverage.is_complete:
            logger.warning(
                f"Could not cover all connections for conditions: "
                f"{', '.join(coverage.uncovered_conditions)}"
            )

        return GenerationResult(
            mode=mode,
            paths=paths,
            test_cases=test_cases,
            parameters=registry.created,
            coverage=coverage,
            execution_stats=self.get_execution_stats()
        )

    def _search_paths(self, analyzer: ConditionAnalyzer, start_id: str, end_ids: List[str]):
        """Exact search unless it overflows or is disabled; heuristic otherwise."""
        if self.settings.strategy == "auto":
            exact = ExactPathGenerator(
                analyzer, start_id, end_ids,
                max_paths=self.settings.max_paths,
                max_depth=self.settings.max_depth,
                max_expansions=self.settings.max_expansions,
                workers=self.settings.workers
            )
            result = exact.process()
            if not result.overflow:
                return "exact", result.paths
            logger.info(f"Exact path enumeration infeasible ({result.reason}); using heuristic search")

        heuristic = HeuristicPathGenerator(analyzer, start_id, end_ids)
        return "heuristic", heuristic.process()

    @staticmethod
    def _start_node(process: ProcessModel) -> str:
        starts = process.nodes_of_kind("start")
        if len(starts) != 1:
            raise ProcessStructureError(
                rule="start_nodes",
                node_ids=[n.id for n in starts],
                details=f"Number of start nodes in process is {len(starts)}, expected exactly 1"
            )
        return starts[0].id

    @staticmethod
    def _end_nodes(process: ProcessModel) -> List[str]:
        ends = process.nodes_of_kind("end")
        if not ends:
            raise ProcessStructureError(
                rule="end_nodes",
                node_ids=[],
                details="No end nodes in process were found"
            )
        return [n.id for n in ends]

    @staticmethod
    def _build_coverage_report(
        mode: str,
        analyzer: ConditionAnalyzer,
        paths: List[Path]
    ) -> CoverageReport:
        """Compare requested conditions with the conditions the final paths cover."""
        requested = analyzer.all_conditions()
        covered_edges = {edge for path in paths for edge in path.edges}

        covered, missing = [], {}
        for condition in requested:
            edges = analyzer.edges_with_condition(condition)
            left = [e for e in edges if e not in covered_edges]
            if left:
                missing[condition] = left
            else:
                covered.append(condition)

        return CoverageReport(
            mode=mode,
            requested_conditions=requested,
            covered_conditions=covered,
            uncovered_conditions=list(missing),
            uncovered_connections=missing
        )

    def get_execution_stats(self) -> Dict[str, Any]:
        """Get execution statistics."""
        return self._execution_stats.copy()


def generate_test_cases(
    process: ProcessModel,
    specification: Optional[TestSpecification] = None,
    settings: Optional[GeneratorSettings] = None
) -> TestSpecification:
    """
    Convenience function to generate a test specification for a process.

    Args:
        process: Process model
        specification: Container to append to (a new one if None)
        settings: Generation settings (defaults if None)

    Returns:
        The specification with the generated parameters and test cases
    """
    if specification is None:
        specification = TestSpecification(name=process.name)
    TestGenerationWorkflow(settings).run(process, specification)
    return specification

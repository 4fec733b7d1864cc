"""Test the end-to-end generation workflow."""

import logging

import pytest

from process_testgen.config import GeneratorSettings
from process_testgen.exceptions import ProcessStructureError, UnreachableNodeError
from process_testgen.models import ParameterType, TestCase, TestParameter, TestSpecification
from process_testgen.workflow import TestGenerationWorkflow, generate_test_cases


def _run(process, settings, specification=None):
    specification = specification if specification is not None else TestSpecification()
    result = TestGenerationWorkflow(settings).run(process, specification)
    return result, specification


class TestGenerationWorkflowRuns:

    def test_one_test_case_per_branch(self, order_process, single_worker_settings):
        result, specification = _run(order_process, single_worker_settings)

        assert result.mode == "exact"
        assert len(specification.test_cases) == 2
        assert [tc.value_of("Payment valid") for tc in specification.test_cases] == ["yes", "no"]
        assert [tc.value_of("status") for tc in specification.test_cases] == ["shipped", "cancelled"]
        assert [p.vertices[3] for p in result.paths] == ["ship", "cancel"]
        assert result.coverage.is_complete

    def test_paths_never_mix_conflicting_conditions(self, analyzer_for, amount_process,
                                                    single_worker_settings):
        analyzer = analyzer_for(amount_process)
        result, _ = _run(amount_process, single_worker_settings)

        assert [p.edges for p in result.paths] == [
            ("c1", "c3"),
            ("c1", "c2", "c4"),
            ("c1", "c2", "c5"),
        ]
        assert not any(analyzer.path_has_conflict(p) for p in result.paths)

    def test_partial_coverage_reported(self, nested_yes_process, single_worker_settings, caplog):
        """Test that uncoverable connections produce a warning, not an error."""
        with caplog.at_level(logging.WARNING, logger="process_testgen.workflow"):
            result, specification = _run(nested_yes_process, single_worker_settings)

        coverage = result.coverage
        assert coverage.mode == "exact"
        assert coverage.requested_conditions == ["yes", "no"]
        assert coverage.covered_conditions == ["yes"]
        assert coverage.uncovered_conditions == ["no"]
        assert coverage.uncovered_connections == {"no": ["c5"]}
        assert not coverage.is_complete
        assert len(specification.test_cases) == 2
        assert "Could not cover all connections" in caplog.text

    def test_overflow_falls_back_to_heuristic(self, amount_process):
        result, specification = _run(amount_process, GeneratorSettings(max_paths=1, workers=1))

        assert result.mode == "heuristic"
        assert result.coverage.mode == "heuristic"
        assert result.coverage.is_complete
        assert len(specification.test_cases) == 3

    def test_depth_limit_falls_back_to_heuristic(self, amount_process):
        result, _ = _run(amount_process, GeneratorSettings(max_depth=1, workers=1))

        assert result.mode == "heuristic"

    def test_expansion_budget_falls_back_to_heuristic(self, amount_process):
        result, _ = _run(amount_process, GeneratorSettings(max_expansions=2, workers=1))

        assert result.mode == "heuristic"
        assert result.coverage.is_complete

    def test_heuristic_strategy_covers_every_condition_edge(self, nested_yes_process):
        result, _ = _run(nested_yes_process, GeneratorSettings(strategy="heuristic"))

        assert result.mode == "heuristic"
        assert result.coverage.is_complete
        assert [p.edges for p in result.paths] == [
            ("c1", "c2", "c4", "c6"),
            ("c1", "c3"),
            ("c1", "c2", "c5"),
        ]

    def test_parameter_names_unique(self, amount_process, single_worker_settings):
        _, specification = _run(amount_process, single_worker_settings)
        names = [p.name for p in specification.parameters]

        assert names == ["Amount", "Amount 2"]
        assert len(set(p.id for p in specification.parameters)) == len(names)

    def test_existing_entries_left_untouched(self, order_process, single_worker_settings):
        legacy_parameter = TestParameter(id="param-1", name="legacy", type=ParameterType.OUTPUT)
        legacy_case = TestCase(id="testcase-1", name="Manual check", position=0)
        specification = TestSpecification(parameters=[legacy_parameter], test_cases=[legacy_case])

        result, _ = _run(order_process, single_worker_settings, specification)

        assert specification.parameters[0] is legacy_parameter
        assert specification.test_cases[0] is legacy_case
        assert [tc.id for tc in result.test_cases] == ["testcase-2", "testcase-3"]
        assert [p.id for p in result.parameters] == ["param-2", "param-3"]
        assert len(specification.parameters) == 3

    def test_execution_stats(self, order_process, single_worker_settings):
        result, _ = _run(order_process, single_worker_settings)

        assert result.execution_stats == {
            "conditions": 2,
            "mode": "exact",
            "candidate_paths": 2,
            "paths": 2,
            "test_cases": 2,
            "parameters": 2,
        }

    def test_generate_test_cases_convenience(self, order_process, single_worker_settings):
        specification = generate_test_cases(order_process, settings=single_worker_settings)

        assert specification.name == "order"
        assert len(specification.test_cases) == 2


class TestStructureErrors:

    def test_two_start_nodes(self, make_process, single_worker_settings):
        process = make_process(
            "two-starts",
            [{"kind": "start", "id": "s1"}, {"kind": "start", "id": "s2"}, {"kind": "end", "id": "e"}],
            [("c1", "s1", "e", None), ("c2", "s2", "e", None)]
        )
        specification = TestSpecification()

        with pytest.raises(ProcessStructureError) as exc_info:
            _run(process, single_worker_settings, specification)

        assert exc_info.value.rule == "start_nodes"
        assert exc_info.value.node_ids == ["s1", "s2"]
        assert "is 2, expected exactly 1" in str(exc_info.value)
        assert specification.test_cases == []

    def test_no_start_node(self, make_process, single_worker_settings):
        process = make_process("no-start", [{"kind": "end", "id": "e"}], [])

        with pytest.raises(ProcessStructureError, match="is 0"):
            _run(process, single_worker_settings)

    def test_no_end_node(self, make_process, single_worker_settings):
        process = make_process(
            "no-end",
            [{"kind": "start", "id": "s"}, {"kind": "step", "id": "a"}],
            [("c1", "s", "a", None)]
        )

        with pytest.raises(ProcessStructureError) as exc_info:
            _run(process, single_worker_settings)

        assert exc_info.value.rule == "end_nodes"

    def test_unreachable_end_in_heuristic_mode(self, dead_end_process):
        specification = TestSpecification()

        with pytest.raises(UnreachableNodeError) as exc_info:
            _run(dead_end_process, GeneratorSettings(strategy="heuristic"), specification)

        assert exc_info.value.node_id == "stuck"
        assert specification.test_cases == []

    def test_dead_end_tolerated_in_exact_mode(self, dead_end_process, single_worker_settings):
        result, _ = _run(dead_end_process, single_worker_settings)

        assert result.mode == "exact"
        assert [p.edges for p in result.paths] == [("c1", "c3")]
        assert result.coverage.uncovered_conditions == ["yes"]

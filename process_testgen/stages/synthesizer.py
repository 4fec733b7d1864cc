"""
TestCaseSynthesizer Node (Deterministic)

Turns selected paths into test cases. Each path is walked vertex by vertex;
the node kind decides which parameter assignment and which procedure step the
vertex contributes. Parameter names repeated within one path are numbered
("amount", "amount 2", ...) before they are resolved in the registry.
"""

from __future__ import annotations
from typing import Dict, List, Optional
from dataclasses import dataclass
import logging

from ..graph import ProcessGraph
from ..models import (
    Connection,
    DecisionNode,
    EndNode,
    ModelNode,
    ParameterAssignment,
    ParameterType,
    Path,
    ProcessModel,
    StartNode,
    StepNode,
    TestCase,
    TestParameter,
    TestProcedure,
    TestSpecification,
    TestStep,
)
from ..registry import ParameterRegistry, next_number

logger = logging.getLogger(__name__)

DEFAULT_VALUE = "is present"


@dataclass
class Assignment:
    """Variable/value pair read from an expression like 'temp=high'."""
    name: str
    value: str
    type: ParameterType = ParameterType.INPUT


def parse_assignment(expression: str, parameter_type: ParameterType = ParameterType.INPUT) -> Assignment:
    """Split at the first '='; a missing or blank value becomes 'is present'."""
    variable, _, value = expression.partition("=")
    value = value.strip()
    return Assignment(variable.strip(), value or DEFAULT_VALUE, parameter_type)


def unique_name(seen: List[str], name: str) -> str:
    """Number repeated names within one path: 'x', 'x 2', 'x 3', ..."""
    candidate = name
    counter = 1
    while candidate in seen:
        counter += 1
        candidate = f"{name} {counter}"
    seen.append(candidate)
    return candidate


class PathVisitor:
    """Receives one call per vertex of a path, chosen by the node's kind."""

    def visit_start(self, node: StartNode, outgoing: Optional[Connection], position: int) -> None:
        pass

    def visit_decision(self, node: DecisionNode, outgoing: Optional[Connection], position: int) -> None:
        pass

    def visit_step(self, node: StepNode, outgoing: Optional[Connection], position: int) -> None:
        pass

    def visit_end(self, node: EndNode, position: int) -> None:
        pass


def iterate_path(path: Path, nodes: Dict[str, ModelNode], graph: ProcessGraph,
                 visitor: PathVisitor) -> None:
    """Call the visitor for each vertex together with its outgoing connection on the path."""
    for position, vertex in enumerate(path.vertices):
        node = nodes[vertex]
        outgoing = graph.connection(path.edges[position]) if position < len(path.edges) else None

        if node.kind == "start":
            visitor.visit_start(node, outgoing, position)
        elif node.kind == "decision":
            visitor.visit_decision(node, outgoing, position)
        elif node.kind == "step":
            visitor.visit_step(node, outgoing, position)
        elif node.kind == "end":
            visitor.visit_end(node, position)


@dataclass
class StepDraft:
    position: int
    action: str
    expected_outcome: str
    description: str
    parameter_name: Optional[str] = None


class _PathRecorder(PathVisitor):
    """Collects assignments and procedure steps for a single path."""

    def __init__(self):
        self.seen_names: List[str] = []
        self.assignments: List[Assignment] = []
        self.steps: List[StepDraft] = []

    def _record(self, assignment: Assignment) -> str:
        name = unique_name(self.seen_names, assignment.name)
        self.assignments.append(Assignment(name, assignment.value, assignment.type))
        return name

    def visit_start(self, node, outgoing, position):
        parameter_name = None
        action = ""
        expected = ""
        if outgoing is not None and outgoing.has_condition():
            parameter_name = self._record(parse_assignment(outgoing.condition))
            action = f"Establish precondition: {outgoing.condition}"
            expected = outgoing.condition
        self.steps.append(StepDraft(position, action, expected, node.description, parameter_name))

    def visit_decision(self, node, outgoing, position):
        has_condition = outgoing is not None and outgoing.has_condition()
        parameter_name = None
        if node.name.strip():
            value = outgoing.condition if has_condition else DEFAULT_VALUE
            parameter_name = self._record(Assignment(node.name, value, ParameterType.INPUT))

        action = f"Establish condition: {node.name}={outgoing.condition}" if has_condition else ""
        expected = outgoing.condition if has_condition else ""
        self.steps.append(StepDraft(position, action, expected, node.description, parameter_name))

    def visit_step(self, node, outgoing, position):
        parameter_name = None
        outcome_parts = []
        if node.has_expected_outcome():
            parameter_name = self._record(parse_assignment(node.expected_outcome, ParameterType.OUTPUT))
            outcome_parts.append(node.expected_outcome)
        if outgoing is not None and outgoing.has_condition():
            outcome_parts.append(outgoing.condition)
        self.steps.append(
            StepDraft(position, node.name, ", ".join(outcome_parts), node.description, parameter_name)
        )


class TestCaseSynthesizer:
    """
    Creates one test case with a test procedure per path.

    Runs single-threaded: numbering and parameter reuse depend on the order
    in which paths are processed.
    """
    __test__ = False

    def __init__(self, process: ProcessModel, graph: ProcessGraph, registry: ParameterRegistry):
        self.graph = graph
        self.registry = registry
        self.nodes: Dict[str, ModelNode] = {node.id: node for node in process.nodes}

    def process(self, paths: List[Path], specification: TestSpecification) -> List[TestCase]:
        """
        Append a test case for every path to the specification.

        Test case and procedure numbers continue after the largest
        'testcase-N' or 'procedure-N' ID already in the specification.

        Returns:
            The newly created test cases, in path order
        """
        created: List[TestCase] = []
        existing = specification.test_cases
        number = max(
            next_number((tc.id for tc in existing), "testcase"),
            next_number((tc.procedure.id for tc in existing if tc.procedure), "procedure")
        )
        for path in paths:
            test_case = self.synthesize(path, number, position=len(specification.test_cases))
            number += 1
            specification.test_cases.append(test_case)
            created.append(test_case)

        logger.debug(f"Synthesized {len(created)} test cases, {len(self.registry)} parameters in use")
        return created

    def synthesize(self, path: Path, number: int, position: Optional[int] = None) -> TestCase:
        recorder = _PathRecorder()
        iterate_path(path, self.nodes, self.graph, recorder)

        assignments = [
            ParameterAssignment(
                parameter=self.registry.resolve(a.name, a.type),
                value=a.value
            )
            for a in recorder.assignments
        ]

        procedure = TestProcedure(
            id=f"procedure-{number}",
            name=f"Procedure {number}",
            steps=[self._make_step(draft, number) for draft in recorder.steps]
        )

        return TestCase(
            id=f"testcase-{number}",
            name=f"Test case {number}",
            position=number - 1 if position is None else position,
            assignments=assignments,
            consistent=True,
            procedure=procedure
        )

    def _make_step(self, draft: StepDraft, number: int) -> TestStep:
        parameter: Optional[TestParameter] = None
        if draft.parameter_name is not None:
            parameter = self.registry.lookup(draft.parameter_name)
        return TestStep(
            id=f"step-{number}-{draft.position}",
            position=draft.position,
            name=draft.action,
            expected_outcome=draft.expected_outcome,
            description=draft.description,
            referenced_parameter=parameter
        )

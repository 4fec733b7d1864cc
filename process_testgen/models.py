"""
Data models for the process test case generator.

The input side describes a process model: a flowchart of start, decision,
step and end nodes connected by optionally-conditioned connections. The
output side holds the test specification entities the generator appends to
a caller-owned container: test parameters, test cases and their procedures.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Literal, Union, Tuple, Annotated
from dataclasses import dataclass
from enum import Enum
from pydantic import BaseModel, Field, model_validator


# ==================== Process Model ====================

class StartNode(BaseModel):
    """Unique entry point of a process."""
    kind: Literal["start"] = "start"
    id: str = Field(..., description="Node ID, unique within the process")
    name: str = Field("", description="Display name")
    description: str = Field("", description="Free text copied into test steps")


class DecisionNode(BaseModel):
    """Branching node; its name labels the input parameter it decides on."""
    kind: Literal["decision"] = "decision"
    id: str = Field(..., description="Node ID, unique within the process")
    name: str = Field("", description="Parameter label for the decision")
    description: str = Field("", description="Free text copied into test steps")


class StepNode(BaseModel):
    """Action node with an optional expected outcome."""
    kind: Literal["step"] = "step"
    id: str = Field(..., description="Node ID, unique within the process")
    name: str = Field("", description="Action performed in this step")
    description: str = Field("", description="Free text copied into test steps")
    expected_outcome: Optional[str] = Field(None,
        description="Outcome expression of the form 'variable[=value]'")

    def has_expected_outcome(self) -> bool:
        return bool(self.expected_outcome and self.expected_outcome.strip())


class EndNode(BaseModel):
    """One of possibly several exit points of a process."""
    kind: Literal["end"] = "end"
    id: str = Field(..., description="Node ID, unique within the process")
    name: str = Field("", description="Display name")
    description: str = Field("", description="Free text")


ModelNode = Annotated[
    Union[StartNode, DecisionNode, StepNode, EndNode],
    Field(discriminator="kind")
]


class Connection(BaseModel):
    """Directed transition between two nodes."""
    id: str = Field(..., description="Connection ID, unique within the process")
    source: str = Field(..., description="ID of the source node")
    target: str = Field(..., description="ID of the target node")
    condition: Optional[str] = Field(None, description="Branch condition; blank means unconditional")

    def has_condition(self) -> bool:
        return bool(self.condition and self.condition.strip())


class ProcessModel(BaseModel):
    """Read-only process graph handed to the generator."""
    name: str = Field("", description="Process name for reporting")
    nodes: List[ModelNode] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_references(self):
        node_ids = [node.id for node in self.nodes]
        duplicates = sorted({i for i in node_ids if node_ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate node IDs: {duplicates}")

        connection_ids = [c.id for c in self.connections]
        duplicates = sorted({i for i in connection_ids if connection_ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate connection IDs: {duplicates}")

        known = set(node_ids)
        dangling = [c.id for c in self.connections
                    if c.source not in known or c.target not in known]
        if dangling:
            raise ValueError(f"Connections reference unknown nodes: {dangling}")
        return self

    def nodes_of_kind(self, kind: str) -> List[ModelNode]:
        return [node for node in self.nodes if node.kind == kind]


# ==================== Paths ====================

@dataclass(frozen=True)
class Path:
    """A start-to-end walk: ordered vertex IDs and ordered connection IDs."""
    vertices: Tuple[str, ...]
    edges: Tuple[str, ...]

    @property
    def length(self) -> int:
        return len(self.edges)

    @property
    def edge_set(self) -> frozenset:
        return frozenset(self.edges)


# ==================== Test Specification ====================

class ParameterType(str, Enum):
    INPUT = "INPUT"
    OUTPUT = "OUTPUT"


class TestParameter(BaseModel):
    """Named input or output variable referenced by test cases."""
    __test__ = False

    id: str = Field(..., description="Parameter ID (param-1, param-2, ...)")
    name: str = Field(..., description="Unique parameter name within a generation run")
    type: ParameterType


class ParameterAssignment(BaseModel):
    """Value a test case assigns to (or expects of) a parameter."""
    parameter: TestParameter
    value: str


class TestStep(BaseModel):
    """One human-readable step of a test procedure."""
    __test__ = False

    id: str
    position: int = Field(..., description="Index of the vertex on the path")
    name: str = Field("", description="Action text")
    expected_outcome: str = ""
    description: str = ""
    referenced_parameter: Optional[TestParameter] = None


class TestProcedure(BaseModel):
    """Ordered steps realizing a test case."""
    __test__ = False

    id: str
    name: str
    steps: List[TestStep] = Field(default_factory=list)


class TestCase(BaseModel):
    """Parameter assignments derived from one path through the process."""
    __test__ = False

    id: str = Field(..., description="Test case ID (testcase-1, testcase-2, ...)")
    name: str
    position: int
    assignments: List[ParameterAssignment] = Field(default_factory=list)
    consistent: bool = True
    procedure: Optional[TestProcedure] = None

    def value_of(self, parameter_name: str) -> Optional[str]:
        """Return the value assigned to the named parameter, if any."""
        for assignment in self.assignments:
            if assignment.parameter.name == parameter_name:
                return assignment.value
        return None


class TestSpecification(BaseModel):
    """Caller-owned container the generator appends to."""
    __test__ = False

    name: str = ""
    parameters: List[TestParameter] = Field(default_factory=list)
    test_cases: List[TestCase] = Field(default_factory=list)


# ==================== Reporting ====================

class CoverageReport(BaseModel):
    """Which conditions the generated paths cover."""
    mode: Literal["exact", "heuristic"]
    requested_conditions: List[str]
    covered_conditions: List[str]
    uncovered_conditions: List[str]
    uncovered_connections: Dict[str, List[str]] = Field(default_factory=dict,
        description="Condition to IDs of connections left uncovered")

    @property
    def is_complete(self) -> bool:
        return not self.uncovered_conditions

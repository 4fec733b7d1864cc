"""Pytest configuration and fixtures for process test generator tests."""

import pytest
from process_testgen.config import GeneratorSettings
from process_testgen.graph import ProcessGraph
from process_testgen.models import ProcessModel
from process_testgen.stages import ConditionAnalyzer


def _process(name, nodes, connections):
    return ProcessModel.model_validate({
        "name": name,
        "nodes": nodes,
        "connections": [
            {"id": cid, "source": source, "target": target, "condition": condition}
            for cid, source, target, condition in connections
        ]
    })


@pytest.fixture
def order_process():
    """
    One decision with two conditioned branches to distinct steps.

    start -> enter -> [Payment valid] -yes-> ship -> end
                                      -no--> cancel -> end
    """
    return _process(
        "order",
        [
            {"kind": "start", "id": "s", "name": "Start", "description": "Customer is logged in"},
            {"kind": "step", "id": "enter", "name": "Enter order", "description": "Fill the order form"},
            {"kind": "decision", "id": "d", "name": "Payment valid", "description": "Check payment"},
            {"kind": "step", "id": "ship", "name": "Ship order", "expected_outcome": "status=shipped"},
            {"kind": "step", "id": "cancel", "name": "Cancel order", "expected_outcome": "status=cancelled"},
            {"kind": "end", "id": "e", "name": "End"},
        ],
        [
            ("c1", "s", "enter", None),
            ("c2", "enter", "d", None),
            ("c3", "d", "ship", "yes"),
            ("c4", "d", "cancel", "no"),
            ("c5", "ship", "e", None),
            ("c6", "cancel", "e", None),
        ]
    )


@pytest.fixture
def amount_process():
    """
    Two decisions sharing the name 'Amount'; d2 reaches the end through two
    parallel connections.

    s -> d1 -(>100)--> d2 -(<500)--> e
            -(<=100)-> e   -(>=500)-> e
    """
    return _process(
        "amount",
        [
            {"kind": "start", "id": "s"},
            {"kind": "decision", "id": "d1", "name": "Amount"},
            {"kind": "decision", "id": "d2", "name": "Amount"},
            {"kind": "end", "id": "e"},
        ],
        [
            ("c1", "s", "d1", None),
            ("c2", "d1", "d2", ">100"),
            ("c3", "d1", "e", "<=100"),
            ("c4", "d2", "e", "<500"),
            ("c5", "d2", "e", ">=500"),
        ]
    )


@pytest.fixture
def nested_yes_process():
    """
    Two decisions both branching on yes/no; d2 is only reachable through d1=yes,
    so d2's 'no' branch cannot be covered without mixing yes and no.

    s -> d1 -yes-> d2 -yes-> step -> e
            -no--> e  -no--> e
    """
    return _process(
        "nested",
        [
            {"kind": "start", "id": "s"},
            {"kind": "decision", "id": "d1", "name": "Registered"},
            {"kind": "decision", "id": "d2", "name": "Verified"},
            {"kind": "step", "id": "step", "name": "Grant access"},
            {"kind": "end", "id": "e"},
        ],
        [
            ("c1", "s", "d1", None),
            ("c2", "d1", "d2", "yes"),
            ("c3", "d1", "e", "no"),
            ("c4", "d2", "step", "yes"),
            ("c5", "d2", "e", "no"),
            ("c6", "step", "e", None),
        ]
    )


@pytest.fixture
def dead_end_process():
    """The 'yes' branch leads to a step with no way to an end node."""
    return _process(
        "dead-end",
        [
            {"kind": "start", "id": "s"},
            {"kind": "decision", "id": "d", "name": "Approved"},
            {"kind": "step", "id": "stuck", "name": "Wait forever"},
            {"kind": "end", "id": "e"},
        ],
        [
            ("c1", "s", "d", None),
            ("c2", "d", "stuck", "yes"),
            ("c3", "d", "e", "no"),
        ]
    )


@pytest.fixture
def make_process():
    """Factory for ad-hoc process models: nodes as dicts, connections as tuples."""
    return _process


@pytest.fixture
def analyzer_for():
    """Build a ConditionAnalyzer (and its graph) for a process."""
    def build(process):
        return ConditionAnalyzer(process, ProcessGraph.from_process(process))
    return build


@pytest.fixture
def single_worker_settings():
    return GeneratorSettings(workers=1)

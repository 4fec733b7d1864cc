"""Custom exceptions for the process test case generator."""

from typing import List, Optional


class TestGenerationError(Exception):
    """Base exception for test generation errors."""
    pass


class ProcessStructureError(TestGenerationError):
    """
    Raised when the process model violates the start/end node invariants.

    Attributes:
        rule: Short identifier of the violated invariant ('start_nodes' or 'end_nodes')
        node_ids: IDs of the offending nodes (empty when nodes are missing)
        details: Human-readable explanation of what went wrong
    """

    def __init__(self, rule: str, node_ids: List[str], details: str):
        self.rule = rule
        self.node_ids = node_ids
        self.details = details
        super().__init__(f"Invalid process structure ({rule}): {details}")


class UnreachableNodeError(TestGenerationError):
    """Raised when heuristic path search cannot connect a required vertex."""

    def __init__(self, node_id: str, connection_id: Optional[str], details: str):
        self.node_id = node_id
        self.connection_id = connection_id
        self.details = details
        super().__init__(details)


class ConfigurationError(TestGenerationError):
    """Raised when configuration is invalid or missing."""
    pass

"""
Process Test Case Generator

Derives test cases and step-by-step test procedures from process models
(flowcharts of start, decision, step and end nodes). Paths are chosen so that
every branch condition is covered without mixing alternative branches of the
same decision.
"""

__version__ = "0.1.0"
__all__ = [
    "TestGenerationWorkflow",
    "GenerationResult",
    "generate_test_cases",
    "GeneratorSettings",
    "ProcessModel",
    "TestSpecification",
    "TestGenerationError"
]

from .config import GeneratorSettings
from .models import ProcessModel, TestSpecification
from .workflow import TestGenerationWorkflow, GenerationResult, generate_test_cases
from .exceptions import TestGenerationError

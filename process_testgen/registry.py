"""Per-run registry of test parameters keyed by name."""

from __future__ import annotations
from typing import Dict, Iterable, Optional
import logging
import re

from .models import ParameterType, TestParameter, TestSpecification

logger = logging.getLogger(__name__)


def next_number(ids: Iterable[str], prefix: str) -> int:
    """One past the largest N among IDs of the form '<prefix>-N'; 1 if there are none."""
    pattern = re.compile(rf"{re.escape(prefix)}-(\d+)")
    numbers = [int(m.group(1)) for m in map(pattern.fullmatch, ids) if m]
    return max(numbers, default=0) + 1


class ParameterRegistry:
    """
    Creates test parameters lazily and hands out the same instance per name.

    One registry belongs to one generation run. New parameters are appended to
    the specification; parameters that were already in it are left untouched
    and never reused, even when a name matches. New IDs continue after the
    largest existing 'param-N' ID.
    Not thread-safe: synthesis must run on a single thread.
    """

    def __init__(self, specification: TestSpecification):
        self.specification = specification
        self._parameters: Dict[str, TestParameter] = {}
        self._next_id = next_number((p.id for p in specification.parameters), "param")

    def resolve(self, name: str, parameter_type: ParameterType) -> TestParameter:
        """Return the parameter registered under ``name``, creating it if needed."""
        parameter = self._parameters.get(name)
        if parameter is None:
            parameter = TestParameter(id=f"param-{self._next_id}", name=name, type=parameter_type)
            self._next_id += 1
            self._parameters[name] = parameter
            self.specification.parameters.append(parameter)
            logger.debug(f"Created {parameter_type.value} parameter '{name}'")
        return parameter

    def lookup(self, name: str) -> Optional[TestParameter]:
        return self._parameters.get(name)

    @property
    def created(self) -> list:
        return list(self._parameters.values())

    def __len__(self) -> int:
        return len(self._parameters)

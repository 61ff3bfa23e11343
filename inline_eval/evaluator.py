"""
Evaluator interface and implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class Evaluator(ABC):
    """Abstract base class for evaluators."""

    @abstractmethod
    def evaluate(self, source: str) -> Any:
        """
        Evaluate source text and return its value.

        Errors raised by the evaluated code propagate to the caller unchanged.
        """
        pass


class PythonEvaluator(Evaluator):
    """
    Evaluates Python source in a persistent namespace.

    Expressions return their value. Statements (assignments, imports,
    definitions) are executed for their effect and return None.
    """

    def __init__(self, namespace: Optional[dict] = None, filename: str = "<inline>"):
        self.namespace = namespace if namespace is not None else {"__name__": "__inline__"}
        self.filename = filename

    def evaluate(self, source: str) -> Any:
        logger.debug("Evaluating %d chars in %s", len(source), self.filename)
        try:
            code = compile(source, self.filename, "eval")
        except SyntaxError:
            code = None

        if code is not None:
            return eval(code, self.namespace)

        # Not an expression; a SyntaxError here belongs to the caller
        exec(compile(source, self.filename, "exec"), self.namespace)
        return None


class MockEvaluator(Evaluator):
    """Mock evaluator for testing without running code."""

    def __init__(
        self,
        results: Optional[Union[list, dict]] = None,
        default: Any = None,
    ):
        """
        Args:
            results: Either a list of values returned in order, or a dict
                mapping source text to its value. An exception instance in
                either position is raised instead of returned.
            default: Value returned once results are exhausted or unmapped
        """
        self.results = results if results is not None else []
        self.default = default
        self.call_count = 0
        self.sources: list[str] = []

    def add_result(self, result: Any):
        """Add a result to the queue."""
        if isinstance(self.results, dict):
            raise TypeError("Cannot queue results on a mapping-backed MockEvaluator")
        self.results.append(result)

    def evaluate(self, source: str) -> Any:
        self.sources.append(source)

        if isinstance(self.results, dict):
            result = self.results.get(source, self.default)
        elif self.call_count < len(self.results):
            result = self.results[self.call_count]
        else:
            result = self.default

        self.call_count += 1

        if isinstance(result, BaseException):
            raise result
        return result


def get_evaluator(kind: str = "python", **kwargs) -> Evaluator:
    """Factory function to get an evaluator."""
    if kind == "python":
        return PythonEvaluator(**kwargs)
    elif kind == "mock":
        return MockEvaluator(**kwargs)
    else:
        raise ValueError(f"Unknown evaluator: {kind}")

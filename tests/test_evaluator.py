"""Tests for evaluators."""

import pytest

from inline_eval.evaluator import MockEvaluator, PythonEvaluator, get_evaluator


class TestPythonEvaluator:

    def test_expression(self):
        assert PythonEvaluator().evaluate("1 + 2") == 3

    def test_statement_returns_none(self):
        evaluator = PythonEvaluator()
        assert evaluator.evaluate("x = 20") is None
        assert evaluator.evaluate("x + 22") == 42

    def test_shared_namespace(self):
        namespace = {"base": 10}
        assert PythonEvaluator(namespace).evaluate("base * 2") == 20

    def test_errors_propagate(self):
        with pytest.raises(ZeroDivisionError):
            PythonEvaluator().evaluate("1 / 0")

    def test_syntax_error_propagates(self):
        with pytest.raises(SyntaxError):
            PythonEvaluator().evaluate("def (")


class TestMockEvaluator:

    def test_queued_results(self):
        evaluator = MockEvaluator([1, 2])
        assert evaluator.evaluate("a") == 1
        assert evaluator.evaluate("b") == 2
        assert evaluator.evaluate("c") is None
        assert evaluator.sources == ["a", "b", "c"]
        assert evaluator.call_count == 3

    def test_mapped_results(self):
        evaluator = MockEvaluator({"(+ 1 2)": 3}, default="?")
        assert evaluator.evaluate("(+ 1 2)") == 3
        assert evaluator.evaluate("(foo)") == "?"

    def test_queued_exception(self):
        evaluator = MockEvaluator()
        evaluator.add_result(KeyError("missing"))
        with pytest.raises(KeyError):
            evaluator.evaluate("(get m :k)")

    def test_cannot_queue_on_mapping(self):
        with pytest.raises(TypeError):
            MockEvaluator({}).add_result(1)


class TestFactory:

    def test_get_evaluator(self):
        assert isinstance(get_evaluator("python"), PythonEvaluator)
        assert isinstance(get_evaluator("mock", results=[1]), MockEvaluator)

    def test_unknown_evaluator(self):
        with pytest.raises(ValueError):
            get_evaluator("lisp")

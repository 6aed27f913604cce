"""
Tests for the custom step evaluator.
"""
import logging

import pytest

from policyflow.engine.evaluator import CustomStepEvaluator
from policyflow.engine.models import Outcome


@pytest.fixture
def evaluator():
    return CustomStepEvaluator()


class TestCustomStepEvaluator:
    """Raising vs. not raising decides the outcome."""

    def test_clean_code_succeeds(self, evaluator):
        code = "limits = {'auto': 50000}\ntotal = sum(limits.values())\nif total < 1:\n    raise ValueError('no cover')"
        assert evaluator.evaluate(code) == Outcome.SUCCESS

    @pytest.mark.parametrize("code", [
        "raise ValueError('declined')",
        "1 / 0",
        "undefined_name + 1",
        "def broken(:\n    pass",
        "import os",
        "open('/etc/passwd')",
        "raise Exception.__base__('escaped')",
    ])
    def test_faulting_code_fails(self, evaluator, code):
        assert evaluator.evaluate(code) == Outcome.FAILURE

    @pytest.mark.parametrize("code", [None, "", "   \n  "])
    def test_missing_code_fails(self, evaluator, code):
        assert evaluator.evaluate(code) == Outcome.FAILURE

    def test_namespace_is_fresh_per_call(self, evaluator):
        assert evaluator.evaluate("shared = 1") == Outcome.SUCCESS
        assert evaluator.evaluate("shared + 1") == Outcome.FAILURE

    def test_disabled_evaluator_never_runs_code(self):
        evaluator = CustomStepEvaluator(enabled=False)
        assert evaluator.evaluate("x = 1") == Outcome.FAILURE

    def test_fault_is_logged(self, evaluator, caplog):
        caplog.set_level(logging.WARNING, logger="policyflow.engine.evaluator")

        evaluator.evaluate("raise RuntimeError('rating offline')", label="Rate")

        assert "Rate" in caplog.text
        assert "rating offline" in caplog.text

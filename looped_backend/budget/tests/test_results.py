# budget/tests/test_results.py

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError, OperationalError
from django.test import SimpleTestCase

from budget.services.exceptions import (
    InsufficientFundsError,
    InternalConsistencyError,
    InvalidInputError,
    NotFoundOrUnauthorizedError,
)
from budget.services.results import OperationResult, run_operation


def _raise(exc):
    def fn(**kwargs):
        raise exc

    return fn


class RunOperationTests(SimpleTestCase):
    """
    GUARANTEES:
    - Business failures come back as values, never raised
    - Storage failures are reported without leaking their message
    """

    def test_success_wraps_value(self):
        result = run_operation("echo", lambda **kw: kw["value"], value=42)

        self.assertTrue(result.ok)
        self.assertEqual(result.value, 42)
        self.assertEqual(result.unwrap(), 42)

    def test_ledger_errors_are_returned_as_is(self):
        error = InsufficientFundsError(current=1, required=2)
        result = run_operation("spend", _raise(error))

        self.assertFalse(result.ok)
        self.assertIs(result.error, error)
        with self.assertRaises(InsufficientFundsError):
            result.unwrap()

    def test_missing_rows_become_not_found(self):
        result = run_operation("lookup", _raise(ObjectDoesNotExist("gone")))
        self.assertIsInstance(result.error, NotFoundOrUnauthorizedError)

    def test_model_validation_becomes_invalid_input(self):
        result = run_operation("save", _raise(ValidationError({"name": ["required"]})))

        self.assertIsInstance(result.error, InvalidInputError)
        self.assertIn("name", str(result.error))

    def test_lock_timeouts_are_retryable_internal_errors(self):
        with self.assertLogs("budget.services.results", level="ERROR"):
            result = run_operation("spend", _raise(OperationalError("lock timeout")))

        self.assertIsInstance(result.error, InternalConsistencyError)
        self.assertTrue(result.error.retryable)
        self.assertNotIn("lock timeout", str(result.error))

    def test_other_database_errors_are_not_retryable(self):
        with self.assertLogs("budget.services.results", level="ERROR"):
            result = run_operation("spend", _raise(DatabaseError("constraint xyz")))

        self.assertEqual(result.error.code, "INTERNAL_CONSISTENCY")
        self.assertFalse(result.error.retryable)
        self.assertEqual(result.error.details(), {"operation": "spend", "retryable": False})

    def test_failure_factory(self):
        result = OperationResult.failure(InvalidInputError("bad"))
        self.assertFalse(result.ok)
        self.assertIsNone(result.value)

    def test_payload_may_carry_a_name(self):
        result = run_operation("create", lambda **kw: kw["name"], name="Spring lot")

        self.assertTrue(result.ok)
        self.assertEqual(result.value, "Spring lot")

    def test_payload_may_carry_fn_and_operation_keys(self):
        result = run_operation("create", lambda **kw: (kw["fn"], kw["operation"]), fn="a", operation="b")

        self.assertEqual(result.value, ("a", "b"))

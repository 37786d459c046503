from __future__ import annotations

from django.test import SimpleTestCase
from rest_framework.exceptions import NotAuthenticated
from rest_framework.exceptions import ValidationError as DrfValidationError

from config.domain_exceptions import ValidationError
from config.exception_handler import custom_exception_handler
from periodical.errors import ConfigurationError, TaskNotFoundError, TaskTimeoutError


class _DummyView:
    pass


class ExceptionHandlerTests(SimpleTestCase):
    def _handle(self, exc: Exception):
        response = custom_exception_handler(exc, {"view": _DummyView()})
        self.assertIsNotNone(response)
        return response

    def test_drf_validation_error_includes_envelope(self):
        response = self._handle(DrfValidationError({"since": ["This field is required."]}))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["status"], "validation_error")
        self.assertEqual(response.data["error"]["message"], "since: This field is required.")

    def test_drf_not_authenticated_maps_to_unauthorized(self):
        response = self._handle(NotAuthenticated())
        self.assertEqual(response.data["error"]["status"], "unauthorized")

    def test_unknown_task_maps_to_404(self):
        response = self._handle(TaskNotFoundError("cleanup"))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["status"], "not_found")
        self.assertEqual(response.data["error"]["message"], "Task 'cleanup' is not registered.")

    def test_domain_validation_error_maps_to_400(self):
        response = self._handle(ValidationError("bad since"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["status"], "validation_error")

    def test_configuration_error_maps_to_503(self):
        response = self._handle(ConfigurationError("PERIODICAL is malformed"))
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.data["error"]["status"], "configuration_error")

    def test_task_timeout_maps_to_504(self):
        response = self._handle(TaskTimeoutError("cleanup", 10))
        self.assertEqual(response.status_code, 504)
        self.assertEqual(response.data["error"]["status"], "timeout")

    def test_unhandled_exception_returns_none(self):
        with self.assertLogs("config.exception_handler", level="ERROR"):
            response = custom_exception_handler(RuntimeError("boom"), {"view": _DummyView()})
        self.assertIsNone(response)

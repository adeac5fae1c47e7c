"""Tests for shared/exceptions.py."""

from shared.exceptions import (
    VarnayaError,
    ValidationError,
    MissingParameterError,
    NotFoundError,
    AuthenticationError,
    AuthorizationError,
    InternalFailureError,
    ExternalServiceError,
)


class TestVarnayaError:
    def test_message(self):
        """VarnayaError should store message."""
        error = VarnayaError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """VarnayaError should default code to class name."""
        assert VarnayaError("Test error").code == "VarnayaError"

    def test_custom_code_and_details(self):
        """VarnayaError should accept custom code and details."""
        error = VarnayaError("Test error", code="CUSTOM", details={"key": "value"})
        assert error.code == "CUSTOM"
        assert error.details == {"key": "value"}

    def test_to_dict(self):
        """to_dict should produce the API error body."""
        error = VarnayaError("Test error", code="TEST_ERROR", details={"key": "value"})
        assert error.to_dict() == {"error": "Test error", "code": "TEST_ERROR"}


class TestStatusCodes:
    def test_status_codes_follow_taxonomy(self):
        assert ValidationError("x").status_code == 400
        assert NotFoundError("x").status_code == 404
        assert AuthenticationError("x").status_code == 401
        assert AuthorizationError("x").status_code == 403
        assert InternalFailureError("x").status_code == 500


class TestMissingParameterError:
    def test_message_names_parameter(self):
        error = MissingParameterError("Slug", code="MISSING_SLUG")
        assert error.message == "Slug parameter is required"
        assert error.code == "MISSING_SLUG"
        assert error.details == {"parameter": "Slug"}
        assert isinstance(error, ValidationError)

    def test_default_code(self):
        assert MissingParameterError("id").code == "MISSING_PARAMETER"


class TestInternalFailureError:
    def test_to_dict_redacts_message(self):
        """Internal details never reach the response body."""
        error = InternalFailureError("connection refused: db.internal:5432", code="INTERNAL_ERROR")
        body = error.to_dict()
        assert body == {"error": "Internal server error", "code": "INTERNAL_ERROR"}
        assert "5432" not in str(body)


class TestExternalServiceError:
    def test_records_service(self):
        error = ExternalServiceError("timeout", service="supabase")
        assert error.service == "supabase"
        assert error.details["service"] == "supabase"
        assert isinstance(error, InternalFailureError)
        assert error.to_dict()["error"] == "Internal server error"

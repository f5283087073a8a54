"""
Unit tests for the request pipeline helpers and error formatting.
"""

import base64

import pytest

from catalog.constants import ERROR_CODES, ERRORS
from catalog.handlers.pipeline import RequestSchema, is_health_check, parse_body, resolve_actor
from catalog.handlers.utils.errors import (
    InfrastructureError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
    format_error_response,
    get_http_status_code,
)
from catalog.models.input import CreateProductRequest, ProductIdQuery


class TestResolveActor:

    def test_prefers_authorizer_subject(self):
        event = {
            "requestContext": {"authorizer": {"claims": {"sub": "cognito-user"}}},
            "headers": {"X-User-Id": "header-user"},
        }

        assert resolve_actor(event) == "cognito-user"

    def test_falls_back_to_header(self):
        assert resolve_actor({"requestContext": {}, "headers": {"X-User-Id": "header-user"}}) == "header-user"

    def test_defaults_to_anonymous(self):
        assert resolve_actor({"headers": None}) == "anonymous"


class TestParseBody:

    def test_empty_body_is_empty_dict(self):
        assert parse_body(None) == {}
        assert parse_body("") == {}

    def test_parses_json_object(self):
        assert parse_body('{"name": "Widget"}') == {"name": "Widget"}

    def test_decodes_base64(self):
        encoded = base64.b64encode(b'{"price": 1}').decode()

        assert parse_body(encoded, is_base64_encoded=True) == {"price": 1}

    @pytest.mark.parametrize("body", ["{not json", "[1, 2]", '"text"'])
    def test_rejects_non_object(self, body):
        with pytest.raises(ValidationError) as exc_info:
            parse_body(body)

        assert exc_info.value.message == ERRORS["INVALID_JSON"]


class TestRequestSchema:

    def test_missing_required_param(self):
        schema = RequestSchema(query=ProductIdQuery, required_query=("id",), missing_message=ERRORS["MISSING_ID"])

        with pytest.raises(ValidationError) as exc_info:
            schema.validate({}, {})

        assert exc_info.value.message == ERRORS["MISSING_ID"]
        assert exc_info.value.field_errors == [{"field": "id", "message": ERRORS["MISSING_ID"]}]

    def test_blank_required_param_counts_as_missing(self):
        schema = RequestSchema(query=ProductIdQuery, required_query=("id",))

        with pytest.raises(ValidationError):
            schema.validate({"id": "  "}, {})

    def test_body_field_errors(self):
        schema = RequestSchema(body=CreateProductRequest)

        with pytest.raises(ValidationError) as exc_info:
            schema.validate({}, {"name": "Widget", "price": -5})

        assert exc_info.value.error_code == ERROR_CODES["VALIDATION_ERROR"]
        assert [issue["field"] for issue in exc_info.value.field_errors] == ["price"]

    def test_returns_parsed_models(self):
        schema = RequestSchema(query=ProductIdQuery, body=CreateProductRequest, required_query=("id",))

        parsed = schema.validate({"id": "p1"}, {"name": "Widget", "price": 2})

        assert parsed["params"].id == "p1"
        assert parsed["body"].name == "Widget"


class TestErrorFormatting:

    def test_client_error_body(self):
        error = ValidationError(field_errors=[{"field": "price", "message": "too high"}])

        assert format_error_response(error) == {
            "code": "VAL_001",
            "message": ERRORS["VALIDATION_FAILED"],
            "details": [{"field": "price", "message": "too high"}],
        }

    def test_details_omitted_when_empty(self):
        assert format_error_response(NotFoundError("Product", "p1", message="Product not found")) == {
            "code": "ERR_404",
            "message": "Product not found",
        }

    def test_unexpected_error_is_generic(self):
        body = format_error_response(KeyError("secret internals"))

        assert body == {"code": "ERR_500", "message": ERRORS["INTERNAL"]}
        assert get_http_status_code(KeyError()) == 500

    def test_infrastructure_error_keeps_code_hides_message(self):
        body = format_error_response(InfrastructureError("ORA-12541: no listener"))

        assert body == {"code": "DB_001", "message": ERRORS["INTERNAL"]}

    def test_status_codes(self):
        assert get_http_status_code(InvalidStateError("nope")) == 400
        assert get_http_status_code(NotFoundError("Product", "p1")) == 404


def test_health_check_detection():
    assert is_health_check({"health_check": True})
    assert not is_health_check({"httpMethod": "GET"})

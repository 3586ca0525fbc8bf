"""
Unit tests for ForgeRestClient.
"""

import json
import unittest
from unittest.mock import MagicMock

import requests

from clients import ForgeRestClient
from errors import (
    ApiError,
    ApiErrorKind,
    MalformedResponseError,
    ResponseParseError,
    TransportError,
)
from models import SiteRef


def make_response(status_code, payload=None, raw=None):
    """Build a fake requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    if raw is not None:
        resp.content = raw
        resp.json.side_effect = ValueError("Expecting value")
    elif payload is None:
        resp.content = b""
        resp.json.side_effect = ValueError("Expecting value")
    else:
        resp.content = json.dumps(payload).encode()
        resp.json.return_value = payload
    return resp


class TestForgeRestClient(unittest.TestCase):
    """Test ForgeRestClient REST API interactions."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = ForgeRestClient(api_token="secret-token")
        self.session = MagicMock()
        self.client.session = self.session
        self.site = SiteRef(organization="acme", server_id="12", site_id="34")

    def test_client_initialization(self):
        """Test client sets auth and content negotiation headers."""
        client = ForgeRestClient(api_token="secret-token")
        self.assertEqual(client.timeout_s, 30)
        self.assertEqual(
            client.session.headers["Authorization"], "Bearer secret-token"
        )
        self.assertEqual(client.session.headers["Accept"], "application/json")

    def test_url_construction(self):
        """Test API URL construction."""
        url = self.client._url("/orgs/acme/servers/12/sites/34/deployments")
        self.assertEqual(
            url, "https://forge.laravel.com/api/orgs/acme/servers/12/sites/34/deployments"
        )

    def test_request_serializes_body(self):
        """Test a body is sent as JSON with a content type."""
        self.session.request.return_value = make_response(200, {"ok": True})

        result = self.client.request("post", "things", body={"a": 1})

        args, kwargs = self.session.request.call_args
        self.assertEqual(args[0], "POST")
        self.assertEqual(json.loads(kwargs["data"]), {"a": 1})
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/json")
        self.assertEqual(kwargs["timeout"], 30)
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.data, {"ok": True})

    def test_request_without_body_has_no_content_type(self):
        """Test requests without a body carry no Content-Type."""
        self.session.request.return_value = make_response(200, {"ok": True})

        self.client.request("GET", "things")

        _, kwargs = self.session.request.call_args
        self.assertIsNone(kwargs["data"])
        self.assertNotIn("Content-Type", kwargs["headers"])

    def test_request_empty_body_is_none(self):
        """Test an empty 204 body resolves to None instead of an error."""
        self.session.request.return_value = make_response(204)

        result = self.client.request("GET", "things")

        self.assertEqual(result.status_code, 204)
        self.assertIsNone(result.data)

    def test_request_invalid_json_raises_parse_error(self):
        """Test a non-JSON body raises ResponseParseError."""
        self.session.request.return_value = make_response(
            200, raw=b"<html>oops</html>"
        )

        with self.assertRaises(ResponseParseError) as ctx:
            self.client.request("GET", "things")
        self.assertEqual(ctx.exception.status_code, 200)

    def test_request_network_failure_raises_transport_error(self):
        """Test connection failures raise TransportError with the cause."""
        cause = requests.ConnectionError("connection refused")
        self.session.request.side_effect = cause

        with self.assertRaises(TransportError) as ctx:
            self.client.request("GET", "things")
        self.assertIs(ctx.exception.cause, cause)
        self.assertIs(ctx.exception.__cause__, cause)
        self.assertIn("connection refused", str(ctx.exception))

    def test_request_does_not_classify_status(self):
        """Test request() returns error statuses without raising."""
        self.session.request.return_value = make_response(
            500, {"message": "boom"}
        )

        result = self.client.request("GET", "things")

        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.data["message"], "boom")

    def test_create_deployment_success(self):
        """Test triggering a deployment returns its identifier."""
        self.session.request.return_value = make_response(
            202, {"data": {"id": 987, "type": "deployments"}}
        )

        deployment_id = self.client.create_deployment(self.site)

        self.assertEqual(deployment_id, 987)
        args, _ = self.session.request.call_args
        self.assertEqual(args[0], "POST")
        self.assertTrue(
            args[1].endswith("/api/orgs/acme/servers/12/sites/34/deployments")
        )

    def test_create_deployment_not_found(self):
        """Test a 404 trigger is classified as resource-not-found."""
        self.session.request.return_value = make_response(
            404, {"message": "No query results"}
        )

        with self.assertRaises(ApiError) as ctx:
            self.client.create_deployment(self.site)
        self.assertIs(ctx.exception.kind, ApiErrorKind.NOT_FOUND)
        self.assertIn("Resource not found", str(ctx.exception))
        self.assertIn("No query results", str(ctx.exception))

    def test_create_deployment_rejects_200(self):
        """Test only 202 counts as a successful trigger."""
        self.session.request.return_value = make_response(
            200, {"data": {"id": 1}}
        )

        with self.assertRaises(ApiError) as ctx:
            self.client.create_deployment(self.site)
        self.assertIs(ctx.exception.kind, ApiErrorKind.UNCLASSIFIED)
        self.assertIn("200", str(ctx.exception))

    def test_create_deployment_missing_id(self):
        """Test a 202 without an identifier is a malformed response."""
        self.session.request.return_value = make_response(202, {"data": {}})

        with self.assertRaises(MalformedResponseError):
            self.client.create_deployment(self.site)

    def test_create_deployment_empty_202(self):
        """Test an empty 202 body is a malformed response."""
        self.session.request.return_value = make_response(202)

        with self.assertRaises(MalformedResponseError):
            self.client.create_deployment(self.site)

    def test_get_deployment_status_success(self):
        """Test reading the deployment status."""
        self.session.request.return_value = make_response(
            200, {"data": {"id": 987, "attributes": {"status": "deploying"}}}
        )

        status = self.client.get_deployment_status(self.site, 987)

        self.assertEqual(status, "deploying")
        args, _ = self.session.request.call_args
        self.assertEqual(args[0], "GET")
        self.assertTrue(args[1].endswith("/sites/34/deployments/987"))

    def test_get_deployment_status_error(self):
        """Test a non-200 status fetch raises a classified error."""
        self.session.request.return_value = make_response(503)

        with self.assertRaises(ApiError) as ctx:
            self.client.get_deployment_status(self.site, 987)
        self.assertIs(ctx.exception.kind, ApiErrorKind.SERVICE_UNAVAILABLE)

    def test_get_deployment_status_missing_status(self):
        """Test a payload without a status is malformed."""
        self.session.request.return_value = make_response(
            200, {"data": {"attributes": {}}}
        )

        with self.assertRaises(MalformedResponseError):
            self.client.get_deployment_status(self.site, 987)

    def test_get_deployment_log_success(self):
        """Test reading the deployment log."""
        self.session.request.return_value = make_response(
            200, {"data": {"attributes": {"output": "Cloning...\n"}}}
        )

        output = self.client.get_deployment_log(self.site, 987)

        self.assertEqual(output, "Cloning...\n")
        args, _ = self.session.request.call_args
        self.assertTrue(args[1].endswith("/deployments/987/log"))

    def test_get_deployment_log_missing_output(self):
        """Test an absent output field is treated as an empty log."""
        self.session.request.return_value = make_response(
            200, {"data": {"attributes": {}}}
        )

        self.assertEqual(self.client.get_deployment_log(self.site, 987), "")

    def test_get_deployment_log_error(self):
        """Test a non-200 log fetch raises."""
        self.session.request.return_value = make_response(429)

        with self.assertRaises(ApiError) as ctx:
            self.client.get_deployment_log(self.site, 987)
        self.assertIs(ctx.exception.kind, ApiErrorKind.RATE_LIMITED)


if __name__ == "__main__":
    unittest.main()

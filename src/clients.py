"""
REST API client for Laravel Forge deployments.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from errors import (
    ApiError,
    MalformedResponseError,
    ResponseParseError,
    TransportError,
)
from models import DeploymentHandle, SiteRef

logger = logging.getLogger(__name__)

API_BASE = "https://forge.laravel.com/api"


@dataclass
class ApiResponse:
    """Status code and parsed JSON body of a Forge API response."""

    status_code: int
    data: Any = None  # None for an empty body


class ForgeRestClient:
    """REST client for the Laravel Forge API."""

    def __init__(
        self,
        api_token: str,
        timeout_s: int = 30,
        base_url: str = API_BASE,
    ):
        """
        Initialize the Forge REST client.

        Args:
            api_token: Forge API token, sent as a bearer token
            timeout_s: Request timeout in seconds
            base_url: API root URL
        """
        self.timeout_s = timeout_s
        self.base_url = base_url.rstrip("/")

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
            }
        )

    def _url(self, path: str) -> str:
        """Construct full API URL from path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self, method: str, path: str, body: Optional[Dict] = None
    ) -> ApiResponse:
        """
        Execute a single HTTP request against the Forge API.

        Status codes are not interpreted here; callers decide which codes
        count as success.

        Args:
            method: HTTP method (GET, POST, ...)
            path: API path relative to the base URL
            body: Optional JSON-serializable request body

        Returns:
            ApiResponse with the status code and parsed body

        Raises:
            TransportError: If no HTTP response was received
            ResponseParseError: If a non-empty body is not valid JSON
        """
        url = self._url(path)
        headers = {}
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(body)

        logger.debug(f"{method.upper()} {url}")
        try:
            resp = self.session.request(
                method.upper(),
                url,
                data=data,
                headers=headers,
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            raise TransportError(method.upper(), url, e) from e

        # Empty bodies (e.g. 204 No Content) are not an error
        if not resp.content:
            return ApiResponse(status_code=resp.status_code, data=None)

        try:
            parsed = resp.json()
        except ValueError as e:
            raise ResponseParseError(resp.status_code, e) from e

        return ApiResponse(status_code=resp.status_code, data=parsed)

    def create_deployment(self, site: SiteRef) -> DeploymentHandle:
        """
        Trigger a new deployment for a site.

        Args:
            site: Site reference

        Returns:
            Deployment identifier

        Raises:
            ApiError: If Forge does not answer 202 Accepted
            MalformedResponseError: If the response carries no identifier
        """
        result = self.request("POST", site.deployments_path)
        if result.status_code != 202:
            raise ApiError.from_response(result.status_code, result.data)

        deployment_id = _dig(result.data, "data", "id")
        if deployment_id is None:
            raise MalformedResponseError(
                f"create deployment returned unexpected response: {result.data}"
            )
        return deployment_id

    def get_deployment_status(
        self, site: SiteRef, deployment_id: DeploymentHandle
    ) -> str:
        """
        Get the current status of a deployment.

        Args:
            site: Site reference
            deployment_id: Deployment identifier

        Returns:
            Status string as reported by Forge

        Raises:
            ApiError: If Forge does not answer 200
            MalformedResponseError: If the response carries no status
        """
        result = self.request("GET", site.deployment_path(deployment_id))
        if result.status_code != 200:
            raise ApiError.from_response(result.status_code, result.data)

        status = _dig(result.data, "data", "attributes", "status")
        if status is None:
            raise MalformedResponseError(
                f"get deployment returned no status: {result.data}"
            )
        return str(status)

    def get_deployment_log(
        self, site: SiteRef, deployment_id: DeploymentHandle
    ) -> str:
        """
        Get the full log output of a deployment.

        Args:
            site: Site reference
            deployment_id: Deployment identifier

        Returns:
            Log output, "" when Forge has none yet

        Raises:
            ApiError: If Forge does not answer 200
        """
        result = self.request("GET", site.deployment_log_path(deployment_id))
        if result.status_code != 200:
            raise ApiError.from_response(result.status_code, result.data)

        return _dig(result.data, "data", "attributes", "output") or ""


def _dig(data: Any, *keys: str) -> Any:
    """Walk nested dictionaries, returning None at the first missing key."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data

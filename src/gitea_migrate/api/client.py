"""Shared HTTP client for the GitLab and Gitea REST APIs."""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import aiohttp
import requests
from loguru import logger
from pydantic import BaseModel

from ..config.config import InstanceConfig
from .exceptions import (
    AccessDeniedError,
    APIError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from .rate_limiter import RateLimiter

USER_AGENT = 'gitea-migrate/0.1.0'


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool


class APIClient(ABC):
    """Authenticated REST client with sync and async request methods.

    Subclasses set ``api_path`` and provide the authentication headers.
    """

    api_path = ''
    service_name = 'remote'

    def __init__(self, config: InstanceConfig):
        """Initialize the client.

        Args:
            config: Remote instance configuration
        """
        self.config = config
        self.base_url = config.url.rstrip('/') + self.api_path
        self.rate_limiter = RateLimiter(config.rate_limit_per_second)
        self.session = requests.Session()

        self.session.headers.update(self._auth_headers())
        self.session.headers.update(
            {'Content-Type': 'application/json', 'User-Agent': USER_AGENT}
        )

        logger.info(f'Initialized {self.service_name} client for {config.url}')

    @abstractmethod
    def _auth_headers(self) -> Dict[str, str]:
        """Return the headers that authenticate every request."""

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _raise_for_status(
        self, status_code: int, headers: Dict[str, str], body: Any
    ) -> None:
        """Map an HTTP error status onto the exception hierarchy.

        Raises:
            APIError: For any status code of 400 or above
        """
        if status_code == 429:
            retry_after = int(headers.get('Retry-After', 60))
            raise RateLimitError(
                f'Rate limit exceeded. Retry after {retry_after} seconds',
                retry_after=retry_after,
                status_code=status_code,
            )

        if status_code == 401:
            raise AuthenticationError('Authentication failed', status_code=401)

        if status_code == 403:
            raise AccessDeniedError('Permission denied', status_code=403)

        if status_code == 404:
            raise NotFoundError('Resource not found', status_code=404)

        if status_code >= 400:
            error_data = body if isinstance(body, dict) else None
            message = (error_data or {}).get('message') or f'HTTP {status_code}'
            if error_data is None and body:
                message = f'HTTP {status_code}: {body}'

            error_class = ValidationError if status_code == 422 else APIError
            raise error_class(
                f'API request failed: {message}',
                status_code=status_code,
                response_data=error_data,
            )

    def _handle_response(self, response: requests.Response) -> APIResponse:
        """Handle API response and convert to standard format.

        Args:
            response: Raw HTTP response

        Returns:
            Standardized API response

        Raises:
            APIError: For various API errors
        """
        headers = dict(response.headers)

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = response.text

        self._raise_for_status(response.status_code, headers, data)

        return APIResponse(
            status_code=response.status_code,
            data=data,
            headers=headers,
            success=200 <= response.status_code < 300,
        )

    def _request(self, method: str, endpoint: str, **kwargs) -> APIResponse:
        url = self._build_url(endpoint)
        self.rate_limiter.acquire_sync()

        try:
            response = self.session.request(
                method, url, timeout=self.config.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.debug(f'Network error during {method} request: {e}')
            raise APIError(f'Network error: {e}')

        return self._handle_response(response)

    async def _make_request_async(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None,
    ) -> APIResponse:
        """Make asynchronous API request.

        Args:
            method: HTTP method
            endpoint: API endpoint
            params: Query parameters
            data: Request body data

        Returns:
            API response
        """
        url = self._build_url(endpoint)
        headers = dict(self.session.headers)
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)

        await self.rate_limiter.acquire()

        async with aiohttp.ClientSession(headers=headers, timeout=timeout) as session:
            try:
                async with session.request(
                    method=method, url=url, params=params, json=data
                ) as response:
                    response_headers = dict(response.headers)
                    response_text = await response.text()
                    status = response.status
            except aiohttp.ClientError as e:
                logger.debug(f'Network error during {method} request: {e}')
                raise APIError(f'Network error: {e}')

        try:
            response_data = json.loads(response_text) if response_text else None
        except ValueError:
            response_data = response_text

        self._raise_for_status(status, response_headers, response_data)

        return APIResponse(
            status_code=status,
            data=response_data,
            headers=response_headers,
            success=200 <= status < 300,
        )

    def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """Make GET request."""
        return self._request('GET', endpoint, params=params)

    def post(self, endpoint: str, data: Any = None) -> APIResponse:
        """Make POST request."""
        return self._request('POST', endpoint, json=data)

    def put(self, endpoint: str, data: Any = None) -> APIResponse:
        """Make PUT request."""
        return self._request('PUT', endpoint, json=data)

    def patch(self, endpoint: str, data: Any = None) -> APIResponse:
        """Make PATCH request."""
        return self._request('PATCH', endpoint, json=data)

    async def get_async(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """Make asynchronous GET request."""
        return await self._make_request_async('GET', endpoint, params=params)

    async def post_async(self, endpoint: str, data: Any = None) -> APIResponse:
        """Make asynchronous POST request."""
        return await self._make_request_async('POST', endpoint, data=data)

    async def put_async(self, endpoint: str, data: Any = None) -> APIResponse:
        """Make asynchronous PUT request."""
        return await self._make_request_async('PUT', endpoint, data=data)

    async def patch_async(self, endpoint: str, data: Any = None) -> APIResponse:
        """Make asynchronous PATCH request."""
        return await self._make_request_async('PATCH', endpoint, data=data)

    def test_connection(self) -> bool:
        """Test connection and credentials against the instance.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            response = self.get('/user')
            return response.success
        except APIError as e:
            logger.warning(f'{self.service_name} connection test failed: {e}')
            return False

    def get_version(self) -> Optional[str]:
        """Get the instance version.

        Returns:
            Version string or None if unavailable
        """
        try:
            response = self.get('/version')
            if response.success and response.data:
                return response.data.get('version')
        except APIError as e:
            logger.warning(f'Could not retrieve {self.service_name} version: {e}')

        return None

    def close(self):
        """Close the client session."""
        self.session.close()
        logger.info(f'{self.service_name} client session closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

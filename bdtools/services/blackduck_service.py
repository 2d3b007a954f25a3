from collections.abc import Callable
from collections.abc import Iterator
from typing import Any
from typing import TypeVar

import requests
import structlog

from bdtools.core.client import get_http_client
from bdtools.core.config import DEFAULT_TIMEOUT
from bdtools.core.errors import AuthenticationFailed
from bdtools.core.errors import RequestFailed
from bdtools.models.project import Project
from bdtools.models.user import User

logger = structlog.get_logger('blackduck_service')

T = TypeVar('T')

JSON_MEDIA_TYPE = 'application/json'
PAGE_SIZE = 100


class BlackDuckService:
    """Authenticated connection to a single Black Duck instance."""

    def __init__(
        self,
        base_url: str,
        api_token: str,
        trust_cert: bool = False,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = 3,
        pool_size: int = 10,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._api_token = api_token
        self._bearer_token: str | None = None
        self.session = get_http_client(
            retries=retries, pool_size=pool_size, verify=not trust_cert,
        )
        self.session.headers.update({
            'Accept': JSON_MEDIA_TYPE,
            'User-Agent': 'bdtools',
        })

    def __repr__(self) -> str:
        return f"BlackDuckService(base_url={self.base_url!r}, api_token='*****')"

    def _build_url(self, path: str) -> str:
        if path.startswith('http://') or path.startswith('https://'):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def authenticate(self) -> None:
        """Exchange the API token for a bearer token and CSRF token."""
        url = self._build_url('/api/tokens/authenticate')
        try:
            response = self.session.post(
                url,
                headers={'Authorization': f"token {self._api_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthenticationFailed(
                f"Could not reach Black Duck server: {e}", url=url,
            ) from e

        if response.status_code != 200:
            raise AuthenticationFailed(
                'API token was rejected by the server',
                status=response.status_code,
                url=url,
            )

        try:
            self._bearer_token = response.json()['bearerToken']
        except (ValueError, KeyError) as e:
            raise AuthenticationFailed(
                'Authentication response did not contain a bearer token',
                status=response.status_code,
                url=url,
            ) from e

        self.session.headers['Authorization'] = f"Bearer {self._bearer_token}"
        csrf_token = response.headers.get('X-CSRF-TOKEN')
        if csrf_token:
            self.session.headers['X-CSRF-TOKEN'] = csrf_token
        logger.debug('Authenticated with Black Duck', server=self.base_url)

    def _make_request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Base wrapper for requests. Authenticates lazily and raises
        RequestFailed on transport errors. HTTP status is left to callers.

        Bearer tokens expire during long runs, so a 401 triggers one
        re-authentication and one retry of the request.
        """
        if self._bearer_token is None:
            self.authenticate()

        url = self._build_url(path)
        kwargs.setdefault('timeout', self.timeout)
        response = self._send(method, url, **kwargs)
        if response.status_code == 401:
            logger.info('Bearer token rejected - re-authenticating', url=url)
            self._bearer_token = None
            self.authenticate()
            response = self._send(method, url, **kwargs)
        return response

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise RequestFailed(f"{method} request failed: {e}", url=url) from e

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        if response.ok:
            return
        try:
            body = response.json()
            message = body.get('errorMessage') or body.get('message') or response.reason
        except ValueError:
            message = response.reason or response.text[:200]
        raise RequestFailed(
            message or 'Request failed',
            status=response.status_code,
            url=response.url,
        )

    # -- Generic access --

    def get_json(self, href: str, params: Any = None) -> dict[str, Any] | None:
        """GET a single resource. Returns None when it does not exist."""
        response = self._make_request('GET', href, params=params)
        if response.status_code == 404:
            return None
        self._raise_for_status(response)
        return response.json()

    def iter_items(
        self,
        href: str,
        params: list[tuple[str, str]] | None = None,
        parser: Callable[[dict[str, Any]], T] | None = None,
        page_size: int = PAGE_SIZE,
        max_items: int | None = None,
    ) -> Iterator[T]:
        """
        Iterate through every page of a Black Duck collection.

        A collection that does not exist yields nothing.
        """
        offset = 0
        seen = 0
        while True:
            page_params = list(params or []) + [
                ('offset', str(offset)), ('limit', str(page_size)),
            ]
            page = self.get_json(href, params=page_params)
            if page is None:
                return

            items = page.get('items', [])
            for item in items:
                yield parser(item) if parser else item
                seen += 1
                if max_items is not None and seen >= max_items:
                    return

            offset += len(items)
            total = page.get('totalCount', 0)
            if not items or offset >= total:
                return

    def get_all(
        self,
        href: str,
        params: list[tuple[str, str]] | None = None,
        parser: Callable[[dict[str, Any]], T] | None = None,
        max_items: int | None = None,
    ) -> list[T]:
        return list(self.iter_items(href, params=params, parser=parser, max_items=max_items))

    def put_json(self, href: str, body: dict[str, Any]) -> None:
        response = self._make_request(
            'PUT', href, json=body,
            headers={'Content-Type': JSON_MEDIA_TYPE},
        )
        self._raise_for_status(response)

    def delete(self, href: str) -> None:
        response = self._make_request('DELETE', href)
        self._raise_for_status(response)

    # -- Well-known endpoints --

    def get_current_user(self) -> dict[str, Any]:
        """Validate the connection by loading the user behind the API token."""
        user = self.get_json('/api/current-user')
        if user is None:
            raise RequestFailed(
                'Current user endpoint not found - is this a Black Duck server?',
                status=404,
                url=self._build_url('/api/current-user'),
            )
        logger.info(
            'Validated connection to Black Duck instance',
            server=self.base_url, user=user.get('userName'),
        )
        return user

    def get_projects(self) -> list[Project]:
        return self.get_all(
            '/api/projects', params=[('sort', 'name ASC')],
            parser=Project.model_validate,
        )

    def find_projects(self, name: str, limit: int = 100) -> list[Project]:
        """Projects whose name matches the query, as the server's search does."""
        return self.get_all(
            '/api/projects', params=[('q', f"name:{name}")],
            parser=Project.model_validate, max_items=limit,
        )

    def get_users(self) -> list[User]:
        return self.get_all(
            '/api/users', params=[('sort', 'userName ASC')],
            parser=User.model_validate,
        )

from unittest.mock import MagicMock

import pytest
import requests

from bdtools.core.errors import AuthenticationFailed
from bdtools.core.errors import RequestFailed
from bdtools.models.project import Project
from bdtools.services.blackduck_service import BlackDuckService

SERVER = 'https://bd.example.com'


def make_response(status_code=200, json_data=None, headers=None, url=SERVER):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = headers or {}
    response.url = url
    response.reason = 'Reason'
    if json_data is None:
        response.json.side_effect = ValueError('no json')
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def service():
    svc = BlackDuckService(SERVER + '/', 'api-token-secret', timeout=30)
    svc._bearer_token = 'bearer'
    return svc


def test_repr_masks_token(service):
    """Test the API token never appears in the service repr."""
    assert 'api-token-secret' not in repr(service)
    assert '*****' in repr(service)


def test_base_url_normalized(service):
    """Test relative paths are joined to the server URL and absolute URLs kept."""
    assert service.base_url == SERVER
    assert service._build_url('/api/projects') == f'{SERVER}/api/projects'
    assert service._build_url('https://other/api/x') == 'https://other/api/x'


def test_trust_cert_disables_verification():
    """Test trusting the certificate turns off TLS verification."""
    svc = BlackDuckService(SERVER, 'token', trust_cert=True)
    assert svc.session.verify is False


def test_authenticate_sets_bearer_and_csrf_headers():
    """Test the token exchange sets the bearer and CSRF headers."""
    svc = BlackDuckService(SERVER, 'api-token-secret')
    svc.session.post = MagicMock(
        return_value=make_response(
            json_data={'bearerToken': 'abc', 'expiresInMilliseconds': 7200000},
            headers={'X-CSRF-TOKEN': 'csrf'},
        ),
    )

    svc.authenticate()

    args, kwargs = svc.session.post.call_args
    assert args[0] == f'{SERVER}/api/tokens/authenticate'
    assert kwargs['headers']['Authorization'] == 'token api-token-secret'
    assert svc.session.headers['Authorization'] == 'Bearer abc'
    assert svc.session.headers['X-CSRF-TOKEN'] == 'csrf'


def test_authenticate_rejected():
    """Test a rejected API token raises AuthenticationFailed."""
    svc = BlackDuckService(SERVER, 'bad-token')
    svc.session.post = MagicMock(return_value=make_response(401, {}))

    with pytest.raises(AuthenticationFailed) as exc_info:
        svc.authenticate()
    assert exc_info.value.status == 401


def test_requests_authenticate_lazily():
    """Test the first request authenticates and later ones reuse the token."""
    svc = BlackDuckService(SERVER, 'token')
    svc.session.post = MagicMock(return_value=make_response(json_data={'bearerToken': 'abc'}))
    svc.session.request = MagicMock(return_value=make_response(json_data={'userName': 'sysadmin'}))

    assert svc.get_current_user()['userName'] == 'sysadmin'
    svc.get_json('/api/current-user')

    svc.session.post.assert_called_once()


def test_transport_error_raises_request_failed(service):
    """Test connection errors surface as RequestFailed with the URL."""
    service.session.request = MagicMock(side_effect=requests.ConnectionError('refused'))

    with pytest.raises(RequestFailed) as exc_info:
        service.get_json('/api/projects')
    assert exc_info.value.url == f'{SERVER}/api/projects'


def test_http_error_carries_status_and_message(service):
    """Test the server's error message and status end up on RequestFailed."""
    service.session.request = MagicMock(
        return_value=make_response(403, {'errorMessage': 'Insufficient permissions'}),
    )

    with pytest.raises(RequestFailed) as exc_info:
        service.get_json('/api/users')
    assert exc_info.value.status == 403
    assert exc_info.value.message == 'Insufficient permissions'
    assert str(exc_info.value) == '[403] Insufficient permissions'


def test_get_json_not_found_returns_none(service):
    """Test a missing resource reads as None."""
    service.session.request = MagicMock(return_value=make_response(404, {}))
    assert service.get_json('/api/projects/missing') is None


def test_iter_items_pages_until_total(service):
    """Test paging advances the offset until totalCount is reached."""
    service.session.request = MagicMock(side_effect=[
        make_response(json_data={'totalCount': 3, 'items': [{'n': 1}, {'n': 2}]}),
        make_response(json_data={'totalCount': 3, 'items': [{'n': 3}]}),
    ])

    items = service.get_all('/api/things', params=[('sort', 'name ASC')])

    assert [i['n'] for i in items] == [1, 2, 3]
    calls = service.session.request.call_args_list
    assert len(calls) == 2
    assert ('offset', '0') in calls[0].kwargs['params']
    assert ('offset', '2') in calls[1].kwargs['params']
    assert ('sort', 'name ASC') in calls[1].kwargs['params']


def test_iter_items_stops_at_max_items(service):
    """Test max_items stops paging early."""
    service.session.request = MagicMock(return_value=make_response(
        json_data={'totalCount': 500, 'items': [{'n': i} for i in range(100)]},
    ))

    items = service.get_all('/api/things', max_items=5)

    assert len(items) == 5
    service.session.request.assert_called_once()


def test_missing_collection_is_empty(service):
    """Test a missing collection reads as empty."""
    service.session.request = MagicMock(return_value=make_response(404, {}))
    assert service.get_all('/api/projects/x/versions') == []


def test_put_json_sends_body(service):
    """Test PUT sends the JSON body with the configured timeout."""
    service.session.request = MagicMock(return_value=make_response(200, {}))

    service.put_json(f'{SERVER}/api/copyrights/1', {'active': False})

    args, kwargs = service.session.request.call_args
    assert args == ('PUT', f'{SERVER}/api/copyrights/1')
    assert kwargs['json'] == {'active': False}
    assert kwargs['timeout'] == 30


def test_put_json_failure(service):
    """Test a rejected PUT raises RequestFailed."""
    service.session.request = MagicMock(return_value=make_response(412, None))

    with pytest.raises(RequestFailed) as exc_info:
        service.put_json(f'{SERVER}/api/copyrights/1', {'active': False})
    assert exc_info.value.status == 412


def test_get_projects_parses_models(service):
    """Test project listings are parsed into Project models."""
    service.session.request = MagicMock(return_value=make_response(json_data={
        'totalCount': 1,
        'items': [{
            'name': 'payments',
            'description': 'Payments service',
            'createdAt': '2021-02-18T16:29:57.065Z',
            'createdBy': 'sysadmin',
            '_meta': {'href': f'{SERVER}/api/projects/p1', 'links': []},
        }],
    }))

    projects = service.get_projects()

    assert isinstance(projects[0], Project)
    assert projects[0].id == 'p1'
    assert projects[0].created_at.year == 2021


def test_expired_bearer_token_is_renewed_once():
    """Test a 401 re-authenticates and retries the request with the new token."""
    svc = BlackDuckService(SERVER, 'api-token-secret')
    svc.session.post = MagicMock(side_effect=[
        make_response(json_data={'bearerToken': 'first'}),
        make_response(json_data={'bearerToken': 'second'}),
    ])
    svc.session.request = MagicMock(side_effect=[
        make_response(json_data={'totalCount': 0, 'items': []}),
        make_response(401, {'errorMessage': 'token expired'}),
        make_response(json_data={'totalCount': 1, 'items': [{'active': True}]}),
    ])

    assert svc.get_all('/api/things') == []
    items = svc.get_all(f'{SERVER}/api/origins/o1/copyrights')

    assert items == [{'active': True}]
    assert svc.session.post.call_count == 2
    assert svc.session.headers['Authorization'] == 'Bearer second'


def test_persistent_401_is_raised():
    """Test a request still rejected after re-authenticating fails loudly."""
    svc = BlackDuckService(SERVER, 'api-token-secret')
    svc.session.post = MagicMock(return_value=make_response(json_data={'bearerToken': 'abc'}))
    svc.session.request = MagicMock(return_value=make_response(401, {'errorMessage': 'no access'}))

    with pytest.raises(RequestFailed) as exc_info:
        svc.get_json('/api/users')

    assert exc_info.value.status == 401
    assert svc.session.request.call_count == 2
    assert svc.session.post.call_count == 2

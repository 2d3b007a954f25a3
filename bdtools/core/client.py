import requests
import structlog
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = structlog.get_logger('client')


def get_http_client(
    retries: int = 3,
    pool_size: int = 10,
    verify: bool = True,
) -> requests.Session:
    """
    Returns a requests session with retry logic and request logging.

    Responses are never cached: the copyright workflow relies on every
    read reflecting the server's current state.
    """
    session = requests.Session()
    session.verify = verify
    if not verify:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def logging_hook(response, *args, **kwargs):
        if getattr(response, '_logged', False):
            return
        response._logged = True

        content_length = len(response.content) if response.content else 0
        logger.debug(
            'HTTP Request',
            method=response.request.method,
            url=response.url,
            status=response.status_code,
            content_length=content_length,
            elapsed=f"{response.elapsed.total_seconds():.3f}s",
        )
    session.hooks['response'].append(logging_hook)

    # Transport-level retries for gateway errors only; application-level
    # verification retries live in the copyright service.
    retry_strategy = Retry(
        total=retries,
        backoff_factor=1,
        status_forcelist=[502, 503, 504],
        allowed_methods=['GET', 'PUT', 'DELETE'],
        raise_on_status=False,
    )

    adapter = HTTPAdapter(
        pool_connections=pool_size,
        pool_maxsize=pool_size,
        max_retries=retry_strategy,
    )

    session.mount('https://', adapter)
    session.mount('http://', adapter)

    logger.debug(
        'Initialized HTTP Client',
        retries=retries,
        pool_size=pool_size,
        verify=verify,
    )

    return session

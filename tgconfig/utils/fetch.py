"""HTTP access to the configuration service: flow, template, manifest and doc fragments."""

import sys

import httpx
import yaml
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from tgconfig.config import get_config
from tgconfig.errors import FetchError
from tgconfig.utils.console import TAG

DOC_NOT_FOUND = "*Documentation file not found: {path}*"


def _is_transient(exc: BaseException) -> bool:
    """Return True if the exception is a transient HTTP/network error worth retrying."""
    if isinstance(exc, httpx.TimeoutException):
        return True
    if isinstance(exc, httpx.ConnectError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in (429, 500, 502, 503)
    return False


def _get(url: str) -> httpx.Response:
    """GET ``url`` with exponential backoff on transient errors.

    Non-transient errors (404, 401, ...) are raised immediately.
    """
    config = get_config()
    retries = config.get("fetch_max_retries", 2)
    timeout = config.get("request_timeout", 30)
    backoff = config.get("fetch_backoff", 1)

    @retry(
        stop=stop_after_attempt(retries + 1),  # +1 because first attempt counts
        wait=wait_exponential(multiplier=backoff, min=backoff, max=8),
        retry=retry_if_exception(_is_transient),
        reraise=True,
        before_sleep=lambda state: print(
            f"{TAG} Transient error: {state.outcome.exception()!r}. "
            f"Retrying in {state.next_action.sleep:.0f}s "
            f"(attempt {state.attempt_number}/{retries})...",
            file=sys.stderr,
        ),
    )
    def _fetch():
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
        return response

    return _fetch()


def fetch_text(api_base: str, endpoint: str) -> str:
    """Fetch raw text from ``api_base + endpoint``. Raises FetchError on failure."""
    url = f"{api_base}{endpoint}"
    try:
        return _get(url).text
    except httpx.HTTPStatusError as exc:
        raise FetchError(f"Failed to fetch {url}: {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc


def fetch_yaml(api_base: str, endpoint: str):
    """Fetch and parse a YAML document. Raises FetchError on failure."""
    text = fetch_text(api_base, endpoint)
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise FetchError(f"Invalid YAML from {api_base}{endpoint}: {exc}") from exc


def fetch_doc(api_base: str, path: str) -> str:
    """Fetch a documentation fragment; returns a placeholder instead of raising."""
    docs_path = get_config().get("docs_path", "/docs")
    url = f"{api_base}{docs_path}/{path}"
    try:
        response = httpx.get(url, timeout=get_config().get("request_timeout", 30), follow_redirects=True)
    except (httpx.HTTPError, httpx.InvalidURL):
        return DOC_NOT_FOUND.format(path=path)
    if not response.is_success:
        return DOC_NOT_FOUND.format(path=path)
    return response.text

"""
Shared HTTP session for the sightings and photo lookups.

The session retries rate-limited (429) and gateway (502/503/504) responses
with exponential backoff, and gives every request a default timeout. Both
knobs come from settings (``RARE_BIRDS_HTTP_RETRIES``,
``RARE_BIRDS_HTTP_TIMEOUT``).

Retries follow urllib3's default method set, which only covers idempotent
methods: the sightings GET is retried, the photo lookup POST goes out once.

Usage::

    from rare_birds.services.http import session

    resp = session.get(f"{api_url}/api/birds", params={...})
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from rare_birds import __version__
from rare_birds.config import get_settings

RETRY_STATUSES = (429, 502, 503, 504)

USER_AGENT = f"rare-birds/{__version__}"


def build_retry(total: int) -> Retry:
    """Retry policy for ``total`` attempts after the first (0s, 1s, 2s, ... backoff)."""
    return Retry(
        total=total,
        backoff_factor=1,
        status_forcelist=RETRY_STATUSES,
        raise_on_status=False,  # callers use resp.raise_for_status()
    )


def create_session(
    retry: Retry | None = None,
    timeout: float | None = None,
) -> requests.Session:
    """
    Build a ``requests.Session`` with the retry adapter mounted.

    Args:
        retry: Retry policy. Defaults to ``build_retry(Settings.http_retries)``.
        timeout: Default per-request timeout in seconds. Defaults to
            ``Settings.http_timeout``.
    """
    settings = get_settings()
    if retry is None:
        retry = build_retry(settings.http_retries)
    default_timeout = settings.http_timeout if timeout is None else timeout

    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Wrap send so every request gets a timeout unless the caller passes one.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", default_timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session used by the datasources.
session: requests.Session = create_session()

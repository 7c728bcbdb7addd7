"""
HTTP session helpers
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def create_session(max_retries: int = 0, backoff_factor: float = 0.0) -> requests.Session:
    """
    Create a requests session with an explicit retry policy

    Every external call is attempted once per run, so the default policy
    performs no retries; a failed location is picked up by the next run.

    Args:
        max_retries: Maximum number of retry attempts
        backoff_factor: Backoff factor for retries

    Returns:
        Configured requests session
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["HEAD", "GET", "OPTIONS"],
        raise_on_status=False
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session

from __future__ import annotations

from typing import Any, Mapping, Optional

import requests

from ..core.constants import DEFAULT_PROVIDER_TIMEOUT_SECONDS, DEFAULT_USER_AGENT


def fetch_json(
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
) -> Any:
    """GET a JSON document; non-2xx responses raise requests.HTTPError."""

    merged = {"User-Agent": DEFAULT_USER_AGENT}
    merged.update(headers or {})
    response = requests.get(url, params=params, headers=merged, timeout=timeout)
    response.raise_for_status()
    return response.json()

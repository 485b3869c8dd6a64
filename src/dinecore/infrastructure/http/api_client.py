from __future__ import annotations

import os
from functools import lru_cache

import httpx

DEFAULT_TIMEOUT_SECONDS = 10.0


def _api_base_url() -> str:
    url = os.getenv("API_BASE_URL")
    if not url:
        raise RuntimeError("API_BASE_URL is not set")
    return url.rstrip("/")


def _timeout_seconds() -> float:
    raw = os.getenv("API_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS


@lru_cache(maxsize=8)
def _build_client(base_url: str, timeout_seconds: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout_seconds,
        headers={"Accept": "application/json"},
    )


def get_api_client() -> httpx.AsyncClient:
    return _build_client(_api_base_url(), _timeout_seconds())


async def ping_api(timeout_seconds: float = 1.0) -> bool:
    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.get(_api_base_url())
        return response.status_code < 500
    except Exception:
        return False

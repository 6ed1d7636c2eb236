"""
Fetch the brine site and lake outline feeds.

Both requests share one httpx.AsyncClient and are bounded by the request
timeout at the transport level and again with asyncio.wait_for. Transport
and decoding problems are raised as FeedError so the loader can fall back.
"""

import asyncio
from logging import Logger
from typing import Any, Optional

import httpx

from gsl_heatmap.exceptions import FeedError

USER_AGENT = 'gsl-heatmap/0.1.0'


def sites_headers(profile: str) -> dict[str, str]:
    """Headers for the PostgREST brine sites endpoint."""
    return {
        'Accept': 'application/json',
        'Accept-Profile': profile,
    }


def make_client(timeout: float) -> httpx.AsyncClient:
    """Shared client for one load."""
    return httpx.AsyncClient(
        timeout=timeout,
        headers={'User-Agent': USER_AGENT},
        follow_redirects=True,
    )


async def _get_json(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    headers: Optional[dict[str, str]] = None
) -> Any:
    """GET a URL and decode its JSON body, mapping failures to FeedError."""
    try:
        response = await asyncio.wait_for(
            client.get(url, headers=headers), timeout=timeout
        )
        response.raise_for_status()
        return response.json()
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise FeedError(f'Request timeout after {timeout}s: {url}') from e
    except httpx.HTTPStatusError as e:
        raise FeedError(
            f'HTTP error {e.response.status_code} from {url}'
        ) from e
    except httpx.RequestError as e:
        raise FeedError(f'Network error for {url}: {e}') from e
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise FeedError(f'Invalid JSON response from {url}: {e}') from e


async def fetch_sites(
    client: httpx.AsyncClient,
    url: str,
    profile: str,
    timeout: float,
    logger: Logger
) -> list[dict]:
    """
    Fetch brine sites with their nested readings.

    Returns:
        List of raw site records

    Raises:
        FeedError: If the request fails or the body is not a JSON array
    """
    logger.info('Fetching brine sites from %s', url)
    data = await _get_json(client, url, timeout, headers=sites_headers(profile))
    if not isinstance(data, list):
        raise FeedError(
            f'Expected a JSON array of sites, got {type(data).__name__}'
        )
    logger.info('Fetched %s brine sites', len(data))
    return data


async def fetch_lake_outline(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    logger: Logger
) -> dict:
    """
    Fetch the lake outline GeoJSON from the WFS endpoint.

    Raises:
        FeedError: If the request fails or the body is not a
            FeatureCollection
    """
    logger.info('Fetching lake outline from %s', url)
    data = await _get_json(client, url, timeout)
    if not isinstance(data, dict) or not isinstance(data.get('features'), list):
        raise FeedError('Lake outline response is not a FeatureCollection')
    logger.info('Fetched %s lake outline features', len(data['features']))
    return data

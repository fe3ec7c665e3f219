"""
Report bundle fetcher — loads the four collections the reports view needs.

The requests run concurrently on one httpx.AsyncClient. A collection that
fails (transport error, non-2xx, unparseable body) comes back as an empty
list and the failure is listed under `errors`, so the other three still
render.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx

from inventory_engine.config import settings
from .normalize import Ok, keys_for, normalize_collection

logger = logging.getLogger(__name__)

REPORT_COLLECTIONS: Dict[str, str] = {
    "sales": "/sales",
    "products": "/products",
    "warehouses": "/warehouses",
    "purchases": "/purchases",
}


@dataclass
class ReportBundle:
    sales: List[dict] = field(default_factory=list)
    products: List[dict] = field(default_factory=list)
    warehouses: List[dict] = field(default_factory=list)
    purchases: List[dict] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


async def _fetch_collection(client: httpx.AsyncClient, name: str, path: str) -> List[dict]:
    response = await client.get(path)
    response.raise_for_status()
    result = normalize_collection(response.json(), keys_for(name))
    if isinstance(result, Ok):
        return result.items
    raise ValueError(result.reason)


async def fetch_report_bundle_async(
    base_url: Optional[str] = None,
    token: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ReportBundle:
    """
    Fetch sales, products, warehouses and purchases concurrently.

    Args:
        base_url:  API root (defaults to settings.API_BASE_URL)
        token:     Bearer token
        timeout:   Seconds per request
        transport: Custom httpx transport (tests pass httpx.MockTransport)
    """
    token = token if token is not None else settings.API_TOKEN
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    bundle = ReportBundle()
    async with httpx.AsyncClient(
        base_url=(base_url or settings.API_BASE_URL).rstrip("/"),
        headers=headers,
        timeout=timeout or settings.REQUEST_TIMEOUT,
        transport=transport,
    ) as client:
        names = list(REPORT_COLLECTIONS)
        results = await asyncio.gather(
            *(_fetch_collection(client, name, REPORT_COLLECTIONS[name]) for name in names),
            return_exceptions=True,
        )

    for name, result in zip(names, results):
        if isinstance(result, (httpx.HTTPError, ValueError)):
            logger.warning("Failed to load %s for reports: %s", name, result)
            bundle.errors.append(f"{name}: {result}")
            continue
        if isinstance(result, BaseException):
            raise result
        setattr(bundle, name, result)
    return bundle


def fetch_report_bundle(
    base_url: Optional[str] = None,
    token: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ReportBundle:
    """Blocking wrapper around fetch_report_bundle_async for Streamlit and threads."""
    return asyncio.run(fetch_report_bundle_async(base_url, token, timeout, transport))

"""
Ekubo Position Index API Client

Async REST client for the Ekubo positions API, plus helpers to look a
position up by id across pages.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .bounds import build_bounds
from .interfaces import PositionIndex
from ...config import config as global_config, MAX_PAGE_SIZE
from ...errors import ApiError, InvalidRangeError, PositionNotFound
from ...types import PoolKey, PositionPage, PositionRecord

logger = logging.getLogger(__name__)

POSITION_STATES = ("opened", "closed")


# =========================================================================
# Record parsing
# =========================================================================

def _first(record: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in record and record[name] is not None:
            return record[name]
    return None


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"boolean is not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, Mapping) and "mag" in value:
        magnitude = _parse_int(value["mag"])
        return -magnitude if value.get("sign") in (True, "true", 1) else magnitude
    text = str(value).strip()
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


def _attribute_map(record: Mapping[str, Any]) -> Dict[str, Any]:
    """NFT metadata form: {"attributes": [{"trait_type": ..., "value": ...}]}"""
    result = {}
    for attribute in record.get("attributes") or []:
        if attribute.get("trait_type") and attribute.get("value") is not None:
            result[attribute["trait_type"]] = attribute["value"]
    return result


def parse_position_record(record: Mapping[str, Any]) -> PositionRecord:
    """
    Parse one position index entry

    Accepts nested (pool_key/bounds), flat (token0/tick_lower/...) and
    NFT-attribute layouts, in snake_case or camelCase.

    Raises:
        ApiError: Required fields are missing or unreadable
        InvalidRangeError: Tick values are not an ordered integer pair
    """
    flat = {**_attribute_map(record), **record}
    key_source = _first(flat, "pool_key", "poolKey") or flat
    bounds_source = _first(flat, "bounds") or {}

    raw = {
        "id": _first(flat, "id", "position_id", "positionId", "token_id", "tokenId"),
        "token0": _first(key_source, "token0"),
        "token1": _first(key_source, "token1"),
        "fee": _first(key_source, "fee"),
        "tick_spacing": _first(key_source, "tick_spacing", "tickSpacing"),
        "extension": _first(key_source, "extension"),
        "lower": _first(bounds_source, "lower") if bounds_source else _first(flat, "tick_lower", "tickLower"),
        "upper": _first(bounds_source, "upper") if bounds_source else _first(flat, "tick_upper", "tickUpper"),
    }
    missing = [name for name, value in raw.items() if value is None and name != "extension"]
    if missing:
        raise ApiError.invalid_response("", f"missing {', '.join(missing)} in position record")

    try:
        position_id = _parse_int(raw["id"])
        fee = _parse_int(raw["fee"])
        tick_spacing = _parse_int(raw["tick_spacing"])
        liquidity = _parse_int(_first(flat, "liquidity") or 0)
    except (TypeError, ValueError) as e:
        raise ApiError.invalid_response("", f"unreadable numeric field: {e}")

    try:
        lower = _parse_int(raw["lower"])
        upper = _parse_int(raw["upper"])
    except (TypeError, ValueError):
        raise InvalidRangeError.not_integer(raw["lower"], raw["upper"])

    pool_key = PoolKey(
        token0=str(raw["token0"]),
        token1=str(raw["token1"]),
        fee=fee,
        tick_spacing=tick_spacing,
        extension=str(raw["extension"] or "0x0"),
    )
    return PositionRecord(
        id=position_id,
        pool_key=pool_key,
        bounds=build_bounds(lower, upper),
        liquidity=liquidity,
        pool_state=_first(flat, "pool_state", "poolState"),
    )


# =========================================================================
# HTTP client
# =========================================================================

class EkuboApiClient:
    """
    Ekubo positions REST client

    Implements the PositionIndex interface.

    Usage:
        async with EkuboApiClient() as api:
            page = await api.fetch_positions(owner, state="opened")
            for record in page.records:
                print(record.id, record.bounds)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize positions API client

        Args:
            base_url: API root (default from config)
            timeout: Request timeout in seconds (default from config)
            page_size: Default page size, capped at 100 (default from config)
            client: Pre-built httpx.AsyncClient (e.g. with a mock transport)
        """
        self._base_url = (base_url if base_url is not None else global_config.ekubo.api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else global_config.ekubo.api_timeout
        self._page_size = page_size if page_size is not None else global_config.ekubo.effective_page_size
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def fetch_positions(
        self,
        owner: str,
        page: int = 1,
        page_size: Optional[int] = None,
        state: str = "opened",
    ) -> PositionPage:
        """
        Fetch one page of positions owned by an address

        Args:
            owner: Owner account address
            page: 1-based page number
            page_size: Entries per page (max 100)
            state: "opened" or "closed"

        Returns:
            PositionPage with parsed records and the raw pagination block
        """
        if state not in POSITION_STATES:
            raise ApiError.invalid_response("", f"unknown position state '{state}'")
        size = max(1, min(page_size or self._page_size, MAX_PAGE_SIZE))
        url = f"{self._base_url}/positions/{owner}"
        params = {"page": max(1, page), "pageSize": size, "state": state}

        try:
            response = await self._get_client().get(
                url, params=params, headers={"accept": "application/json"}
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Positions API returned {e.response.status_code} for {url}")
            raise ApiError.bad_status(url, e.response.status_code, e.response.reason_phrase)
        except httpx.RequestError as e:
            logger.warning(f"Positions API request failed for {url}: {e}")
            raise ApiError.request_failed(url, e)
        except ValueError as e:
            raise ApiError.invalid_response(url, f"body is not JSON: {e}")

        if isinstance(payload, list):
            entries: List[Any] = payload
            pagination: Dict[str, Any] = {"page": page}
        elif isinstance(payload, Mapping):
            entries = payload.get("data") or []
            pagination = dict(payload.get("pagination") or {"page": page})
        else:
            raise ApiError.invalid_response(url, f"unexpected body type {type(payload).__name__}")

        records = []
        for entry in entries:
            try:
                records.append(parse_position_record(entry))
            except ApiError as e:
                raise ApiError.invalid_response(url, e.message)

        logger.debug(f"Fetched {len(records)} {state} positions for {owner} (page {page})")
        return PositionPage(records=records, pagination=pagination)

    async def close(self):
        """Close HTTP client if this instance created it"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


# =========================================================================
# Lookup
# =========================================================================

async def find_position(
    index: PositionIndex,
    owner: str,
    position_id: int,
    state: str = "opened",
    page_size: Optional[int] = None,
    max_pages: Optional[int] = None,
) -> PositionRecord:
    """
    Find a position record by id, walking the owner's pages

    Raises:
        PositionNotFound: No page contains the id
    """
    if max_pages is None:
        max_pages = global_config.ekubo.max_pages
    if page_size is None:
        page_size = global_config.ekubo.effective_page_size

    target = int(position_id)
    page = 1
    while page <= max_pages:
        result = await index.fetch_positions(owner, page=page, page_size=page_size, state=state)
        for record in result.records:
            if record.id == target:
                return record
        if not result.records:
            break
        if result.total_pages is not None:
            if not result.has_more:
                break
        elif len(result.records) < page_size:
            # No page count reported; a short page is the last one
            break
        page += 1

    raise PositionNotFound.not_found(position_id, owner)

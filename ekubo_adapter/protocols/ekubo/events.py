"""
Receipt event parsing

Finds the id of a freshly minted position NFT in a transaction receipt.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from .constants import TRANSFER_EVENT_SELECTOR
from ...types import normalize_address

logger = logging.getLogger(__name__)


def _felt(value: Any) -> int:
    if isinstance(value, int):
        return value
    text = str(value)
    return int(text, 16) if text.lower().startswith("0x") else int(text)


def _receipt_events(receipt: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(receipt, Mapping):
        return receipt.get("events") or []
    return getattr(receipt, "events", None) or []


def _mint_token_id(keys: Sequence[Any], data: Sequence[Any]) -> Optional[int]:
    """
    Token id of an ERC721 Transfer from the zero address, or None

    Cairo 1 components index from/to/id as keys:
        keys = [selector, from, to, id.low, id.high]
    Older contracts carry them in data:
        keys = [selector], data = [from, to, id.low, id.high]
    """
    if not keys or _felt(keys[0]) != TRANSFER_EVENT_SELECTOR:
        return None
    if len(keys) >= 5:
        sender, low, high = keys[1], keys[3], keys[4]
    elif len(data) >= 4:
        sender, low, high = data[0], data[2], data[3]
    else:
        return None

    if _felt(sender) != 0:
        return None
    return _felt(low) + (_felt(high) << 128)


def extract_position_id_from_receipt(receipt: Any, positions_nft_address: str) -> Optional[int]:
    """
    Extract the minted position id from a receipt

    Args:
        receipt: Receipt object (with .events) or dict (with "events")
        positions_nft_address: Ekubo positions NFT contract

    Returns:
        Position id, or None when no mint event from the NFT contract is present
    """
    nft = normalize_address(positions_nft_address)

    for event in _receipt_events(receipt):
        emitter = event.get("from_address")
        if emitter is None or normalize_address(emitter) != nft:
            continue
        try:
            token_id = _mint_token_id(event.get("keys") or [], event.get("data") or [])
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping unreadable NFT event: {e}")
            continue
        if token_id is not None:
            return token_id

    return None

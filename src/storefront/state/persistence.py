"""Versioned persistence of client state.

Every stored payload is wrapped in an envelope::

    {"version": 1, "data": {...}}

Reading is defensive. A missing key, unreadable bytes or JSON, a payload
that does not match the state model or a version we do not know all yield
``None``, and the caller starts from an empty state.

Payloads written before the envelope existed are read as version 0. Those
are the bare ``{"items": [...]}`` objects the web storefront kept, whose
entries are whole catalogue products (``id``, ``price``, ``discount``,
``categoryId``, ``images``) plus a ``quantity`` for cart lines. They are
renamed to the current fields before validation.
"""

import json

import structlog
from pydantic import BaseModel, ValidationError

from storefront.state.cart import CartState
from storefront.state.comparison import ComparisonState
from storefront.state.storage import KeyValueStorage

logger = structlog.get_logger(__name__)

STATE_VERSION = 1
LEGACY_VERSION = 0

CART_KEY = "cart"
COMPARISON_KEY = "comparison"


def wishlist_key(user_id: str) -> str:
    return f"wishlist:{user_id}"


class Envelope(BaseModel):
    version: int
    data: dict


def dump_state(state: BaseModel, version: int = STATE_VERSION) -> str:
    envelope = Envelope(version=version, data=state.model_dump(mode="json"))
    return envelope.model_dump_json()


def save_state(storage: KeyValueStorage, key: str, state: BaseModel) -> None:
    storage.set_item(key, dump_state(state))


# ---------------------------------------------------------------------------
# Version 0 upgrades
# ---------------------------------------------------------------------------
def _renamed(entry, renames: dict[str, str]) -> dict:
    if not isinstance(entry, dict):
        raise ValueError(f"Unexpected legacy entry type {type(entry).__name__}")
    upgraded = dict(entry)
    for old, new in renames.items():
        if old in upgraded and new not in upgraded:
            upgraded[new] = upgraded.pop(old)
    return upgraded


def _legacy_items(data: dict) -> list:
    items = data.get("items") or []
    if not isinstance(items, list):
        raise ValueError(f"Unexpected legacy items type {type(items).__name__}")
    return items


def _legacy_cart(data: dict) -> dict:
    lines = []
    for entry in _legacy_items(data):
        line = _renamed(entry, {"id": "product_id", "price": "unit_price", "discount": "discount_percent"})
        images = line.pop("images", None)
        if "image_ref" not in line and isinstance(images, list) and images:
            line["image_ref"] = images[0]
        lines.append(line)
    return {"items": lines}


def _legacy_comparison(data: dict) -> dict:
    renames = {"id": "product_id", "categoryId": "category_id"}
    return {"items": [_renamed(entry, renames) for entry in _legacy_items(data)]}


_LEGACY_UPGRADES = {
    CartState: _legacy_cart,
    ComparisonState: _legacy_comparison,
}


def _unwrap(raw: str) -> tuple[int, dict]:
    payload = json.loads(raw)
    if isinstance(payload, dict) and "version" in payload and "data" in payload:
        envelope = Envelope.model_validate(payload)
        return envelope.version, envelope.data
    if isinstance(payload, dict):
        return LEGACY_VERSION, payload
    raise ValueError(f"Unexpected payload type {type(payload).__name__}")


def load_state(storage: KeyValueStorage, key: str, model: type[BaseModel]):
    """Rehydrate ``model`` from ``storage[key]`` or return ``None``."""
    try:
        # UnicodeDecodeError and json.JSONDecodeError are both ValueErrors
        raw = storage.get_item(key)
        if raw is None:
            return None

        version, data = _unwrap(raw)
        if version not in (LEGACY_VERSION, STATE_VERSION):
            logger.warning("Discarding client state with unknown version", key=key, version=version)
            return None
        if version == LEGACY_VERSION and model in _LEGACY_UPGRADES:
            data = _LEGACY_UPGRADES[model](data)
        return model.model_validate(data)
    except (ValueError, ValidationError) as exc:
        logger.warning("Discarding unreadable client state", key=key, error=str(exc))
        return None


class PersistState:
    """Store effect that writes the current state after every change."""

    def __init__(self, storage: KeyValueStorage, key: str):
        self.storage = storage
        self.key = key

    def __call__(self, previous, current, action) -> None:
        save_state(self.storage, self.key, current)

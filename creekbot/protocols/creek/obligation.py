"""Obligation (borrowing position) lookup."""
from __future__ import annotations

import logging
from typing import Any

from ...interfaces.chain import ChainClient
from ...models import ObligationRef

logger = logging.getLogger(__name__)


def obligation_key_type(protocol_pkg_id: str) -> str:
    return f"{protocol_pkg_id}::obligation::ObligationKey"


def parse_obligation_key(obj: dict[str, Any]) -> ObligationRef | None:
    """Extract the obligation id from an ObligationKey object.

    The id lives at ``content.fields.ownership.fields.owner_object_id``
    (``.of`` on older package versions). Anything else is treated as
    not found.
    """
    data = obj.get("data") or {}
    content = data.get("content") or {}
    if content.get("dataType") != "moveObject":
        return None

    key_fields = content.get("fields")
    ownership = key_fields.get("ownership") if isinstance(key_fields, dict) else None
    if not isinstance(ownership, dict):
        return None

    fields = ownership.get("fields")
    if not isinstance(fields, dict):
        return None
    obligation_id = fields.get("owner_object_id") or fields.get("of")
    key_id = data.get("objectId")
    if not obligation_id or not key_id:
        return None

    return ObligationRef(obligation_id=obligation_id, obligation_key_id=key_id)


async def lookup_obligation(
    client: ChainClient, owner: str, protocol_pkg_id: str
) -> ObligationRef | None:
    """Return the wallet's obligation, or None when it has not opened one.

    A wallet is expected to hold at most one key; only the first is used.
    """
    keys = await client.get_owned_objects(owner, obligation_key_type(protocol_pkg_id))
    if not keys:
        return None

    ref = parse_obligation_key(keys[0])
    if ref is None:
        logger.debug("ObligationKey for %s has no ownership field", owner)
    return ref

"""Integration tests for obligation lookup."""
from __future__ import annotations

import pytest

from conftest import PKG, make_chain_client, obligation_key_object
from creekbot.models import ObligationRef
from creekbot.protocols.creek.obligation import (
    lookup_obligation,
    obligation_key_type,
    parse_obligation_key,
)


class TestParseObligationKey:
    def test_owner_object_id(self) -> None:
        ref = parse_obligation_key(obligation_key_object("0xkey", "0xobl"))
        assert ref == ObligationRef(obligation_id="0xobl", obligation_key_id="0xkey")

    def test_legacy_of_field(self) -> None:
        obj = obligation_key_object("0xkey", "unused")
        obj["data"]["content"]["fields"]["ownership"]["fields"] = {"of": "0xlegacy"}
        assert parse_obligation_key(obj).obligation_id == "0xlegacy"

    def test_not_a_move_object(self) -> None:
        obj = obligation_key_object("0xkey", "0xobl")
        obj["data"]["content"]["dataType"] = "package"
        assert parse_obligation_key(obj) is None

    def test_missing_ownership(self) -> None:
        obj = obligation_key_object("0xkey", "0xobl")
        del obj["data"]["content"]["fields"]["ownership"]
        assert parse_obligation_key(obj) is None

    @pytest.mark.parametrize("fields", ["0xobl", ["0xobl"], None])
    def test_ownership_fields_not_a_mapping(self, fields) -> None:
        obj = obligation_key_object("0xkey", "0xobl")
        obj["data"]["content"]["fields"]["ownership"]["fields"] = fields
        assert parse_obligation_key(obj) is None

    def test_key_fields_not_a_mapping(self) -> None:
        obj = obligation_key_object("0xkey", "0xobl")
        obj["data"]["content"]["fields"] = "unexpected"
        assert parse_obligation_key(obj) is None

    def test_error_object(self) -> None:
        assert parse_obligation_key({"error": {"code": "notExists"}}) is None


class TestLookupObligation:
    @pytest.mark.asyncio
    async def test_no_keys(self) -> None:
        client = make_chain_client()
        assert await lookup_obligation(client, "0xowner", PKG) is None
        client.get_owned_objects.assert_awaited_once_with(
            "0xowner", obligation_key_type(PKG)
        )

    @pytest.mark.asyncio
    async def test_first_key_wins(self) -> None:
        client = make_chain_client(
            obligation_keys=[
                obligation_key_object("0xkey1", "0xobl1"),
                obligation_key_object("0xkey2", "0xobl2"),
            ]
        )
        ref = await lookup_obligation(client, "0xowner", PKG)
        assert ref == ObligationRef("0xobl1", "0xkey1")

    def test_key_type(self) -> None:
        assert obligation_key_type("0xabc") == "0xabc::obligation::ObligationKey"

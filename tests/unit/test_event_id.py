"""Test SCOutputEventId codecs, parsing, ordering and container use."""

from __future__ import annotations

import pytest

from sc_events.core.config import EVENT_ID_SIZE_BYTES
from sc_events.core.errors import HashDecodeError
from sc_events.core.events import SCOutputEventId
from sc_events.core.hashing import Hash
from sc_events.core.prehash import PreHashed, PreHashMap, prehash_key


def _flip_char(text: str, pos: int) -> str:
    replacement = "2" if text[pos] != "2" else "3"
    return text[:pos] + replacement + text[pos + 1:]


class TestHelloWorldScenario:
    def test_fixed_bytes_length(self, hello_id):
        assert len(hello_id.to_bytes()) == EVENT_ID_SIZE_BYTES

    def test_bytes_round_trip(self, hello_id):
        assert SCOutputEventId.from_bytes(hello_id.to_bytes()) == hello_id

    def test_text_round_trip(self, hello_id):
        assert SCOutputEventId.from_bs58_check(hello_id.to_bs58_check()) == hello_id

    def test_truncated_bytes_rejected(self, hello_id):
        with pytest.raises(HashDecodeError):
            SCOutputEventId.from_bytes(hello_id.to_bytes()[: EVENT_ID_SIZE_BYTES - 1])

    def test_flipped_character_rejected(self, hello_id):
        text = hello_id.to_bs58_check()
        with pytest.raises(HashDecodeError):
            SCOutputEventId.from_bs58_check(_flip_char(text, len(text) // 2))


class TestEncoding:
    def test_bytes_are_the_digest(self, hello_hash, hello_id):
        assert hello_id.to_bytes() == hello_hash.to_bytes()

    def test_text_is_the_digest_text(self, hello_hash, hello_id):
        assert hello_id.to_bs58_check() == hello_hash.to_bs58_check()
        assert str(hello_id) == hello_hash.to_bs58_check()

    def test_hash_property(self, hello_hash, hello_id):
        assert hello_id.hash is hello_hash

    def test_oversized_bytes_rejected(self, hello_id):
        with pytest.raises(HashDecodeError):
            SCOutputEventId.from_bytes(hello_id.to_bytes() + b"\x00")

    def test_requires_hash(self):
        with pytest.raises(TypeError):
            SCOutputEventId(b"\x00" * EVENT_ID_SIZE_BYTES)  # type: ignore[arg-type]

    def test_immutable(self, hello_id):
        with pytest.raises(AttributeError):
            hello_id._hash = Hash.compute_from(b"other")


class TestParse:
    def test_parse_equals_from_bs58_check(self, hello_id):
        text = hello_id.to_bs58_check()
        assert SCOutputEventId.parse(text) == SCOutputEventId.from_bs58_check(text)

    @pytest.mark.parametrize("text", ["", "0", "not-base58!", "1111"])
    def test_parse_fails_like_from_bs58_check(self, text):
        with pytest.raises(HashDecodeError):
            SCOutputEventId.from_bs58_check(text)
        with pytest.raises(HashDecodeError):
            SCOutputEventId.parse(text)

    @pytest.mark.parametrize("suffix", [" ", "\n", "\t ", "\r\n"])
    def test_trailing_whitespace_rejected(self, hello_id, suffix):
        with pytest.raises(HashDecodeError):
            SCOutputEventId.parse(hello_id.to_bs58_check() + suffix)

    @pytest.mark.parametrize("prefix", [" ", "\n", "\t"])
    def test_leading_whitespace_rejected(self, hello_id, prefix):
        with pytest.raises(HashDecodeError):
            SCOutputEventId.from_bs58_check(prefix + hello_id.to_bs58_check())

    def test_inner_whitespace_rejected(self, hello_id):
        text = hello_id.to_bs58_check()
        with pytest.raises(HashDecodeError):
            SCOutputEventId.parse(text[:10] + " " + text[10:])


class TestOrderingAndHashing:
    def test_ordering_matches_byte_order(self):
        a = SCOutputEventId.from_bytes(b"\x00" * EVENT_ID_SIZE_BYTES)
        b = SCOutputEventId.from_bytes(b"\x00" * (EVENT_ID_SIZE_BYTES - 1) + b"\xff")
        c = SCOutputEventId.from_bytes(b"\x01" + b"\x00" * (EVENT_ID_SIZE_BYTES - 1))
        assert a < b < c
        assert sorted([c, a, b]) == [a, b, c]

    def test_equal_ids_interchangeable(self, hello_id):
        twin = SCOutputEventId.from_bytes(hello_id.to_bytes())
        assert twin == hello_id
        assert hash(twin) == hash(hello_id)
        assert {hello_id: "x"}[twin] == "x"

    def test_is_prehashed(self, hello_id):
        assert isinstance(hello_id, PreHashed)
        assert hello_id.prehash() == hello_id.to_bytes()

    def test_prehash_key_reads_leading_digest_bytes(self, hello_id):
        expected = int.from_bytes(hello_id.to_bytes()[:8], "little")
        assert prehash_key(hello_id) == expected

    def test_prehash_map_key(self, hello_id):
        index = PreHashMap([(hello_id, 1)])
        assert index[SCOutputEventId.parse(hello_id.to_bs58_check())] == 1

    def test_not_equal_to_hash(self, hello_hash, hello_id):
        assert hello_id != hello_hash

    def test_repr(self, hello_id):
        assert repr(hello_id) == f'SCOutputEventId("{hello_id}")'

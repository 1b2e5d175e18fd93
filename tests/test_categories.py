"""Key schema: stable, collision-free keys per category."""

import pytest

from chain_indexer.categories import EventCategory


class TestKeySchema:
    def test_fixed_prefixes_and_quantity_keys(self):
        assert EventCategory.COLLECTION_CREATED.quantity_key == "cc:q"
        assert EventCategory.TOKEN_MINTED.quantity_key == "tm:q"

    def test_record_keys(self):
        assert EventCategory.COLLECTION_CREATED.record_key(1) == "cc:1"
        assert EventCategory.TOKEN_MINTED.record_key(42) == "tm:42"

    def test_record_key_never_equals_quantity_key(self):
        for category in EventCategory:
            keys = {category.record_key(n) for n in range(1, 1000)}
            assert category.quantity_key not in keys

    def test_keys_do_not_collide_across_categories(self):
        a = EventCategory.COLLECTION_CREATED
        b = EventCategory.TOKEN_MINTED
        a_keys = {a.quantity_key} | {a.record_key(n) for n in range(1, 100)}
        b_keys = {b.quantity_key} | {b.record_key(n) for n in range(1, 100)}
        assert a_keys.isdisjoint(b_keys)

    def test_topics_are_32_byte_hex(self):
        for category in EventCategory:
            assert len(bytes.fromhex(category.topic)) == 32


class TestLookup:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("collection_created", EventCategory.COLLECTION_CREATED),
            ("token_minted", EventCategory.TOKEN_MINTED),
        ],
    )
    def test_from_name(self, name, expected):
        assert EventCategory.from_name(name) is expected

    def test_unknown_name_is_none(self):
        assert EventCategory.from_name("transfer") is None
        assert EventCategory.from_name("cc") is None

    def test_names(self):
        assert EventCategory.names() == ["collection_created", "token_minted"]

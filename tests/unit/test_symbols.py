"""Unit tests for SymbolRegistry."""

import pytest

from tokenlaw.core.errors import InputRangeError, SymbolUsedError
from tokenlaw.registry import SymbolRegistry, canonical_symbol


@pytest.fixture
def registry(store) -> SymbolRegistry:
    return SymbolRegistry(store)


class TestCanonicalSymbol:
    @pytest.mark.parametrize("raw,expected", [("abc", "ABC"), ("AbC", "ABC"), ("wNEAR", "WNEAR")])
    def test_upper_cases(self, raw, expected):
        assert canonical_symbol(raw) == expected

    @pytest.mark.parametrize("bad", ["", None, 42])
    def test_rejects_non_strings(self, bad):
        with pytest.raises(InputRangeError):
            canonical_symbol(bad)


class TestSymbolRegistry:
    def test_register(self, registry, store):
        assert registry.register("abc", "alice.near") == "ABC"
        assert store.get("symbol:ABC") == "alice.near"

    def test_lookup_is_case_insensitive(self, registry):
        registry.register("Abc", "alice.near")

        assert registry.get("abc") == "alice.near"
        assert registry.get("ABC") == "alice.near"
        assert registry.is_registered("aBc")

    def test_unknown_symbol(self, registry):
        assert registry.get("XYZ") is None
        assert not registry.is_registered("XYZ")

    def test_case_variant_is_taken(self, registry):
        registry.register("ABC", "alice.near")

        with pytest.raises(SymbolUsedError, match="SYMBOL_USED") as exc_info:
            registry.register("abc", "mallory.near")

        assert exc_info.value.symbol == "ABC"
        assert registry.get("ABC") == "alice.near"

    def test_same_account_cannot_reregister(self, registry):
        registry.register("ABC", "alice.near")
        with pytest.raises(SymbolUsedError):
            registry.register("ABC", "alice.near")

    def test_list_symbols(self, registry):
        for symbol in ["zed", "abc", "mid"]:
            registry.register(symbol, f"{symbol}.near")

        assert registry.list_symbols() == ["ABC", "MID", "ZED"]

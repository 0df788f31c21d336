"""Token symbol registry."""

from .symbols import SymbolRegistry, canonical_symbol

__all__ = ["SymbolRegistry", "canonical_symbol"]

"""Symbol registry mapping upper-cased token symbols to issuer accounts."""

import logging
from typing import List, Optional

from tokenlaw.core.errors import InputRangeError, SymbolUsedError
from tokenlaw.persistence import KeyValueStore, StorageKeys

logger = logging.getLogger(__name__)


def canonical_symbol(symbol: str) -> str:
    """Registry key for a symbol: case-insensitive, stored upper-case."""
    if not isinstance(symbol, str) or not symbol:
        raise InputRangeError(f"symbol must be a non-empty string, got {symbol!r}")
    return symbol.upper()


class SymbolRegistry:
    """Registry of token symbols backed by the host key-value store.

    Each symbol maps to exactly one account; registering a taken symbol
    fails and leaves the existing entry untouched.
    """

    _prefix = StorageKeys.symbol("")

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._lock = store.lock("symbol")

    def register(self, symbol: str, account: str) -> str:
        """Register a symbol to an account.

        Args:
            symbol: Caller-supplied symbol, any case
            account: Issuer account

        Returns:
            The canonical (upper-cased) symbol

        Raises:
            SymbolUsedError: if the symbol is already registered
        """
        key_symbol = canonical_symbol(symbol)
        key = StorageKeys.symbol(key_symbol)
        with self._lock:
            if self.store.get(key) is not None:
                raise SymbolUsedError(key_symbol)
            self.store.set(key, account)
        logger.info(f"Registered symbol {key_symbol} -> {account}")
        return key_symbol

    def get(self, symbol: str) -> Optional[str]:
        """Look up the account for a symbol (case-insensitive)."""
        return self.store.get(StorageKeys.symbol(canonical_symbol(symbol)))

    def is_registered(self, symbol: str) -> bool:
        return self.get(symbol) is not None

    def list_symbols(self) -> List[str]:
        """Registered symbols, sorted."""
        return [key[len(self._prefix):] for key in self.store.keys(self._prefix)]

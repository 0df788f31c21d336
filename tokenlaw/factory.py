"""Token creation: policy validation, symbol registration, rebalancer wiring."""

import logging
from dataclasses import dataclass
from typing import Optional

from tokenlaw.core.errors import ConfigError
from tokenlaw.core.models import (
    AllocationPolicy,
    AllocationSummary,
    InflationConfig,
    InflationState,
)
from tokenlaw.engine import Clock, InflationRebalancer
from tokenlaw.engine.rebalancer import EventSink
from tokenlaw.persistence import KeyValueStore, StorageKeys
from tokenlaw.policy import AllocationPolicyValidator
from tokenlaw.registry import SymbolRegistry, canonical_symbol

logger = logging.getLogger(__name__)


@dataclass
class TokenRecord:
    """Outcome of a successful token creation."""
    symbol: str
    account: str
    allocation: AllocationSummary
    rebalancer: Optional[InflationRebalancer] = None
    initial_state: Optional[InflationState] = None

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "account": self.account,
            "allocation": self.allocation.to_dict(),
            "rebalancer_namespace": self.rebalancer.namespace if self.rebalancer else None,
            "initial_state": self.initial_state.to_dict() if self.initial_state else None,
        }


class TokenFactory:
    """
    Creates tokens against one shared store.

    A token is only registered once its policy validates; a rejected
    policy or rebalancer config leaves no registry entry behind.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Clock] = None,
        event_sink: Optional[EventSink] = None,
    ):
        self.store = store
        self.clock = clock
        self.event_sink = event_sink
        self.registry = SymbolRegistry(store)

    def create_token(
        self,
        symbol: str,
        account: str,
        policy: AllocationPolicy,
        inflation_config: Optional[InflationConfig] = None,
    ) -> TokenRecord:
        """
        Validate a policy and register the token.

        Args:
            symbol: Token symbol (case-insensitive)
            account: Issuer account the symbol maps to
            policy: Allocation policy to enforce
            inflation_config: Optional rebalancer config for the token

        Returns:
            TokenRecord for the new token

        Raises:
            ValidationError: if the policy is rejected
            ConfigError: if the rebalancer config is invalid
            SymbolUsedError: if the symbol is taken
        """
        summary = AllocationPolicyValidator.validate(policy)
        if inflation_config is not None:
            if not isinstance(inflation_config, InflationConfig):
                raise ConfigError(
                    f"expected InflationConfig, got {type(inflation_config).__name__}"
                )
            inflation_config.check()

        key_symbol = self.registry.register(symbol, account)
        record = TokenRecord(symbol=key_symbol, account=account, allocation=summary)

        if inflation_config is not None:
            rebalancer = self.rebalancer_for(key_symbol)
            record.rebalancer = rebalancer
            record.initial_state = rebalancer.init(inflation_config)

        logger.info(
            f"Created token {key_symbol} for {account}: reserved "
            f"{summary.total_reserved}/{summary.supply}, "
            f"rebalancer={'on' if record.rebalancer else 'off'}"
        )
        return record

    def get_token(self, symbol: str) -> Optional[str]:
        """Account registered for a symbol, or None."""
        return self.registry.get(symbol)

    def rebalancer_for(self, symbol: str) -> InflationRebalancer:
        """Rebalancer bound to a token's storage namespace."""
        return InflationRebalancer(
            self.store,
            namespace=StorageKeys.token_namespace(canonical_symbol(symbol)),
            clock=self.clock,
            event_sink=self.event_sink,
        )

"""Core data models for tokenlaw."""

from .policy import (
    FixedSupply,
    BurnCap,
    TimeLock,
    Airdrop,
    VestingSchedule,
    LiquidityBootstrap,
    PercentageDistribution,
    AllocationPolicy,
    AllocationSummary,
)
from .inflation import (
    InflationModeKind,
    OracleMode,
    FixedHurdleMode,
    InflationMode,
    InflationStatus,
    InflationConfig,
    IndexSample,
    InflationState,
    default_state,
)
from .events import IndexPosted, StatusUpdated, Rebalanced, RebalancerEvent

__all__ = [
    "FixedSupply",
    "BurnCap",
    "TimeLock",
    "Airdrop",
    "VestingSchedule",
    "LiquidityBootstrap",
    "PercentageDistribution",
    "AllocationPolicy",
    "AllocationSummary",
    # Inflation rebalancer models
    "InflationModeKind",
    "OracleMode",
    "FixedHurdleMode",
    "InflationMode",
    "InflationStatus",
    "InflationConfig",
    "IndexSample",
    "InflationState",
    "default_state",
    # Events
    "IndexPosted",
    "StatusUpdated",
    "Rebalanced",
    "RebalancerEvent",
]

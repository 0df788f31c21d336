"""Constants for allocation policy and inflation rebalancer calculations."""

# Basis points
BPS_DENOMINATOR = 10_000  # 100%

# Integer widths of the persisted / wire representation
U16_MAX = 2**16 - 1
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
I32_MIN = -(2**31)
I32_MAX = 2**31 - 1

# Rebalancer defaults
DEFAULT_REBALANCE_STEP_BPS = 100  # 1% per rebalance when the config leaves it unset
INITIAL_SAFETY_WEIGHT_BPS = BPS_DENOMINATOR  # fully safe at genesis

# Placeholder until deterministic vault accounting is wired in
VAULT_GROWTH_BPS = 0

# Event names (stable wire contract)
EVENT_INDEX_POSTED = "OIM_INDEX_POSTED"
EVENT_STATUS_UPDATED = "OIM_STATUS_UPDATED"
EVENT_REBALANCED = "OIM_REBALANCED"

# Registry
SYMBOL_USED = "SYMBOL_USED"

"""Inflation rebalancer configuration and state models."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..checked import in_range
from ..constants import (
    BPS_DENOMINATOR,
    DEFAULT_REBALANCE_STEP_BPS,
    I32_MAX,
    I32_MIN,
    INITIAL_SAFETY_WEIGHT_BPS,
    U16_MAX,
    U32_MAX,
)
from ..errors import ConfigError


class InflationModeKind(Enum):
    """Where the inflation hurdle comes from."""
    ORACLE = "Oracle"            # Periodic index samples from an authorized account
    FIXED_HURDLE = "FixedHurdle"  # Constant annual hurdle in bps


@dataclass(frozen=True)
class OracleMode:
    oracle_account: str

    kind = InflationModeKind.ORACLE


@dataclass(frozen=True)
class FixedHurdleMode:
    hurdle_bps_annual: int

    kind = InflationModeKind.FIXED_HURDLE


InflationMode = Union[OracleMode, FixedHurdleMode]


class InflationStatus(Enum):
    """Rebalancer health."""
    HEALTHY = "Healthy"
    BEHIND = "Behind"
    ORACLE_STALE = "OracleStale"


def _require_int(data: Dict[str, Any], name: str, low: int, high: int) -> int:
    if name not in data:
        raise ConfigError(f"{name} is required")
    value = data[name]
    if not in_range(value, low, high):
        raise ConfigError(f"{name} must be an integer in [{low}, {high}], got {value!r}")
    return value


@dataclass(frozen=True)
class InflationConfig:
    """
    Rebalancer policy, fixed for the lifetime of a token instance.

    The mode carries exactly the payload it needs, so "oracle account and
    hurdle both set" cannot be represented.
    """

    mode: InflationMode
    measurement_window_days: int         # Policy metadata, e.g. 365
    min_real_return_bps: int             # Desired buffer above the hurdle, signed
    rebalance_cooldown_seconds: int
    max_oracle_age_seconds: int          # Older samples freeze rebalancing
    safety_cap_bps: int
    growth_cap_bps: int
    liquidity_cap_bps: int
    max_rebalance_step_bps: Optional[int] = None

    @property
    def is_oracle(self) -> bool:
        return isinstance(self.mode, OracleMode)

    @property
    def oracle_account(self) -> Optional[str]:
        return self.mode.oracle_account if isinstance(self.mode, OracleMode) else None

    @property
    def fixed_hurdle_bps_annual(self) -> Optional[int]:
        return self.mode.hurdle_bps_annual if isinstance(self.mode, FixedHurdleMode) else None

    @property
    def rebalance_step_bps(self) -> int:
        """Per-rebalance movement limit, defaulting to 1%."""
        if self.max_rebalance_step_bps is None:
            return DEFAULT_REBALANCE_STEP_BPS
        return self.max_rebalance_step_bps

    def check(self) -> None:
        """
        Verify field ranges.

        Raises:
            ConfigError: on an unknown mode or any value outside its width,
                including a bucket cap above 10000 bps.
        """
        if isinstance(self.mode, OracleMode):
            if not isinstance(self.mode.oracle_account, str) or not self.mode.oracle_account:
                raise ConfigError("oracle_account required in Oracle mode")
        elif isinstance(self.mode, FixedHurdleMode):
            if not in_range(self.mode.hurdle_bps_annual, 0, U32_MAX):
                raise ConfigError("fixed_hurdle_bps_annual must be a uint32")
        else:
            raise ConfigError(f"unknown inflation mode: {self.mode!r}")

        ranges = {
            "measurement_window_days": (self.measurement_window_days, 0, U16_MAX),
            "min_real_return_bps": (self.min_real_return_bps, I32_MIN, I32_MAX),
            "rebalance_cooldown_seconds": (self.rebalance_cooldown_seconds, 0, U32_MAX),
            "max_oracle_age_seconds": (self.max_oracle_age_seconds, 0, U32_MAX),
            "safety_cap_bps": (self.safety_cap_bps, 0, BPS_DENOMINATOR),
            "growth_cap_bps": (self.growth_cap_bps, 0, BPS_DENOMINATOR),
            "liquidity_cap_bps": (self.liquidity_cap_bps, 0, BPS_DENOMINATOR),
        }
        if self.max_rebalance_step_bps is not None:
            ranges["max_rebalance_step_bps"] = (self.max_rebalance_step_bps, 0, U32_MAX)

        for name, (value, low, high) in ranges.items():
            if not in_range(value, low, high):
                raise ConfigError(f"invalid {name}: {value!r} not in [{low}, {high}]")

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.kind.value,
            "oracle_account": self.oracle_account,
            "fixed_hurdle_bps_annual": self.fixed_hurdle_bps_annual,
            "measurement_window_days": self.measurement_window_days,
            "min_real_return_bps": self.min_real_return_bps,
            "rebalance_cooldown_sec": self.rebalance_cooldown_seconds,
            "max_oracle_age_sec": self.max_oracle_age_seconds,
            "safety_cap_bps": self.safety_cap_bps,
            "growth_cap_bps": self.growth_cap_bps,
            "liquidity_cap_bps": self.liquidity_cap_bps,
            "max_rebalance_step_bps": self.max_rebalance_step_bps,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InflationConfig":
        """
        Parse the flat wire layout (mode + two optional payload fields).

        Raises:
            ConfigError: if the mode/payload pairing is inconsistent or a
                field is missing or out of range.
        """
        if not isinstance(data, dict):
            raise ConfigError("inflation config must be an object")

        try:
            kind = InflationModeKind(data.get("mode"))
        except ValueError:
            raise ConfigError(f"unknown inflation mode: {data.get('mode')!r}")

        oracle_account = data.get("oracle_account")
        hurdle = data.get("fixed_hurdle_bps_annual")

        mode: InflationMode
        if kind is InflationModeKind.ORACLE:
            if oracle_account is None:
                raise ConfigError("oracle_account required in Oracle mode")
            if hurdle is not None:
                raise ConfigError("fixed_hurdle_bps_annual must be absent in Oracle mode")
            mode = OracleMode(oracle_account=oracle_account)
        else:
            if hurdle is None:
                raise ConfigError("fixed_hurdle_bps_annual required in FixedHurdle mode")
            if oracle_account is not None:
                raise ConfigError("oracle_account must be absent in FixedHurdle mode")
            mode = FixedHurdleMode(hurdle_bps_annual=hurdle)

        step = data.get("max_rebalance_step_bps")
        config = cls(
            mode=mode,
            measurement_window_days=_require_int(data, "measurement_window_days", 0, U16_MAX),
            min_real_return_bps=_require_int(data, "min_real_return_bps", I32_MIN, I32_MAX),
            rebalance_cooldown_seconds=_require_int(data, "rebalance_cooldown_sec", 0, U32_MAX),
            max_oracle_age_seconds=_require_int(data, "max_oracle_age_sec", 0, U32_MAX),
            safety_cap_bps=_require_int(data, "safety_cap_bps", 0, U32_MAX),
            growth_cap_bps=_require_int(data, "growth_cap_bps", 0, U32_MAX),
            liquidity_cap_bps=_require_int(data, "liquidity_cap_bps", 0, U32_MAX),
            max_rebalance_step_bps=step,
        )
        config.check()
        return config


@dataclass(frozen=True)
class IndexSample:
    """Inflation index reading posted by the oracle."""
    index_id: str           # e.g. "US_CPI_U"
    period: str             # e.g. "2026-01"
    value_bps: int          # uint32, used as a flat hurdle term
    posted_at_seconds: int  # host clock at posting

    def to_dict(self) -> dict:
        return {
            "index_id": self.index_id,
            "period": self.period,
            "value_bps": self.value_bps,
            "posted_at_sec": self.posted_at_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "IndexSample":
        return cls(
            index_id=data["index_id"],
            period=data["period"],
            value_bps=data["value_bps"],
            posted_at_seconds=data["posted_at_sec"],
        )


@dataclass(frozen=True)
class InflationState:
    """
    Mutable rebalancer state, persisted after every committed operation.

    Instances are frozen; operations derive a new state with
    dataclasses.replace and persist it only on their success path.
    """

    last_index: Optional[IndexSample] = None
    last_rebalance_at_seconds: int = 0
    real_return_score_bps: int = 0
    status: InflationStatus = InflationStatus.HEALTHY

    # Intent weights only; no funds move
    safety_weight_bps: int = INITIAL_SAFETY_WEIGHT_BPS
    growth_weight_bps: int = 0
    liquidity_weight_bps: int = 0

    @property
    def total_weight_bps(self) -> int:
        return self.safety_weight_bps + self.growth_weight_bps + self.liquidity_weight_bps

    def with_changes(self, **changes: Any) -> "InflationState":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "last_index": self.last_index.to_dict() if self.last_index else None,
            "last_rebalance_at_sec": self.last_rebalance_at_seconds,
            "real_return_score_bps": self.real_return_score_bps,
            "status": self.status.value,
            "safety_weight_bps": self.safety_weight_bps,
            "growth_weight_bps": self.growth_weight_bps,
            "liquidity_weight_bps": self.liquidity_weight_bps,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InflationState":
        last_index = data.get("last_index")
        return cls(
            last_index=IndexSample.from_dict(last_index) if last_index else None,
            last_rebalance_at_seconds=data.get("last_rebalance_at_sec", 0),
            real_return_score_bps=data.get("real_return_score_bps", 0),
            status=InflationStatus(data.get("status", InflationStatus.HEALTHY.value)),
            safety_weight_bps=data.get("safety_weight_bps", INITIAL_SAFETY_WEIGHT_BPS),
            growth_weight_bps=data.get("growth_weight_bps", 0),
            liquidity_weight_bps=data.get("liquidity_weight_bps", 0),
        )


def default_state() -> InflationState:
    """Genesis state: fully weighted to safety, healthy, never rebalanced."""
    return InflationState()


"""Allocation policy document models.

Amounts are uint128 values. On the wire they travel as decimal numeric
strings so JSON consumers never lose precision; plain JSON integers are
accepted on input as well.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..constants import U128_MAX
from ..errors import PolicyFormatError

_DIGITS = re.compile(r"[0-9]+")


def _parse_uint(data: Dict[str, Any], *names: str, context: str) -> int:
    """Read a uint128 field, trying each wire name in turn."""
    for name in names:
        if name in data:
            raw = data[name]
            break
    else:
        raise PolicyFormatError(f"{context}.{names[0]} is required")

    if isinstance(raw, bool):
        raise PolicyFormatError(f"{context}.{names[0]} must be an integer, got {raw!r}")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _DIGITS.fullmatch(raw.strip()):
        value = int(raw.strip())
    else:
        raise PolicyFormatError(f"{context}.{names[0]} must be a non-negative integer, got {raw!r}")

    if value < 0 or value > U128_MAX:
        raise PolicyFormatError(f"{context}.{names[0]} out of uint128 range: {value}")
    return value


def _parse_address(raw: Any, context: str) -> str:
    if not isinstance(raw, str) or not raw:
        raise PolicyFormatError(f"{context} must be a non-empty account string, got {raw!r}")
    return raw


def _parse_recipients(data: Dict[str, Any], context: str) -> Tuple[str, ...]:
    raw = data.get("recipients")
    if not isinstance(raw, list):
        raise PolicyFormatError(f"{context}.recipients must be a list")
    return tuple(_parse_address(r, f"{context}.recipients[{i}]") for i, r in enumerate(raw))


def _section(data: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    section = data.get(name)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise PolicyFormatError(f"{name} must be an object")
    return section


@dataclass(frozen=True)
class FixedSupply:
    """Total units ever issued."""
    amount: int

    def to_dict(self) -> dict:
        return {"amount": str(self.amount)}


@dataclass(frozen=True)
class BurnCap:
    """Upper bound on units that may be burned."""
    cap: int

    def to_dict(self) -> dict:
        return {"cap": str(self.cap)}


@dataclass(frozen=True)
class TimeLock:
    duration_seconds: int

    def to_dict(self) -> dict:
        return {"duration": str(self.duration_seconds)}


@dataclass(frozen=True)
class Airdrop:
    """Uniform amount per recipient."""
    recipients: Tuple[str, ...]
    amount: int

    def to_dict(self) -> dict:
        return {"recipients": list(self.recipients), "amount": str(self.amount)}


@dataclass(frozen=True)
class VestingSchedule:
    """Uniform amount per recipient, unlocked after the cliff over the duration."""
    cliff_seconds: int
    duration_seconds: int
    recipients: Tuple[str, ...]
    amount: int

    def to_dict(self) -> dict:
        return {
            "cliff": str(self.cliff_seconds),
            "duration": str(self.duration_seconds),
            "recipients": list(self.recipients),
            "amount": str(self.amount),
        }


@dataclass(frozen=True)
class LiquidityBootstrap:
    destination: str  # DEX pool account or controller
    amount: int

    def to_dict(self) -> dict:
        return {"pair": self.destination, "amount": str(self.amount)}


@dataclass(frozen=True)
class PercentageDistribution:
    """Share of supply in basis points (0..=10000) split across recipients."""
    percentage_bps: int
    recipients: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {"percentage": str(self.percentage_bps), "recipients": list(self.recipients)}


@dataclass(frozen=True)
class AllocationPolicy:
    """
    Issuance policy submitted at token creation.

    fixed_supply is required; every other module is optional and
    percentage_distributions may be empty.
    """

    fixed_supply: FixedSupply
    burn_cap: Optional[BurnCap] = None
    time_lock: Optional[TimeLock] = None
    airdrop: Optional[Airdrop] = None
    vesting_schedule: Optional[VestingSchedule] = None
    liquidity_bootstrap: Optional[LiquidityBootstrap] = None
    percentage_distributions: Tuple[PercentageDistribution, ...] = field(default_factory=tuple)

    @property
    def supply(self) -> int:
        return self.fixed_supply.amount

    def to_dict(self) -> dict:
        return {
            "fixed_supply": self.fixed_supply.to_dict(),
            "burn_cap": self.burn_cap.to_dict() if self.burn_cap else None,
            "time_lock": self.time_lock.to_dict() if self.time_lock else None,
            "airdrop": self.airdrop.to_dict() if self.airdrop else None,
            "vesting_schedule": self.vesting_schedule.to_dict() if self.vesting_schedule else None,
            "liquidity_bootstrap": (
                self.liquidity_bootstrap.to_dict() if self.liquidity_bootstrap else None
            ),
            "percentage_distributions": [pd.to_dict() for pd in self.percentage_distributions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AllocationPolicy":
        """
        Parse a policy document.

        Raises:
            PolicyFormatError: if the document is structurally malformed.
                Semantic checks are left to AllocationPolicyValidator.
        """
        if not isinstance(data, dict):
            raise PolicyFormatError("policy document must be an object")

        fs = _section(data, "fixed_supply")
        if fs is None:
            raise PolicyFormatError("fixed_supply is required")
        fixed_supply = FixedSupply(amount=_parse_uint(fs, "amount", context="fixed_supply"))

        burn_cap = None
        bc = _section(data, "burn_cap")
        if bc is not None:
            burn_cap = BurnCap(cap=_parse_uint(bc, "cap", context="burn_cap"))

        time_lock = None
        tl = _section(data, "time_lock")
        if tl is not None:
            time_lock = TimeLock(
                duration_seconds=_parse_uint(tl, "duration", "duration_seconds", context="time_lock"),
            )

        airdrop = None
        ad = _section(data, "airdrop")
        if ad is not None:
            airdrop = Airdrop(
                recipients=_parse_recipients(ad, "airdrop"),
                amount=_parse_uint(ad, "amount", context="airdrop"),
            )

        vesting = None
        vs = _section(data, "vesting_schedule")
        if vs is not None:
            vesting = VestingSchedule(
                cliff_seconds=_parse_uint(vs, "cliff", "cliff_seconds", context="vesting_schedule"),
                duration_seconds=_parse_uint(
                    vs, "duration", "duration_seconds", context="vesting_schedule"
                ),
                recipients=_parse_recipients(vs, "vesting_schedule"),
                amount=_parse_uint(vs, "amount", context="vesting_schedule"),
            )

        bootstrap = None
        lb = _section(data, "liquidity_bootstrap")
        if lb is not None:
            destination = lb.get("pair", lb.get("destination"))
            bootstrap = LiquidityBootstrap(
                destination=_parse_address(destination, "liquidity_bootstrap.pair"),
                amount=_parse_uint(lb, "amount", context="liquidity_bootstrap"),
            )

        raw_pds = data.get("percentage_distributions")
        if raw_pds is None:
            raw_pds = []
        if not isinstance(raw_pds, list):
            raise PolicyFormatError("percentage_distributions must be a list")
        distributions: List[PercentageDistribution] = []
        for i, pd in enumerate(raw_pds):
            context = f"percentage_distributions[{i}]"
            if not isinstance(pd, dict):
                raise PolicyFormatError(f"{context} must be an object")
            distributions.append(
                PercentageDistribution(
                    percentage_bps=_parse_uint(pd, "percentage", "percentage_bps", context=context),
                    recipients=_parse_recipients(pd, context),
                )
            )

        return cls(
            fixed_supply=fixed_supply,
            burn_cap=burn_cap,
            time_lock=time_lock,
            airdrop=airdrop,
            vesting_schedule=vesting,
            liquidity_bootstrap=bootstrap,
            percentage_distributions=tuple(distributions),
        )


@dataclass(frozen=True)
class AllocationSummary:
    """Reservation totals computed by a successful validation."""
    supply: int
    explicit_reserved: int     # airdrop + vesting + liquidity bootstrap units
    percentage_bps: int        # sum over all percentage distributions
    percentage_reserved: int   # floor(supply * percentage_bps / 10000)

    @property
    def total_reserved(self) -> int:
        return self.explicit_reserved + self.percentage_reserved

    @property
    def unreserved(self) -> int:
        return self.supply - self.total_reserved

    def to_dict(self) -> dict:
        return {
            "supply": str(self.supply),
            "explicit_reserved": str(self.explicit_reserved),
            "percentage_bps": self.percentage_bps,
            "percentage_reserved": str(self.percentage_reserved),
            "total_reserved": str(self.total_reserved),
            "unreserved": str(self.unreserved),
        }


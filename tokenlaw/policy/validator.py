"""Allocation policy validation against supply conservation invariants."""

import logging
from typing import Sequence

from tokenlaw.core.checked import checked_add_u128, checked_mul_u128
from tokenlaw.core.constants import BPS_DENOMINATOR
from tokenlaw.core.errors import ValidationError, ValidationErrorCode
from tokenlaw.core.models import AllocationPolicy, AllocationSummary

logger = logging.getLogger(__name__)


class AllocationPolicyValidator:
    """
    Validator for issuance policies.

    Stateless and side-effect free: no storage access, so it is safe to
    call speculatively before any token state exists.

    Reserved units are the explicit module totals (airdrop, vesting,
    liquidity bootstrap) plus the floor-rounded basis-point share of
    supply. Every accumulation is checked against uint128.
    """

    @staticmethod
    def validate(policy: AllocationPolicy) -> AllocationSummary:
        """
        Validate a policy.

        Checks run in a fixed order so the first violation reported is
        deterministic.

        Args:
            policy: Candidate allocation policy

        Returns:
            AllocationSummary with the reservation totals

        Raises:
            ValidationError: on the first violated invariant
        """
        supply = policy.fixed_supply.amount
        if supply <= 0:
            raise ValidationError(
                ValidationErrorCode.NON_POSITIVE_SUPPLY,
                "fixed_supply.amount must be > 0",
            )

        if policy.burn_cap is not None and policy.burn_cap.cap > supply:
            raise ValidationError(
                ValidationErrorCode.BURN_CAP_EXCEEDS_SUPPLY,
                f"burn_cap.cap {policy.burn_cap.cap} exceeds fixed supply {supply}",
            )

        if policy.time_lock is not None and policy.time_lock.duration_seconds <= 0:
            raise ValidationError(
                ValidationErrorCode.NON_POSITIVE_DURATION,
                "time_lock.duration must be > 0",
            )

        reserved = 0

        airdrop = policy.airdrop
        if airdrop is not None:
            _check_recipients(airdrop.recipients, "airdrop")
            _check_amount(airdrop.amount, "airdrop")
            reserved = _reserve(reserved, airdrop.amount, len(airdrop.recipients), "airdrop")

        vesting = policy.vesting_schedule
        if vesting is not None:
            _check_recipients(vesting.recipients, "vesting_schedule")
            _check_amount(vesting.amount, "vesting_schedule")
            if vesting.duration_seconds <= 0:
                raise ValidationError(
                    ValidationErrorCode.NON_POSITIVE_DURATION,
                    "vesting_schedule.duration must be > 0",
                )
            if vesting.cliff_seconds > vesting.duration_seconds:
                raise ValidationError(
                    ValidationErrorCode.CLIFF_EXCEEDS_DURATION,
                    f"vesting_schedule.cliff {vesting.cliff_seconds} > "
                    f"duration {vesting.duration_seconds}",
                )
            reserved = _reserve(reserved, vesting.amount, len(vesting.recipients), "vesting_schedule")

        bootstrap = policy.liquidity_bootstrap
        if bootstrap is not None:
            _check_amount(bootstrap.amount, "liquidity_bootstrap")
            reserved = _reserve(reserved, bootstrap.amount, 1, "liquidity_bootstrap")

        explicit_reserved = reserved

        sum_bps = 0
        for i, pd in enumerate(policy.percentage_distributions):
            context = f"percentage_distributions[{i}]"
            _check_recipients(pd.recipients, context)
            if pd.percentage_bps > BPS_DENOMINATOR:
                raise ValidationError(
                    ValidationErrorCode.PERCENTAGE_SUM_EXCEEDED,
                    f"{context}.percentage {pd.percentage_bps} must be <= {BPS_DENOMINATOR} bps",
                )
            sum_bps = _checked(checked_add_u128, sum_bps, pd.percentage_bps, "bps sum")

        if sum_bps > BPS_DENOMINATOR:
            raise ValidationError(
                ValidationErrorCode.PERCENTAGE_SUM_EXCEEDED,
                f"percentage_distributions sum {sum_bps} > {BPS_DENOMINATOR} bps",
            )

        # floor(supply * sum_bps / 10000)
        pct_reserved = _checked(checked_mul_u128, supply, sum_bps, "pct_reserved") // BPS_DENOMINATOR
        reserved = _checked(checked_add_u128, reserved, pct_reserved, "reserved")

        if reserved > supply:
            raise ValidationError(
                ValidationErrorCode.ALLOCATION_EXCEEDS_SUPPLY,
                f"allocations reserve {reserved} units of fixed supply {supply}",
            )

        summary = AllocationSummary(
            supply=supply,
            explicit_reserved=explicit_reserved,
            percentage_bps=sum_bps,
            percentage_reserved=pct_reserved,
        )
        logger.debug(
            f"Policy valid: reserved={summary.total_reserved} of supply={supply} "
            f"({sum_bps} bps by percentage)"
        )
        return summary


def validate_policy(policy: AllocationPolicy) -> AllocationSummary:
    """Validate a policy; see AllocationPolicyValidator.validate."""
    return AllocationPolicyValidator.validate(policy)


def _check_recipients(recipients: Sequence[str], context: str) -> None:
    """Recipients must be non-empty and pairwise distinct within one module."""
    if not recipients:
        raise ValidationError(
            ValidationErrorCode.EMPTY_RECIPIENTS,
            f"{context}.recipients empty",
        )
    seen = set()
    for account in recipients:
        if account in seen:
            raise ValidationError(
                ValidationErrorCode.DUPLICATE_RECIPIENT,
                f"{context}.recipients not unique: {account}",
            )
        seen.add(account)


def _check_amount(amount: int, context: str) -> None:
    if amount <= 0:
        raise ValidationError(
            ValidationErrorCode.NON_POSITIVE_AMOUNT,
            f"{context}.amount must be > 0",
        )


def _reserve(reserved: int, amount: int, count: int, context: str) -> int:
    total = _checked(checked_mul_u128, amount, count, f"{context} total")
    return _checked(checked_add_u128, reserved, total, "reserved")


def _checked(op, a: int, b: int, what: str) -> int:
    """Run a checked uint128 op, promoting overflow to a validation failure."""
    try:
        return op(a, b)
    except OverflowError as e:
        raise ValidationError(ValidationErrorCode.RESERVED_OVERFLOW, f"{what} overflow") from e

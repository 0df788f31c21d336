"""Allocation policy validation."""

from .validator import AllocationPolicyValidator, validate_policy

__all__ = ["AllocationPolicyValidator", "validate_policy"]

"""
Policy Module - Black Box Interface

Purpose: Resolve the policy attached to tokens minted for a caller
Interface: PolicyStore.load(), PolicyStore.get()
Hidden: Policy document format, fallback rules, reload locking
"""

from .store import DEFAULT_POLICIES, DEFAULT_POLICY, Policy, PolicyStore

__all__ = ["DEFAULT_POLICIES", "DEFAULT_POLICY", "Policy", "PolicyStore"]

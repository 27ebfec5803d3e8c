"""
Bots module - Autoplay policies.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy / FirstOptionPolicy: Simple baseline policies
- autoplay: Drive a game with a policy and audit the invariants
"""

from .policy import (
    BotPolicy,
    BotDecision,
    RandomPolicy,
    FirstOptionPolicy,
    POLICIES,
    make_policy,
    combat_commit_range,
    authority_commit_range,
    is_option_playable,
)
from .autoplay import AutoplayResult, autoplay, check_invariants

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstOptionPolicy",
    "POLICIES",
    "make_policy",
    "combat_commit_range",
    "authority_commit_range",
    "is_option_playable",
    "AutoplayResult",
    "autoplay",
    "check_invariants",
]

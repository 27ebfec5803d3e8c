"""
Bot Policy - Interface for autoplay decision-making.

A BotPolicy looks at the game state and the presented request and returns
a decision: which option to choose and, where the option needs one, a
legal combat or authority commit.
"""

from __future__ import annotations
import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..catalog.schema import Request
from ..engine_core.action import Action
from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for UI/debugging)
    """
    action: Action
    explanation: str = ""


def combat_commit_range(state: GameState, request: Request, option_index: int) -> tuple[int, int] | None:
    """
    Legal combat commits for an option, None if the option needs none.

    Returns an empty range (lo > hi) when the option needs a commit but no
    land forces are available.
    """
    if request.combat is None or option_index != 0:
        return None
    return 1, state.stats.land_forces


def authority_commit_range(state: GameState, request: Request, option_index: int) -> tuple[int, int] | None:
    """Legal authority commits for an option, None if it has no check or none is affordable."""
    option = request.get_option(option_index)
    if option is None or option.authority_check is None:
        return None
    check = option.authority_check
    hi = min(check.max_commit, math.floor(state.stats.authority))
    if check.min_commit > hi:
        return None
    return check.min_commit, hi


def is_option_playable(state: GameState, request: Request, option_index: int) -> bool:
    commit_range = combat_commit_range(state, request, option_index)
    return commit_range is None or commit_range[0] <= commit_range[1]


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot answers the presented request.
    """

    @abstractmethod
    def select(self, state: GameState, request: Request) -> BotDecision:
        """
        Select an action for the presented request.

        Args:
            state: Current game state
            request: The request returned by get_current_request(state)

        Returns:
            BotDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects options uniformly at random.

    Commits are random within their legal range; an authority check is
    attempted half of the time, otherwise the plain effect applies.

    Used for:
    - Testing
    - CLI simulations
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select(self, state: GameState, request: Request) -> BotDecision:
        playable = [i for i in range(len(request.options)) if is_option_playable(state, request, i)]
        if not playable:
            raise ValueError(f"No playable options for {request.id}")

        index = self.rng.choice(playable)
        combat_commit = None
        authority_commit = None

        combat_range = combat_commit_range(state, request, index)
        if combat_range is not None:
            combat_commit = self.rng.randint(*combat_range)

        authority_range = authority_commit_range(state, request, index)
        if authority_range is not None and self.rng.random() < 0.5:
            authority_commit = self.rng.randint(*authority_range)

        return BotDecision(
            action=Action.choose_option(index, combat_commit=combat_commit, authority_commit=authority_commit),
            explanation=f"Selected option {index} randomly",
        )


class FirstOptionPolicy(BotPolicy):
    """
    First-option policy - always selects the first playable option.

    Commits the minimum legal amount. A combat fight option with no
    available forces is skipped.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select(self, state: GameState, request: Request) -> BotDecision:
        for index in range(len(request.options)):
            if is_option_playable(state, request, index):
                break
        else:
            raise ValueError(f"No playable options for {request.id}")

        combat_range = combat_commit_range(state, request, index)
        authority_range = authority_commit_range(state, request, index)
        return BotDecision(
            action=Action.choose_option(
                index,
                combat_commit=combat_range[0] if combat_range else None,
                authority_commit=authority_range[0] if authority_range else None,
            ),
            explanation=f"Selected first playable option {index}",
        )


POLICIES = {
    "random": RandomPolicy,
    "first": FirstOptionPolicy,
}


def make_policy(name: str, seed: int | None = None) -> BotPolicy:
    """Build a policy by name; raises ValueError for unknown names."""
    if name not in POLICIES:
        raise ValueError(f"Unknown policy {name!r}, expected one of: {', '.join(POLICIES)}")
    if name == "random":
        return RandomPolicy(seed)
    return POLICIES[name]()

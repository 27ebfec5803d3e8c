"""
Autoplay - Drive a game with a bot policy and audit every transition.

Each step:
1. Resolve the presented request
2. Ask the policy for a decision
3. Apply it through the reducer
4. Check the state invariants against the previous state

Used by the CLI simulator and the property tests.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from ..catalog.schema import NEED_KEYS
from ..engine_core.presentable import CatalogRequest, parse_request_id
from ..engine_core.reducer import Reducer, get_current_request
from ..engine_core.state import GameState
from .policy import BotPolicy

logger = logging.getLogger(__name__)


@dataclass
class AutoplayResult:
    """Outcome of an autoplay run."""
    final_state: GameState
    steps_taken: int = 0
    rejected_actions: int = 0
    violations: list[str] = field(default_factory=list)
    decisions: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


def check_invariants(previous: GameState, current: GameState) -> list[str]:
    """
    Invariants that hold across any single transition.

    - stats stay inside their domains
    - available land forces are never negative
    - combat screens never increase the force total
    - building counts never decrease
    """
    violations = []
    if not current.stats.is_within_domain():
        violations.append(f"tick {current.tick}: stats out of domain {current.stats}")

    if current.stats.land_forces < 0:
        violations.append(f"tick {current.tick}: negative land forces {current.stats.land_forces}")

    answered = parse_request_id(previous.current_request_id) if previous.current_request_id else None
    if answered is not None and not isinstance(answered, CatalogRequest):
        if current.total_land_forces() > previous.total_land_forces():
            violations.append(
                f"tick {current.tick}: force total increased during combat "
                f"{previous.total_land_forces()} -> {current.total_land_forces()}"
            )

    for need in NEED_KEYS:
        if current.tracking_for(need).building_count < previous.tracking_for(need).building_count:
            violations.append(f"tick {current.tick}: building count for {need} decreased")

    if current.tick < previous.tick:
        violations.append(f"tick went backwards {previous.tick} -> {current.tick}")

    return violations


def autoplay(reducer: Reducer, state: GameState, policy: BotPolicy, max_steps: int) -> AutoplayResult:
    """Play up to max_steps decisions, stopping early on game over."""
    result = AutoplayResult(final_state=state)

    for _ in range(max_steps):
        if state.game_over:
            break

        request = get_current_request(state, reducer.catalog)
        if request is None:
            result.violations.append(f"tick {state.tick}: no presentable request {state.current_request_id}")
            break

        decision = policy.select(state, request)
        outcome = reducer.apply(state, decision.action)
        result.steps_taken += 1
        result.decisions.append(f"{state.tick}:{request.id}:{decision.action.payload.option_index}")

        if not outcome.success:
            result.rejected_actions += 1
            logger.warning("Policy %s action rejected: %s", policy.get_name(), outcome.error)
            break

        result.violations.extend(check_invariants(state, outcome.new_state))
        state = outcome.new_state

    result.final_state = state
    return result

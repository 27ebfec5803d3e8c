"""
Pytest fixtures for Kaledrun tests.
"""

import pytest

from ..catalog import Catalog, default_catalog
from ..catalog.needs import NEED_DEFINITIONS
from ..catalog.schema import (
    AuthorityCheck,
    CombatSpec,
    Effect,
    FollowUp,
    Option,
    Request,
    WeightedCandidate,
)
from ..engine_core.reducer import Reducer
from ..engine_core.rng import GameRandom
from ..engine_core.state import GameState


class ScriptedRandom(GameRandom):
    """GameRandom that replays fixed draws first, then continues seeded."""

    def __init__(self, values=(), seed=0):
        super().__init__(seed)
        self.values = list(values)
        self.draws = 0

    def next(self) -> float:
        self.draws += 1
        if self.values:
            return self.values.pop(0)
        return super().next()


def _screen(request_id, option_text="Continue"):
    return Request(
        id=request_id,
        title=request_id.replace("_", " ").title(),
        text=f"{request_id} screen.",
        options=(Option(option_text),),
        can_trigger_randomly=False,
        advances_tick=False,
    )


def _event(request_id, *options, **kwargs):
    return Request(
        id=request_id,
        title=request_id.replace("_", " ").title(),
        text=f"Something about {request_id.lower()}.",
        options=tuple(options),
        **kwargs,
    )


def make_village_catalog() -> Catalog:
    """
    Small catalog with one request per mechanic.

    Only PAY_TEN and CALM are in the unconditional random pool, so the
    random tier is predictable at starting stats.
    """
    return Catalog(
        need_requests=(
            _event(
                "NEED_MARKETPLACE",
                Option("BUILD", Effect(gold=-15, marketplace=True)),
                Option("DECLINE"),
            ),
        ),
        info_requests=(
            _screen("INFO_NEED_MARKETPLACE"),
            _screen("INFO_OK"),
            _screen("INFO_BAD"),
        ),
        event_requests=(
            _event("PAY_TEN", Option("Pay", Effect(gold=-10)), Option("Refuse", Effect(satisfaction=-5))),
            _event("CALM", Option("Rest")),
            _event("MARKET_DAY", Option("Trade", Effect(gold=5)), requires=("need:marketplace",)),
            _event("NOBLE_AUDIENCE", Option("Receive", Effect(satisfaction=2)), authority_min=50),
            _event(
                "SKIRMISH",
                Option("Fight"),
                Option("Flee", Effect(satisfaction=-2)),
                can_trigger_randomly=False,
                combat=CombatSpec(
                    enemy_forces=2,
                    prep_delay_min_ticks=1,
                    prep_delay_max_ticks=1,
                    on_win=Effect(gold=5),
                    on_lose=Effect(satisfaction=-5),
                ),
            ),
            _event(
                "COUNCIL",
                Option(
                    "Persuade",
                    authority_check=AuthorityCheck(
                        min_commit=0, max_commit=50, threshold=0, on_success=Effect(satisfaction=5)
                    ),
                ),
                Option("Ignore"),
                can_trigger_randomly=False,
            ),
            _event(
                "GAMBLE",
                Option(
                    "Wager",
                    authority_check=AuthorityCheck(
                        min_commit=0,
                        max_commit=20,
                        threshold=10,
                        on_success=Effect(gold=10),
                        on_failure=Effect(gold=-5),
                        refund_on_success_percent=50,
                        extra_loss_on_failure=3,
                        success_feedback_request_id="INFO_OK",
                        failure_feedback_request_id="INFO_BAD",
                    ),
                ),
                Option("Pass"),
                can_trigger_randomly=False,
            ),
            _event("RUIN", Option("Spend everything", Effect(gold=-100)), can_trigger_randomly=False),
            _event("SPARKS", Option("Light the pyres", Effect(fire_risk=10, health=4)), can_trigger_randomly=False),
            _event(
                "FOLLOW_SOURCE",
                Option("Send word"),
                Option("Stay quiet"),
                can_trigger_randomly=False,
                follow_ups=(
                    FollowUp(
                        trigger_on_option_index=0,
                        delay_min_ticks=0,
                        delay_max_ticks=0,
                        candidates=(WeightedCandidate("FOLLOW_TARGET", 1),),
                    ),
                ),
            ),
            _event("FOLLOW_TARGET", Option("Receive the reply"), can_trigger_randomly=False),
            _event("EVT_CRISIS_FIRE", Option("Fight the fire", Effect(fire_risk=-30, gold=-5))),
            _event("EVT_CRISIS_DISEASE", Option("Call the healers", Effect(health=20, gold=-5))),
            _event("EVT_CRISIS_UNREST", Option("Hold a feast", Effect(satisfaction=20, gold=-5))),
        ),
        need_definitions=NEED_DEFINITIONS[:1],
    )


@pytest.fixture
def catalog() -> Catalog:
    """The built-in catalog."""
    return default_catalog()


@pytest.fixture
def village_catalog() -> Catalog:
    """Small synthetic catalog for exact assertions."""
    return make_village_catalog()


@pytest.fixture
def rng() -> GameRandom:
    """Seeded random source."""
    return GameRandom(42)


@pytest.fixture
def reducer(catalog: Catalog, rng: GameRandom) -> Reducer:
    """Reducer over the built-in catalog."""
    return Reducer(catalog=catalog, rng=rng)


@pytest.fixture
def village_reducer(village_catalog: Catalog) -> Reducer:
    """Reducer over the synthetic catalog."""
    return Reducer(catalog=village_catalog, rng=GameRandom(7))


@pytest.fixture
def start_state() -> GameState:
    """Starting stats at tick 0 with no request picked."""
    return GameState()


def presenting(request_id: str, **kwargs) -> GameState:
    """A starting state presenting the given request."""
    return GameState(current_request_id=request_id, **kwargs)

"""
Kaledrun - Village Management Decision Engine

A deterministic, turn-based engine for a settlement management game.
A stream of requests is presented to a single decision-maker, whose
choices mutate the village statistics and trigger cascading consequences.
The engine provides:
- An immutable content catalog
- A pure reducer (state, action) -> new state
- Deferred processes: combats, authority checks, follow-ups, chains
- A priority-based request picker
"""

__version__ = "0.1.0"

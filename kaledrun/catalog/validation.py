"""
Catalog Validation - Consistency checks for request tables.

Validates that:
1. Request ids are unique and every request has 1-2 options
2. References are valid (follow-up candidates, feedback ids, boost targets)
3. Delays, commit ranges and combat descriptors are well-formed
4. Chains have exactly one start and at least one end
5. Every need has its need request and info request; crisis requests exist
6. The random pool can never be exhausted
"""

from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .schema import AuthorityCheck, ChainRole, CombatSpec, FollowUp, Request, RequestCategory

if TYPE_CHECKING:
    from . import Catalog

MAX_OPTIONS = 2


class CatalogValidationError(Exception):
    """Raised when catalog validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Catalog validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_catalog(catalog: Catalog, raise_on_error: bool = False) -> ValidationResult:
    """
    Validate a complete catalog.

    Returns ValidationResult with errors and warnings.
    Raises CatalogValidationError if raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []

    for request_id in catalog.duplicate_ids:
        errors.append(f"Duplicate request id '{request_id}'")

    known_ids = {r.id for r in catalog.all_requests}
    scheduled_ids: set[str] = set()

    for request in catalog.all_requests:
        errors.extend(_validate_request(request, known_ids, scheduled_ids))

    errors.extend(_validate_chains(catalog.event_requests))

    # Needs
    for definition in catalog.need_definitions:
        need_request = catalog.get(definition.request_id)
        if need_request is None:
            errors.append(f"Need '{definition.need}' has no request '{definition.request_id}'")
        elif need_request.category != RequestCategory.NEED:
            errors.append(f"Need request '{definition.request_id}' is not in the need table")
        if catalog.get(definition.info_request_id) is None:
            errors.append(
                f"Need '{definition.need}' has no info request '{definition.info_request_id}'"
            )
        scheduled_ids.add(definition.info_request_id)
        if definition.unlock_threshold < 0 or definition.population_per_building < 1:
            errors.append(f"Need '{definition.need}' has invalid threshold configuration")

    # Crises
    for crisis_id in catalog.crisis_ids:
        if catalog.category_of(crisis_id) != RequestCategory.EVENT:
            errors.append(f"Crisis request '{crisis_id}' is missing from the event table")

    # Random pool completeness
    crisis_ids = set(catalog.crisis_ids)
    always_eligible = [
        r for r in catalog.event_requests
        if r.id not in crisis_ids
        and r.can_trigger_randomly
        and not r.requires
        and r.max_triggers is None
        and r.chain_role != ChainRole.START
        and r.authority_min is None
        and r.authority_max is None
    ]
    if len(always_eligible) < 2:
        errors.append(
            "Random event pool can be exhausted: need at least two unconditional "
            "events (no requires, maxTriggers, chain start or authority gating)"
        )

    # Warnings for unreachable content
    for request in catalog.event_requests:
        if request.id in crisis_ids or request.can_trigger_randomly:
            continue
        if request.id not in scheduled_ids:
            warnings.append(f"Event '{request.id}' cannot trigger randomly and is never scheduled")

    if not catalog.event_requests:
        errors.append("Catalog has no event requests")

    result = ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
    if raise_on_error and errors:
        raise CatalogValidationError(errors)
    return result


def _validate_request(request: Request, known_ids: set[str], scheduled_ids: set[str]) -> list[str]:
    """Validate a single request and record the ids it can schedule."""
    errors = []
    if not request.id:
        errors.append("Request has empty id")
    if "::" in request.id:
        errors.append(f"Request id '{request.id}' uses the reserved '::' separator")
    if not 1 <= len(request.options) <= MAX_OPTIONS:
        errors.append(f"Request '{request.id}' must have 1-{MAX_OPTIONS} options")
    if request.max_triggers is not None and request.max_triggers < 1:
        errors.append(f"Request '{request.id}' has maxTriggers < 1")
    if (
        request.authority_min is not None
        and request.authority_max is not None
        and request.authority_min > request.authority_max
    ):
        errors.append(f"Request '{request.id}' has authority_min > authority_max")

    for follow_up in request.follow_ups:
        errors.extend(_validate_follow_up(request.id, follow_up, known_ids, scheduled_ids))
        if not 0 <= follow_up.trigger_on_option_index < len(request.options):
            errors.append(
                f"Request '{request.id}' has a follow-up for missing option "
                f"{follow_up.trigger_on_option_index}"
            )

    if request.combat:
        errors.extend(_validate_combat(request.id, request.combat, known_ids, scheduled_ids))

    for index, option in enumerate(request.options):
        if option.authority_check:
            errors.extend(
                _validate_authority_check(request, index, option.authority_check, known_ids, scheduled_ids)
            )

    return errors


def _validate_follow_up(
    request_id: str, follow_up: FollowUp, known_ids: set[str], scheduled_ids: set[str]
) -> list[str]:
    errors = []
    if not 0 <= follow_up.delay_min_ticks <= follow_up.delay_max_ticks:
        errors.append(f"Request '{request_id}' has a follow-up with invalid delay range")
    if not follow_up.candidates:
        errors.append(f"Request '{request_id}' has a follow-up without candidates")
    for candidate in follow_up.candidates:
        if candidate.request_id not in known_ids:
            errors.append(
                f"Request '{request_id}' follow-up references unknown request '{candidate.request_id}'"
            )
        if candidate.weight < 0:
            errors.append(f"Request '{request_id}' follow-up candidate has negative weight")
        scheduled_ids.add(candidate.request_id)
    return errors


def _validate_combat(
    request_id: str, combat: CombatSpec, known_ids: set[str], scheduled_ids: set[str]
) -> list[str]:
    errors = []
    if combat.enemy_forces < 1:
        errors.append(f"Combat in '{request_id}' must have enemy_forces >= 1")
    if not 0 <= combat.prep_delay_min_ticks <= combat.prep_delay_max_ticks:
        errors.append(f"Combat in '{request_id}' has invalid prep delay range")
    for effect in (combat.on_win, combat.on_lose):
        if effect is not None and (effect.land_forces or 0) > 0:
            errors.append(f"Combat outcome in '{request_id}' must not grant land forces")
    for follow_up in combat.follow_ups_on_win + combat.follow_ups_on_lose:
        errors.extend(_validate_follow_up(request_id, follow_up, known_ids, scheduled_ids))
    return errors


def _validate_authority_check(
    request: Request,
    option_index: int,
    check: AuthorityCheck,
    known_ids: set[str],
    scheduled_ids: set[str],
) -> list[str]:
    errors = []
    where = f"Authority check on '{request.id}' option {option_index}"
    if not 0 <= check.min_commit <= check.max_commit:
        errors.append(f"{where} has invalid commit range")
    if check.threshold < 0:
        errors.append(f"{where} has negative threshold")
    if not 0 <= check.refund_on_success_percent <= 100:
        errors.append(f"{where} has refund percent outside [0, 100]")
    if check.extra_loss_on_failure < 0:
        errors.append(f"{where} has negative extra loss")

    for feedback_id in (check.success_feedback_request_id, check.failure_feedback_request_id):
        if feedback_id is None:
            continue
        if feedback_id not in known_ids:
            errors.append(f"{where} references unknown feedback request '{feedback_id}'")
        scheduled_ids.add(feedback_id)

    follow_up_targets = {
        c.request_id
        for f in request.follow_ups_for(option_index)
        for c in f.candidates
    }
    for boost in check.follow_up_boosts:
        if boost.target_request_id not in follow_up_targets:
            errors.append(
                f"{where} boosts '{boost.target_request_id}' which is not one of its follow-ups"
            )
        if boost.steps is not None and boost.steps < 1:
            errors.append(f"{where} has a stepped boost with steps < 1")
    return errors


def _validate_chains(event_requests: tuple[Request, ...]) -> list[str]:
    errors = []
    roles: dict[str, list[ChainRole]] = defaultdict(list)
    for request in event_requests:
        if request.chain_id is None:
            if request.chain_role is not None:
                errors.append(f"Request '{request.id}' has a chain role without a chain id")
            continue
        if request.chain_role is None:
            errors.append(f"Request '{request.id}' is in chain '{request.chain_id}' without a role")
            continue
        roles[request.chain_id].append(request.chain_role)

    for chain_id, chain_roles in roles.items():
        starts = chain_roles.count(ChainRole.START)
        if starts != 1:
            errors.append(f"Chain '{chain_id}' must have exactly one start, found {starts}")
        if ChainRole.END not in chain_roles:
            errors.append(f"Chain '{chain_id}' has no end request")
    return errors

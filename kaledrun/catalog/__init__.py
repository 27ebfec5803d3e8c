"""
Catalog - The immutable content the engine consumes.

The catalog holds three tables (need, info, event requests) and a
precomputed id map. It is read-only: the reducer and picker only look
things up in it.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace

from .schema import (
    STAT_KEYS,
    NEED_KEYS,
    CRISIS_IDS,
    RequestCategory,
    ChainRole,
    BoostType,
    Effect,
    WeightedCandidate,
    FollowUp,
    AuthorityFollowUpBoost,
    AuthorityCheck,
    CombatSpec,
    Option,
    Request,
)
from .needs import NeedDefinition, NEED_DEFINITIONS
from .validation import ValidationResult, CatalogValidationError, validate_catalog

TITLE_FALLBACK_LENGTH = 50


@dataclass
class Catalog:
    """
    Request tables plus an id -> Request lookup.

    Each request's category is re-tagged from the table it is registered in.
    """
    need_requests: tuple[Request, ...] = ()
    info_requests: tuple[Request, ...] = ()
    event_requests: tuple[Request, ...] = ()
    need_definitions: tuple[NeedDefinition, ...] = NEED_DEFINITIONS
    crisis_ids: tuple[str, ...] = CRISIS_IDS

    _by_id: dict[str, Request] = field(default_factory=dict, init=False, repr=False)
    _need_by_request: dict[str, str] = field(default_factory=dict, init=False, repr=False)
    duplicate_ids: list[str] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        self.need_requests = self._tag(self.need_requests, RequestCategory.NEED)
        self.info_requests = self._tag(self.info_requests, RequestCategory.INFO)
        self.event_requests = self._tag(self.event_requests, RequestCategory.EVENT)

        for request in self.all_requests:
            if request.id in self._by_id:
                self.duplicate_ids.append(request.id)
                continue
            self._by_id[request.id] = request

        self._need_by_request = {d.request_id: d.need for d in self.need_definitions}

    @staticmethod
    def _tag(requests, category: RequestCategory) -> tuple[Request, ...]:
        return tuple(
            r if r.category == category else replace(r, category=category)
            for r in requests
        )

    @property
    def all_requests(self) -> tuple[Request, ...]:
        return self.need_requests + self.info_requests + self.event_requests

    def get(self, request_id: str | None) -> Request | None:
        """Get a request by id, None if unknown."""
        if request_id is None:
            return None
        return self._by_id.get(request_id)

    def __contains__(self, request_id: str) -> bool:
        return request_id in self._by_id

    def category_of(self, request_id: str) -> RequestCategory | None:
        request = self.get(request_id)
        return request.category if request else None

    def title_of(self, request_id: str) -> str:
        """
        Display title for a request id.

        Falls back to the first sentence of the text (truncated), then the id.
        """
        request = self.get(request_id)
        if request is None:
            return request_id
        if request.title:
            return request.title
        if request.text:
            sentence = request.text.split(".")[0].strip()
            if len(sentence) > TITLE_FALLBACK_LENGTH:
                sentence = sentence[:TITLE_FALLBACK_LENGTH].rstrip() + "..."
            if sentence:
                return sentence
        return request_id

    def need_definition(self, need: str) -> NeedDefinition | None:
        for definition in self.need_definitions:
            if definition.need == need:
                return definition
        return None

    def need_request_for(self, need: str) -> Request | None:
        definition = self.need_definition(need)
        return self.get(definition.request_id) if definition else None

    def need_for_request(self, request_id: str) -> str | None:
        """Which need a need-request fulfills, None for other requests."""
        return self._need_by_request.get(request_id)

    def event_ids(self) -> list[str]:
        return [r.id for r in self.event_requests]


def default_catalog() -> Catalog:
    """The built-in content tables."""
    from .requests import NEED_REQUESTS, INFO_REQUESTS, EVENT_REQUESTS

    return Catalog(
        need_requests=NEED_REQUESTS,
        info_requests=INFO_REQUESTS,
        event_requests=EVENT_REQUESTS,
    )


__all__ = [
    "STAT_KEYS",
    "NEED_KEYS",
    "CRISIS_IDS",
    "RequestCategory",
    "ChainRole",
    "BoostType",
    "Effect",
    "WeightedCandidate",
    "FollowUp",
    "AuthorityFollowUpBoost",
    "AuthorityCheck",
    "CombatSpec",
    "Option",
    "Request",
    "NeedDefinition",
    "NEED_DEFINITIONS",
    "Catalog",
    "default_catalog",
    "ValidationResult",
    "CatalogValidationError",
    "validate_catalog",
]

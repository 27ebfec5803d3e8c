"""
Tests for the catalog and its validation.

Tests:
- Built-in catalog is valid
- Category tagging and lookups
- Validation errors for malformed content
"""

from dataclasses import replace

import pytest

from ..catalog import Catalog, CatalogValidationError, validate_catalog
from ..catalog.schema import (
    ChainRole,
    CombatSpec,
    Effect,
    FollowUp,
    Option,
    Request,
    RequestCategory,
    WeightedCandidate,
)


def _event(request_id, **kwargs):
    options = kwargs.pop("options", (Option("Ok"),))
    return Request(id=request_id, title=request_id, text=".", options=options, **kwargs)


def _catalog(*extra):
    """Two unconditional events plus extras, no needs or crises."""
    return Catalog(
        event_requests=(_event("A"), _event("B")) + extra,
        need_definitions=(),
        crisis_ids=(),
    )


class TestBuiltInCatalog:
    """Tests for the built-in content."""

    def test_is_valid(self, catalog):
        """The built-in catalog validates without errors."""
        result = validate_catalog(catalog)
        assert result.valid, result.errors

    def test_tables_tagged(self, catalog):
        """Requests carry the category of their table."""
        assert catalog.category_of("NEED_MARKETPLACE") == RequestCategory.NEED
        assert catalog.category_of("INFO_NEED_MARKETPLACE") == RequestCategory.INFO
        assert catalog.category_of("EVT_CRISIS_FIRE") == RequestCategory.EVENT

    def test_need_lookups(self, catalog):
        """Need requests map back to their need."""
        assert catalog.need_for_request("NEED_BREAD") == "bread"
        assert catalog.need_for_request("EVT_CRISIS_FIRE") is None
        assert catalog.need_request_for("well").id == "NEED_WELL"

    def test_synthetic_catalog_valid(self, village_catalog):
        """The small test catalog is also valid."""
        assert validate_catalog(village_catalog).valid


class TestTitles:
    """Tests for display titles."""

    def test_title(self):
        """Titles are used when present."""
        catalog = _catalog(replace(_event("C"), title="Named"))
        assert catalog.title_of("C") == "Named"

    def test_text_fallback(self):
        """Without a title the first sentence of the text is used."""
        catalog = _catalog(replace(_event("C"), title="", text="Bandits on the road. They want gold."))
        assert catalog.title_of("C") == "Bandits on the road"

    def test_unknown(self):
        """Unknown ids fall back to the id."""
        assert _catalog().title_of("MISSING") == "MISSING"


class TestValidationErrors:
    """Tests for validate_catalog errors."""

    def test_minimal_valid(self):
        """Two unconditional events are enough."""
        assert validate_catalog(_catalog()).valid

    def test_duplicate_ids(self):
        """Duplicate ids are reported."""
        result = validate_catalog(_catalog(_event("A")))
        assert any("Duplicate" in e for e in result.errors)

    def test_unknown_follow_up(self):
        """Follow-ups must reference known requests."""
        follow_up = FollowUp(0, 0, 1, (WeightedCandidate("NOWHERE", 1),))
        result = validate_catalog(_catalog(_event("C", follow_ups=(follow_up,))))
        assert any("NOWHERE" in e for e in result.errors)

    def test_bad_delay_range(self):
        """Delay ranges must be ordered."""
        follow_up = FollowUp(0, 3, 1, (WeightedCandidate("A", 1),))
        result = validate_catalog(_catalog(_event("C", follow_ups=(follow_up,))))
        assert not result.valid

    def test_reserved_separator(self):
        """Ids may not use the combat namespace separator."""
        result = validate_catalog(_catalog(_event("BAD::ID")))
        assert any("reserved" in e for e in result.errors)

    def test_too_many_options(self):
        """Requests have one or two options."""
        result = validate_catalog(_catalog(_event("C", options=(Option("1"), Option("2"), Option("3")))))
        assert not result.valid

    def test_combat_cannot_grant_forces(self):
        """Combat outcomes may not add land forces."""
        combat = CombatSpec(enemy_forces=2, prep_delay_min_ticks=0, prep_delay_max_ticks=1, on_win=Effect(land_forces=2))
        result = validate_catalog(_catalog(_event("C", combat=combat)))
        assert any("land forces" in e for e in result.errors)

    def test_chain_without_end(self):
        """Chains need one start and an end."""
        start = _event("C", chain_id="c", chain_role=ChainRole.START)
        result = validate_catalog(_catalog(start))
        assert any("no end" in e for e in result.errors)

    def test_exhaustible_pool(self):
        """A random pool that can run dry is an error."""
        catalog = Catalog(event_requests=(_event("A"),), need_definitions=(), crisis_ids=())
        result = validate_catalog(catalog)
        assert any("exhausted" in e for e in result.errors)

    def test_missing_crisis(self):
        """Configured crisis ids must exist."""
        catalog = Catalog(event_requests=(_event("A"), _event("B")), need_definitions=())
        result = validate_catalog(catalog)
        assert any("EVT_CRISIS_FIRE" in e for e in result.errors)

    def test_unreachable_warning(self):
        """Events that can never appear produce a warning."""
        result = validate_catalog(_catalog(_event("C", can_trigger_randomly=False)))
        assert result.valid
        assert any("'C'" in w for w in result.warnings)

    def test_raise_on_error(self):
        """raise_on_error turns errors into an exception."""
        with pytest.raises(CatalogValidationError) as exc_info:
            validate_catalog(_catalog(_event("A")), raise_on_error=True)
        assert exc_info.value.errors

"""
Tests for the stat taxonomy.
"""

import pytest

from statboard.data_models.stat_kind import StatKind
from statboard.utils.stats_exceptions import UnknownStatKind, StatsException


class TestStatKind:
    """Tests for StatKind lookup."""
    
    def test_resolve_exact_identifier(self):
        assert StatKind.resolve("KILLS") is StatKind.KILLS
    
    @pytest.mark.parametrize("identifier", ["kills", "Kills", "  kIlLs "])
    def test_resolve_is_case_insensitive(self, identifier):
        assert StatKind.resolve(identifier) is StatKind.KILLS
    
    def test_resolve_passes_through_kind(self):
        assert StatKind.resolve(StatKind.DEATHS) is StatKind.DEATHS
    
    def test_unknown_identifier_raises_typed_error(self):
        with pytest.raises(UnknownStatKind) as exc_info:
            StatKind.resolve("HEADSHOTS")
        
        assert exc_info.value.identifier == "HEADSHOTS"
        assert isinstance(exc_info.value, StatsException)
        assert "HEADSHOTS" in exc_info.value.user_message
    
    def test_non_string_identifier_raises(self):
        with pytest.raises(UnknownStatKind):
            StatKind.resolve(None)
    
    def test_identifiers_are_unique_ignoring_case(self):
        identifiers = [kind.identifier.upper() for kind in StatKind]
        assert len(identifiers) == len(set(identifiers))
    
    def test_every_kind_has_display_key(self):
        for kind in StatKind:
            assert kind.display_key
            assert str(kind) == kind.identifier

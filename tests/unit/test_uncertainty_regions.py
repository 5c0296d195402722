"""
Unit tests for uncertainty region detection.
"""

from citecheck.models import (
    CitationRelation,
    ExplorationFeatures,
    RegionCause,
    RelationType,
    ValidatorConfig,
)
from citecheck.synthesis import detect_uncertainty_regions
from citecheck.validation import CitationValidator
from tests.fixtures.records import (
    make_incomplete_book,
    make_journal_article,
    make_journal_articles,
    make_valid_book,
)


def _regions(records, config, relations=None):
    results = CitationValidator(config).validate_batch(records)
    return {region.id: region for region in detect_uncertainty_regions(results, config, relations)}


def test_clean_batch_has_no_regions(default_config):
    assert _regions(make_journal_articles(3), default_config) == {}


def test_no_persistent_identifier_region(default_config):
    regions = _regions([make_valid_book("a", isbn=None), make_valid_book("b")], default_config)
    region = regions["no-persistent-identifiers"]
    assert region.cause == RegionCause.NO_PERSISTENT_IDENTIFIER
    assert region.record_ids == ("a",)
    assert region.uncertainty_level == 0.6
    assert region.suggested_exploration.use_mystery_clustering


def test_temporal_region_for_implausible_year(default_config):
    """Test that date 0380 lands in the temporal-ambiguity region."""
    regions = _regions([make_journal_article("old", date="0380")], default_config)
    region = regions["temporal-ambiguity"]
    assert region.record_ids == ("old",)
    assert region.uncertainty_level == 0.5


def test_temporal_region_for_missing_date(default_config, incomplete_book):
    regions = _regions([incomplete_book], default_config)
    assert regions["temporal-ambiguity"].record_ids == (incomplete_book.id,)


def test_low_certainty_region():
    """Test the low-certainty region uses the configured threshold."""
    config = ValidatorConfig(low_certainty_threshold=0.65, exploration_threshold=0.7)
    regions = _regions([make_incomplete_book("weak"), make_valid_book("strong")], config)
    assert regions["low-certainty"].record_ids == ("weak",)
    assert regions["low-certainty"].uncertainty_level == 0.8


def test_one_record_in_several_regions(default_config, incomplete_book):
    regions = _regions([incomplete_book], default_config)
    assert incomplete_book.id in regions["no-persistent-identifiers"].record_ids
    assert incomplete_book.id in regions["temporal-ambiguity"].record_ids


def test_contradictory_relations_region(default_config):
    relations = [
        CitationRelation(
            relation_type=RelationType.CONTRADICTS,
            source="article-1",
            target="article-2",
            is_contradiction=True,
        ),
        CitationRelation(relation_type=RelationType.CITES, source="article-2", target="article-3"),
    ]
    regions = _regions(make_journal_articles(3), default_config, relations)
    region = regions["contradictory-relations"]
    assert region.record_ids == ("article-1", "article-2")
    assert region.uncertainty_level == 0.9


def test_region_order(default_config, incomplete_book):
    results = CitationValidator(default_config).validate_batch([incomplete_book])
    config = ValidatorConfig(low_certainty_threshold=0.65)
    ids = [region.id for region in detect_uncertainty_regions(results, config)]
    assert ids == ["no-persistent-identifiers", "temporal-ambiguity", "low-certainty"]


def test_suggestions_masked_by_enabled_features():
    """Test that disabled features are never suggested."""
    config = ValidatorConfig(exploration_features=ExplorationFeatures(use_mood_scoring=True))
    regions = _regions([make_journal_article("old", date="0380")], config)
    suggested = regions["temporal-ambiguity"].suggested_exploration
    assert suggested.use_mood_scoring
    assert not suggested.use_fog_trail_visualization

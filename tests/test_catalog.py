# tests/test_catalog.py
from devsecops_tutor import catalog


def test_catalog_shape():
    assert catalog.TOTAL_TOPICS == 25
    assert len(set(catalog.ALL_TOPICS)) == 25
    assert list(catalog.TOPICS) == list(catalog.TIER_LABELS)
    assert all(len(topics) == 5 for topics in catalog.TOPICS.values())


def test_default_learning_rate_is_offered():
    assert catalog.DEFAULT_LEARNING_RATE in catalog.LEARNING_RATES


def test_tier_of():
    assert catalog.tier_of("Policy as Code (PaC)") == "advanced"
    assert catalog.tier_of("Nope") is None


def test_filter_topics_case_insensitive():
    result = catalog.filter_topics("ai ")
    assert "ai_in_devsecops" in result
    result = catalog.filter_topics("sast")
    assert result == {"intermediate": ["Static Application Security Testing (SAST)"]}


def test_filter_topics_blank_returns_everything():
    result = catalog.filter_topics("  ")
    assert sum(len(t) for t in result.values()) == catalog.TOTAL_TOPICS


def test_filter_topics_no_match():
    assert catalog.filter_topics("kubernetes operator") == {}

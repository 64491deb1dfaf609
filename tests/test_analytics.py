"""
Tests for the analytics aggregator.
"""

import pytest

from resumatch.analytics import aggregate, is_fresh_graduate, similarity_bucket
from resumatch.models import AnalyticsSummary, ScoredCandidate, TopCandidate


class TestEmptyInput:
    """aggregate([]) is an all-zero summary."""

    def test_empty_summary(self):
        summary = aggregate([])

        assert summary.total_count == 0
        assert summary.fresh_graduate_count == 0
        assert summary.top_candidates == ()
        assert summary.unique_university_count == 0
        assert summary.mean_similarity == 0
        assert dict(summary.experience_distribution) == {}
        assert dict(summary.university_type_distribution) == {}
        assert dict(summary.similarity_distribution) == {}

    def test_empty_summary_equals_default(self):
        assert aggregate(iter([])) == AnalyticsSummary()


class TestAggregate:
    """Test summary fields over a populated set."""

    @pytest.fixture
    def candidates(self, candidate_factory):
        return [
            candidate_factory("a", 0.45, name="Ann", university="MIT", experience="Fresh Graduate"),
            candidate_factory("b", 0.82, name="Ben", university="mit", university_type="National",
                              experience="3 years"),
            candidate_factory("c", 0.82, name="Cat", university="Unknown", experience="Recent graduate"),
            candidate_factory("d", 0.10, name="Dan", university="MIT", university_type="Unknown",
                              experience="3 years"),
        ]

    def test_counts(self, candidates):
        summary = aggregate(candidates)

        assert summary.total_count == 4
        assert summary.fresh_graduate_count == 2

    def test_unique_universities_case_sensitive(self, candidates):
        # "MIT", "mit", "Unknown"
        assert aggregate(candidates).unique_university_count == 3

    def test_mean_similarity_rounded(self, candidates):
        # (0.45 + 0.82 + 0.82 + 0.10) / 4 = 0.5475
        assert aggregate(candidates).mean_similarity == 0.55

    def test_top_two_with_stable_ties(self, candidates):
        summary = aggregate(candidates)

        assert summary.top_candidates == (
            TopCandidate(name="Ben", similarity=0.82, university="mit"),
            TopCandidate(name="Cat", similarity=0.82, university="Unknown"),
        )

    def test_top_n_parameter(self, candidates):
        names = [c.name for c in aggregate(candidates, top_n=3).top_candidates]
        assert names == ["Ben", "Cat", "Ann"]

    def test_distributions(self, candidates):
        summary = aggregate(candidates)

        assert dict(summary.experience_distribution) == {
            "Fresh Graduate": 1,
            "3 years": 2,
            "Recent graduate": 1,
        }
        assert dict(summary.university_type_distribution) == {
            "International": 2,
            "National": 1,
            "Unknown": 1,
        }
        assert dict(summary.similarity_distribution) == {0.4: 1, 0.8: 2, 0.1: 1}

    def test_missing_labels_counted_as_unknown(self):
        candidates = [
            ScoredCandidate("x", 0.3, 0, 0.3, name="X", university=None, university_type="",
                            experience_label=None),
            ScoredCandidate("y", 0.3, 0, 0.3, name="Y", university="Unknown", university_type=None,
                            experience_label="  "),
        ]
        summary = aggregate(candidates)

        assert summary.unique_university_count == 1
        assert dict(summary.university_type_distribution) == {"Unknown": 2}
        assert dict(summary.experience_distribution) == {"Unknown": 2}

    def test_distributions_are_read_only(self, candidates):
        summary = aggregate(candidates)
        with pytest.raises(TypeError):
            summary.experience_distribution["new"] = 1

    def test_pure_function(self, candidates):
        assert aggregate(candidates) == aggregate(list(candidates))

    def test_to_dict_uses_bucket_labels(self, candidates):
        data = aggregate(candidates).to_dict()

        assert data["similarity_distribution"] == {"0.4": 1, "0.8": 2, "0.1": 1}
        assert data["top_candidates"][0] == {"name": "Ben", "similarity": 0.82, "university": "mit"}


class TestHelpers:
    """Test bucket and fresh-graduate helpers."""

    @pytest.mark.parametrize("score,bucket", [
        (0.0, 0.0), (0.09, 0.0), (0.1, 0.1), (0.3, 0.3), (0.47, 0.4),
        (0.7, 0.7), (0.99, 0.9), (1.0, 1.0),
    ])
    def test_similarity_bucket(self, score, bucket):
        assert similarity_bucket(score) == bucket

    @pytest.mark.parametrize("label,expected", [
        ("Fresh Graduate", True),
        ("FRESHER", True),
        ("Postgraduate researcher", True),
        ("5 years", False),
        ("Unknown", False),
        ("", False),
    ])
    def test_is_fresh_graduate(self, label, expected):
        assert is_fresh_graduate(label) is expected

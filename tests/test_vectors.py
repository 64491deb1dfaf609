"""
Tests for vocabulary and frequency vector construction.
"""

from resumatch.normalize import normalize
from resumatch.vectors import build_vectors, build_vocabulary, frequency_vector


class TestBuildVectors:
    """Test shared-vocabulary vectors."""

    def test_first_seen_order_and_counts(self):
        vocab, a, b = build_vectors(["python", "sql", "python"], ["sql", "docker"])

        assert vocab == ["python", "sql", "docker"]
        assert a == [2, 1, 0]
        assert b == [0, 1, 1]

    def test_lengths_always_match(self):
        vocab, a, b = build_vectors(normalize("one two three"), normalize("four five"))
        assert len(vocab) == len(a) == len(b) == 5

    def test_empty_inputs(self):
        assert build_vectors([], []) == ([], [], [])

    def test_one_side_empty_is_zero_filled(self):
        vocab, a, b = build_vectors(["alpha", "beta"], [])
        assert a == [1, 1]
        assert b == [0, 0]

    def test_deterministic_for_same_texts(self):
        first = build_vectors(normalize("python sql python"), normalize("sql docker"))
        second = build_vectors(normalize("python sql python"), normalize("sql docker"))
        assert first == second


class TestVocabularyIndex:
    """Test the token index helpers."""

    def test_index_positions(self):
        index = build_vocabulary(["b", "a"], ["c", "a"])
        assert index == {"b": 0, "a": 1, "c": 2}

    def test_frequency_vector_ignores_unknown_tokens(self):
        index = {"python": 0}
        assert frequency_vector(["python", "rust", "python"], index) == [2]

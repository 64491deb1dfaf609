"""
Per-comparison vocabulary and term-frequency vectors.

The vocabulary is rebuilt for every pair of documents and never shared.
"""

from typing import Dict, List, Sequence, Tuple


def build_vocabulary(tokens_a: Sequence[str], tokens_b: Sequence[str]) -> Dict[str, int]:
    """Map each distinct token to its index, in first-seen order (A then B)."""
    index: Dict[str, int] = {}
    for tokens in (tokens_a, tokens_b):
        for tok in tokens:
            if tok not in index:
                index[tok] = len(index)
    return index


def frequency_vector(tokens: Sequence[str], index: Dict[str, int]) -> List[int]:
    vector = [0] * len(index)
    for tok in tokens:
        pos = index.get(tok)
        if pos is not None:
            vector[pos] += 1
    return vector


def build_vectors(
    tokens_a: Sequence[str], tokens_b: Sequence[str]
) -> Tuple[List[str], List[int], List[int]]:
    """
    Build the shared vocabulary and both frequency vectors for one comparison.

    Returns:
        (vocabulary, vector_a, vector_b), all three of equal length
    """
    index = build_vocabulary(tokens_a, tokens_b)
    vocabulary = list(index)
    return vocabulary, frequency_vector(tokens_a, index), frequency_vector(tokens_b, index)

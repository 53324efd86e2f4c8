"""
Bounded-Multiplicity Counter ("bag draws")

Counts the ways to give every draw in an ordered list a colour, where draw j
consumes w_j tokens of its colour and each colour starts with a fixed
number of tokens. Draws are distinguishable; colours are chosen
independently per draw subject to remaining capacity.

Forms:
  - count_bounded:   general weighted form, per-colour capacity list
  - count_uniform:   weight-1 draws, per-colour capacity list
  - simple_count:    weight-1 draws, every colour starting at the same quota
  - count_histogram: weight-1 draws, colours bucketed by remaining capacity
  - count_weighted:  weighted draws, colours bucketed by remaining capacity

A histogram `left_counts` has left_counts[q] = number of colours with exactly
q tokens left. Bucketing lets one recursive call stand in for every colour
that shares a capacity, multiplied by the bucket size.

All forms use exact integer arithmetic and restore their mutable arguments
before returning. The remaining count depends only on the draw index and the
multiset of capacities, so each form memoizes on that key.
"""

from typing import Dict, List, Optional, Sequence, Tuple


def count_bounded(weights: Sequence[int], quotas: List[int]) -> int:
    """
    General form: per-colour capacities, explicit push/undo recursion.

    Args:
        weights: Token cost of each draw, in draw order.
        quotas: Remaining tokens per colour (mutated during the walk, restored on return).

    Returns:
        int: Number of valid colour assignments.
    """
    return _count_bounded(weights, 0, quotas, {})


def _count_bounded(
    weights: Sequence[int],
    j: int,
    left: List[int],
    memo: Dict[Tuple, int]
) -> int:
    if j == len(weights):
        return 1
    key = (j, tuple(sorted(left)))
    if key in memo:
        return memo[key]
    w = weights[j]
    total = 0
    for color in range(len(left)):
        if left[color] >= w:
            left[color] -= w
            total += _count_bounded(weights, j + 1, left, memo)
            left[color] += w
    memo[key] = total
    return total


def simple_count(draws: int, n_colours: int, each_count: int) -> int:
    """
    Uniform-weight form with every colour starting at `each_count` tokens.

    Example:
        >>> simple_count(5, 3, 2)
        90
    """
    return count_uniform(draws, [each_count] * n_colours)


def count_uniform(
    draws: int,
    left: List[int],
    memo: Optional[Dict[Tuple, int]] = None
) -> int:
    """Weight-1 draws against a per-colour capacity list."""
    if draws == 0:
        return 1
    if memo is None:
        memo = {}
    key = (draws, tuple(sorted(left)))
    if key in memo:
        return memo[key]
    total = 0
    for i in range(len(left)):
        if left[i] > 0:
            left[i] -= 1
            total += count_uniform(draws - 1, left, memo)
            left[i] += 1
    memo[key] = total
    return total


def count_histogram(
    draws: int,
    left_counts: List[int],
    memo: Optional[Dict[Tuple, int]] = None
) -> int:
    """
    Weight-1 draws against a capacity histogram.

    Example:
        >>> count_histogram(5, [0, 0, 3])
        90
    """
    if draws == 0:
        return 1
    if memo is None:
        memo = {}
    key = (draws, tuple(left_counts))
    if key in memo:
        return memo[key]
    total = 0
    for i in range(1, len(left_counts)):
        if left_counts[i] > 0:
            count = left_counts[i]
            left_counts[i] -= 1
            left_counts[i - 1] += 1
            total += count * count_histogram(draws - 1, left_counts, memo)
            left_counts[i - 1] -= 1
            left_counts[i] += 1
    memo[key] = total
    return total


def count_weighted(weights: Sequence[int], left_counts: List[int]) -> int:
    """
    Weighted draws against a capacity histogram.

    A draw of weight w may take any colour from a bucket q >= w; that colour
    moves to bucket q - w.
    """
    return _count_weighted(weights, 0, left_counts, {})


def _count_weighted(
    weights: Sequence[int],
    j: int,
    left_counts: List[int],
    memo: Dict[Tuple, int]
) -> int:
    if j == len(weights):
        return 1
    key = (j, tuple(left_counts))
    if key in memo:
        return memo[key]
    w = weights[j]
    total = 0
    for i in range(w, len(left_counts)):
        if left_counts[i] > 0:
            count = left_counts[i]
            left_counts[i] -= 1
            left_counts[i - w] += 1
            total += count * _count_weighted(weights, j + 1, left_counts, memo)
            left_counts[i - w] -= 1
            left_counts[i] += 1
    memo[key] = total
    return total


def histogram(n_colours: int, quota: int) -> List[int]:
    """Initial bucket list: all n_colours colours at `quota` tokens."""
    if quota < 0:
        raise ValueError(f"Quota must be non-negative, got {quota}")
    left_counts = [0] * (quota + 1)
    left_counts[quota] = n_colours
    return left_counts

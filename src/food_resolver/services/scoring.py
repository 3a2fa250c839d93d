"""Scoring of external catalog candidates."""

from food_resolver.domain.foods import RawCandidate, normalize_name

CALORIES_POINTS = 10
MACRO_POINTS = 5
STANDARDIZED_POINTS = 20
BRAND_POINTS = 5
NAME_MATCH_POINTS = 15


def score(candidate: RawCandidate, query: str) -> int:
    """Score a candidate by data completeness and lexical match with the query."""
    nutrients = candidate.nutrients
    points = 0
    if nutrients.calories > 0:
        points += CALORIES_POINTS
    points += MACRO_POINTS * sum(
        1 for grams in (nutrients.protein, nutrients.carbs, nutrients.fat) if grams > 0
    )
    if candidate.standardized:
        points += STANDARDIZED_POINTS
    if candidate.brand:
        points += BRAND_POINTS
    normalized_query = normalize_name(query)
    if normalized_query and normalized_query in normalize_name(candidate.name):
        points += NAME_MATCH_POINTS
    return points


def rank(candidates: list[RawCandidate], query: str) -> list[RawCandidate]:
    """Order candidates by score, keeping provider order between equal scores."""
    return sorted(candidates, key=lambda candidate: -score(candidate, query))


def pick_best(candidates: list[RawCandidate], query: str) -> RawCandidate | None:
    """Return the highest scoring candidate, or None when there are none."""
    if not candidates:
        return None
    return rank(candidates, query)[0]

"""
Score Aggregation

Blends the four sub-scores (safety, weather, transport, family) into one
overall score using a caller-supplied WeightVector.

The order of operations (normalize the weights first, then sum the
weighted sub-scores in safety, weather, transport, family order) matches
the remote scoring service so that locally recomputed totals agree with
server-returned totals.
"""

from typing import Iterable, List, Optional

from livability_map.models import ScorePoint, SubScores, WeightVector

CATEGORY_COUNT = 4


def normalize_weights(weights: WeightVector) -> List[float]:
    """
    Scale weights to sum to one.

    All-zero weights fall back to uniform weights instead of dividing by zero.
    """
    raw = [float(w) for w in weights]
    total = 0.0
    for w in raw:
        total += w
    if total == 0.0:
        return [1.0 / CATEGORY_COUNT] * CATEGORY_COUNT
    return [w / total for w in raw]


def aggregate(sub_scores: SubScores, weights: WeightVector) -> float:
    """
    Combine sub-scores into a single overall score.

    Parameters
    ----------
    sub_scores : SubScores
        Per-category scores (0-10 in the primary dataset)
    weights : WeightVector
        Non-negative relative importance per category

    Returns
    -------
    float
        Weighted mean in the same range as the sub-scores
    """
    overall = 0.0
    for weight, score in zip(normalize_weights(weights), sub_scores):
        overall += weight * float(score)
    return overall


def reweight_point(point: ScorePoint, weights: WeightVector) -> ScorePoint:
    """Return a copy of `point` whose overall score is blended from its sub-scores."""
    if point.sub_scores is None:
        return point
    return ScorePoint(
        id=point.id,
        coordinate=point.coordinate,
        overall_score=aggregate(point.sub_scores, weights),
        sub_scores=point.sub_scores
    )


def reweight_points(points: Iterable[ScorePoint], weights: Optional[WeightVector]) -> List[ScorePoint]:
    """
    Recompute overall scores for every point that carries sub-scores.

    Points without sub-scores keep their dataset score. With `weights`
    of None the points are returned unchanged.
    """
    if weights is None:
        return list(points)
    return [reweight_point(point, weights) for point in points]

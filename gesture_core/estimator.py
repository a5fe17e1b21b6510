"""
Rule-based gesture estimator: scores a pose against every template.
"""
from typing import Iterable, List, Optional, Union

from .templates import GestureTemplate, TemplateLibrary
from .types import Finger, GestureCandidate, Pose

# 7.5 on a 0-10 scale
DEFAULT_MIN_SCORE = 0.75


def score_template(pose: Pose, template: GestureTemplate) -> float:
    """
    Normalized match score of a pose against one template, in [0, 1].

    Every finger that has curl rules is one curl signal and every finger
    that has direction rules is one direction signal. A signal contributes
    the weight of the rule matching the pose's state (0 when none matches)
    and can contribute at most its largest rule weight. The score is the
    contributed total divided by that maximum, so templates with more rules
    are not favoured.
    """
    achieved = 0.0
    achievable = 0.0

    for finger in Finger:
        curl_weights = template.curl_weights(finger)
        if curl_weights:
            achievable += max(curl_weights.values())
            achieved += curl_weights.get(pose.curl(finger), 0.0)

        direction_weights = template.direction_weights(finger)
        if direction_weights:
            achievable += max(direction_weights.values())
            achieved += direction_weights.get(pose.direction(finger), 0.0)

    if achievable <= 0.0:
        return 0.0
    return min(1.0, achieved / achievable)


class GestureEstimator:
    """
    Matches poses against a template library.

    Pure apart from reading a snapshot of the library: estimate() never
    mutates the pose, the templates or the estimator.
    """

    def __init__(self, library: Union[TemplateLibrary, Iterable[GestureTemplate]],
                 min_score: float = DEFAULT_MIN_SCORE):
        """
        Args:
            library: template library (read on every call) or a fixed list of templates
            min_score: confidence floor in [0, 1]; candidates need score >= min_score
        """
        if not 0.0 <= min_score <= 1.0:
            raise ValueError(f"min_score must be in [0, 1], got {min_score}")
        if isinstance(library, TemplateLibrary):
            self.library = library
        else:
            self.library = TemplateLibrary(list(library))
        self.min_score = min_score

    def score(self, pose: Pose, template: GestureTemplate) -> float:
        return score_template(pose, template)

    def estimate(self, pose: Pose, min_score: Optional[float] = None,
                 templates: Optional[Iterable[GestureTemplate]] = None) -> List[GestureCandidate]:
        """
        Score the pose against every template.

        Args:
            pose: current pose
            min_score: overrides the estimator's confidence floor for this call
            templates: snapshot to score against; defaults to the library's current contents

        Returns:
            Candidates at or above the floor, best first. Equal scores keep
            template declaration order.
        """
        floor = self.min_score if min_score is None else min_score
        snapshot = self.library.templates() if templates is None else tuple(templates)

        candidates = []
        for template in snapshot:
            score = score_template(pose, template)
            if score >= floor:
                candidates.append(GestureCandidate(name=template.name, score=score))

        # sorted() is stable, so ties stay in declaration order
        return sorted(candidates, key=lambda c: c.score, reverse=True)

    def best(self, pose: Pose, min_score: Optional[float] = None,
             templates: Optional[Iterable[GestureTemplate]] = None) -> Optional[GestureCandidate]:
        """Highest-scoring candidate, first-declared on ties, or None."""
        candidates = self.estimate(pose, min_score=min_score, templates=templates)
        return candidates[0] if candidates else None

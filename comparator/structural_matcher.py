"""
Structural Matcher Module
Scores extracted components against design-system catalog components and explains the matches.
"""

from dataclasses import dataclass
from typing import List, Sequence
import logging
import math
import numbers
import re

import Levenshtein

from core.component_models import (
    CatalogComponent,
    ComponentRecord,
    Difference,
    MatchResult,
    MatchScores,
    round_score,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 70

NAME_WEIGHT = 20
ELEMENT_WEIGHT = 40
PROP_WEIGHT = 30
COMPLEXITY_WEIGHT = 10
TOTAL_WEIGHT = NAME_WEIGHT + ELEMENT_WEIGHT + PROP_WEIGHT + COMPLEXITY_WEIGHT

HIGH_CONFIDENCE = 85
MEDIUM_CONFIDENCE = 70
NAME_REASON_THRESHOLD = 70

_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]')


@dataclass(frozen=True)
class MatchConfig:
    """Matching configuration passed explicitly at the call boundary."""
    threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self):
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, numbers.Real):
            raise ValueError(f"threshold must be a number, got {self.threshold!r}")
        if not math.isfinite(self.threshold):
            raise ValueError(f"threshold must be finite, got {self.threshold!r}")
        if not 0 <= self.threshold <= 100:
            raise ValueError(f"threshold must be between 0 and 100, got {self.threshold!r}")


@dataclass(frozen=True)
class PairScore:
    """Unrounded sub-scores for one (user, catalog) pair, each on a 0-100 scale."""
    name: float
    element_types: float
    props: float
    complexity: float

    @property
    def structural(self) -> float:
        return (
            self.name * NAME_WEIGHT
            + self.element_types * ELEMENT_WEIGHT
            + self.props * PROP_WEIGHT
            + self.complexity * COMPLEXITY_WEIGHT
        ) / TOTAL_WEIGHT


def normalize_name(name: str) -> str:
    return _NON_ALPHANUMERIC.sub('', name.lower())


def name_similarity(user_name: str, catalog_name: str) -> float:
    n1 = normalize_name(user_name)
    n2 = normalize_name(catalog_name)
    if n1 == n2:
        return 100.0
    if n1 in n2 or n2 in n1:
        return 80.0
    max_length = max(len(n1), len(n2))
    distance = Levenshtein.distance(n1, n2)
    return max(0.0, (1 - distance / max_length) * 100)


def element_type_similarity(user_types: Sequence[str], catalog_types: Sequence[str]) -> float:
    """Jaccard index of the two tag sets, 0 when either side is empty."""
    user_set = set(user_types)
    catalog_set = set(catalog_types)
    if not user_set or not catalog_set:
        return 0.0
    return len(user_set & catalog_set) / len(user_set | catalog_set) * 100


def _substring_match(a: str, b: str) -> bool:
    a = a.lower()
    b = b.lower()
    return a in b or b in a


def _contains(name: str, pattern: str) -> bool:
    return pattern.lower() in name.lower()


def prop_similarity(user_props: Sequence[str], prop_patterns: Sequence[str]) -> float:
    if not user_props and not prop_patterns:
        return 100.0
    if not user_props or not prop_patterns:
        return 0.0
    matches = [name for name in user_props if any(_substring_match(name, pattern) for pattern in prop_patterns)]
    return len(matches) / max(len(user_props), len(prop_patterns)) * 100


def estimate_catalog_complexity(catalog_component: CatalogComponent) -> int:
    signature = catalog_component.structure_signature
    return 1 + len(signature.element_types) + len(signature.prop_patterns)


def complexity_similarity(user_complexity: int, catalog_complexity: int) -> float:
    # A zero on either side carries no signal rather than indicating a mismatch
    if user_complexity == 0 or catalog_complexity == 0:
        return 50.0
    return min(user_complexity, catalog_complexity) / max(user_complexity, catalog_complexity) * 100


def confidence_tier(score: float) -> str:
    if score >= HIGH_CONFIDENCE:
        return 'high'
    if score >= MEDIUM_CONFIDENCE:
        return 'medium'
    return 'low'


class StructuralMatcher:
    """Pairs user components with catalog components by weighted structural similarity."""

    def __init__(self, config: MatchConfig = None):
        self.config = config or MatchConfig()

    def match(self, user_components: Sequence[ComponentRecord],
              catalog_components: Sequence[CatalogComponent]) -> List[MatchResult]:
        """Score every pair and return those at or above the threshold.

        Results are sorted by combined score, highest first; equal scores keep
        user-major, catalog-minor encounter order.
        """
        self._validate_catalog(catalog_components)

        results = []
        for user_component in user_components:
            user_types = user_component.structure_tree.element_types()
            for catalog_component in catalog_components:
                pair_score = self._score(user_component, user_types, catalog_component)
                if pair_score.structural >= self.config.threshold:
                    results.append(self._create_match_result(
                        user_component, user_types, catalog_component, pair_score
                    ))

        results.sort(key=lambda result: result.scores.combined, reverse=True)
        logger.debug(
            f"Matched {len(user_components)} component(s) against {len(catalog_components)} "
            f"catalog entries: {len(results)} result(s) at threshold {self.config.threshold}"
        )
        return results

    def score_pair(self, user_component: ComponentRecord, catalog_component: CatalogComponent) -> PairScore:
        return self._score(user_component, user_component.structure_tree.element_types(), catalog_component)

    def _validate_catalog(self, catalog_components: Sequence[CatalogComponent]) -> None:
        for index, entry in enumerate(catalog_components):
            if not isinstance(entry, CatalogComponent):
                raise TypeError(
                    f"Catalog entry {index} is {type(entry).__name__}, expected CatalogComponent"
                )

    def _score(self, user_component: ComponentRecord, user_types: List[str],
               catalog_component: CatalogComponent) -> PairScore:
        signature = catalog_component.structure_signature
        return PairScore(
            name=name_similarity(user_component.name, catalog_component.name),
            element_types=element_type_similarity(user_types, signature.element_types),
            props=prop_similarity([prop.name for prop in user_component.props], signature.prop_patterns),
            complexity=complexity_similarity(
                user_component.complexity, estimate_catalog_complexity(catalog_component)
            ),
        )

    def _create_match_result(self, user_component: ComponentRecord, user_types: List[str],
                             catalog_component: CatalogComponent, pair_score: PairScore) -> MatchResult:
        structural = round_score(pair_score.structural)
        # The semantic channel is reserved; combined stays structural-only until it is defined
        scores = MatchScores(structural=structural, semantic=0, combined=structural)
        return MatchResult(
            user_component=user_component,
            catalog_component=catalog_component,
            scores=scores,
            match_reasons=self._match_reasons(user_component, user_types, catalog_component, pair_score),
            differences=self._differences(user_component, user_types, catalog_component),
            confidence=confidence_tier(pair_score.structural),
        )

    def _match_reasons(self, user_component: ComponentRecord, user_types: List[str],
                       catalog_component: CatalogComponent, pair_score: PairScore) -> List[str]:
        reasons = []
        if pair_score.name > NAME_REASON_THRESHOLD:
            reasons.append(f'Similar component name: "{user_component.name}" ≈ "{catalog_component.name}"')

        catalog_types = set(catalog_component.structure_signature.element_types)
        shared = [element_type for element_type in user_types if element_type in catalog_types]
        if shared:
            reasons.append(f"Shared element types: {', '.join(shared)}")

        if pair_score.structural >= HIGH_CONFIDENCE:
            reasons.append('Very high structural similarity')
        elif pair_score.structural >= MEDIUM_CONFIDENCE:
            reasons.append('Moderate structural similarity')
        return reasons

    def _differences(self, user_component: ComponentRecord, user_types: List[str],
                     catalog_component: CatalogComponent) -> List[Difference]:
        differences = []
        user_props = [prop.name for prop in user_component.props]
        patterns = catalog_component.structure_signature.prop_patterns

        missing = [p for p in patterns if not any(_contains(name, p) for name in user_props)]
        extra = [name for name in user_props if not any(_contains(name, p) for p in patterns)]
        if missing:
            differences.append(Difference(
                category='prop',
                description=f"Missing props from design system: {', '.join(missing)}",
                severity='moderate',
            ))
        if extra:
            differences.append(Difference(
                category='prop',
                description=f"Extra props not in design system: {', '.join(extra)}",
                severity='minor',
            ))

        catalog_types = set(catalog_component.structure_signature.element_types)
        different = [element_type for element_type in user_types if element_type not in catalog_types]
        if different:
            differences.append(Difference(
                category='structure',
                description=f"Different HTML elements used: {', '.join(different)}",
                severity='moderate',
            ))
        return differences


def match(user_components: Sequence[ComponentRecord], catalog_components: Sequence[CatalogComponent],
          threshold: float = DEFAULT_THRESHOLD) -> List[MatchResult]:
    """Match user components against a catalog with the given threshold (0-100)."""
    return StructuralMatcher(MatchConfig(threshold=threshold)).match(user_components, catalog_components)

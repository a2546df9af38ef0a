"""Phase 3: Candidate scoring.

final score = synergy (tag-based or legacy, plus keyword overlap)
            + theme bonus (keyword_focus and keywords constraints)
            + random tag bonus (random_tag_count constraint)

Synergy itself is deterministic; the only randomness is the choice of random
tags, drawn from the builder's seeded rng.

Expected attributes on the host DeckBuilder:
  - source, scorer, constraints, rng
  - commander_card, commander_profile, candidates
  - random_tags, skipped_cards (updated here)
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from deckgen import settings
from deckgen.deck_builder import builder_utils as bu
from deckgen.exceptions import CardAnalysisError
from deckgen.logging_util import get_logger
from deckgen.tagging import tag_constants as tc
from deckgen.type_definitions import Card, CardMechanicsProfile, MechanicTag, TagCategory

logger = get_logger(__name__)

# Categories never offered as random themes
_RANDOM_TAG_EXCLUDED_CATEGORIES = {TagCategory.CARD_TYPES.value, TagCategory.MANUAL.value}


# ---------------------------------------------------------------------------
# Theme bonuses
# ---------------------------------------------------------------------------
def tiered_tag_bonus(tag: MechanicTag) -> int:
    """Bonus for a theme-matching tag, tiered by priority and scaled by confidence."""
    if tag.priority >= 8:
        base = settings.THEME_TAG_BONUS['high']
    elif tag.priority >= 5:
        base = settings.THEME_TAG_BONUS['medium']
    else:
        base = settings.THEME_TAG_BONUS['low']
    return int(round(base * tag.confidence))


def _overlaps(a: str, b: str) -> bool:
    return a == b or a in b or b in a


def _theme_forms(theme: str) -> Tuple[str, ...]:
    lowered = theme.strip().lower()
    slug = tc.slugify(theme)
    return (lowered,) if slug == lowered else (lowered, slug)


def _label_matches(labels: Iterable[str], forms: Sequence[str]) -> bool:
    return any(_overlaps(label.lower(), form) for label in labels for form in forms)


def keyword_focus_bonus(card: Card, profile: CardMechanicsProfile, keywords: Sequence[str]) -> Tuple[float, List[str]]:
    """Bonus for free-text focus keywords.

    Each keyword can match the card's text/type/name, any of its tags, its roles
    and its archetypes; two or more matches add matches² × KEYWORD_MULTI_MATCH_FACTOR.
    """
    bonus = 0.0
    matches: List[str] = []
    haystacks = (card.oracle_text.lower(), card.type_line.lower(), card.name.lower())
    for keyword in keywords:
        forms = _theme_forms(keyword)
        if not forms[0]:
            continue
        if any(forms[0] in text for text in haystacks):
            bonus += settings.THEME_MATCH_BONUS
            matches.append(f"{keyword}: text")
        for tag in profile.mechanic_tags:
            if any(_overlaps(tag.name.lower(), form) for form in forms):
                bonus += tiered_tag_bonus(tag)
                matches.append(f"{keyword}: {tag.name}")
        if _label_matches(profile.functional_roles, forms):
            bonus += settings.THEME_MATCH_BONUS
            matches.append(f"{keyword}: role")
        if _label_matches(profile.archetype_relevance, forms):
            bonus += settings.THEME_MATCH_BONUS
            matches.append(f"{keyword}: archetype")
    if len(matches) >= 2:
        bonus += len(matches) ** 2 * settings.KEYWORD_MULTI_MATCH_FACTOR
    return bonus, matches


def theme_tag_bonus(card: Card, profile: CardMechanicsProfile, themes: Sequence[str]) -> Tuple[float, List[str]]:
    """Bonus for user-selected theme tags.

    Tag matches are tiered by priority × confidence; role, archetype, synergy
    keyword and type-line matches add THEME_MATCH_BONUS each. Two or more
    matches add matches³ × TAG_MULTI_MATCH_FACTOR, three or more also add
    THEME_PREMIUM_BONUS.
    """
    bonus = 0.0
    matches: List[str] = []
    type_line = card.type_line.lower()
    for theme in themes:
        forms = _theme_forms(theme)
        if not forms[0]:
            continue
        for tag in profile.mechanic_tags:
            if any(_overlaps(tag.name.lower(), form) for form in forms):
                bonus += tiered_tag_bonus(tag)
                matches.append(f"{theme}: {tag.name}")
        if _label_matches(profile.functional_roles, forms):
            bonus += settings.THEME_MATCH_BONUS
            matches.append(f"{theme}: role")
        if _label_matches(profile.archetype_relevance, forms):
            bonus += settings.THEME_MATCH_BONUS
            matches.append(f"{theme}: archetype")
        if _label_matches(profile.synergy_keywords, forms):
            bonus += settings.THEME_MATCH_BONUS
            matches.append(f"{theme}: synergy keyword")
        if forms[0] in type_line:
            bonus += settings.THEME_MATCH_BONUS
            matches.append(f"{theme}: type line")
    total = len(matches)
    if total >= 2:
        bonus += total ** 3 * settings.TAG_MULTI_MATCH_FACTOR
    if total >= 3:
        bonus += settings.THEME_PREMIUM_BONUS
    return bonus, matches


def random_tag_bonus(profile: CardMechanicsProfile, random_tags: Iterable[str]) -> float:
    chosen = set(random_tags)
    return sum(settings.RANDOM_TAG_BONUS * t.confidence for t in profile.mechanic_tags if t.name in chosen)


class CandidateScoringMixin:
    def choose_random_tags(self) -> List[str]:  # type: ignore[override]
        """Pick random_tag_count theme tags from the tag vocabulary, weighted by usage.

        Tags the commander already has are skipped so the injected themes add variety.
        """
        count = self.constraints.random_tag_count
        if count <= 0:
            self.random_tags = []
            return self.random_tags
        own = self.commander_profile.tags
        pool = sorted(
            (t['name'], t['count'])
            for t in self.source.get_available_tags()
            if t['count'] > 0 and t['category'] not in _RANDOM_TAG_EXCLUDED_CATEGORIES and t['name'] not in own
        )
        self.random_tags = bu.weighted_sample_without_replacement(pool, count, rng=self.rng)
        if len(self.random_tags) < count:
            self.warnings.append(
                f"Requested {count} random tags but only {len(self.random_tags)} were available"
            )
        logger.info(f"Random theme tags: {self.random_tags or 'none'}")
        return self.random_tags

    def _score_candidate(self, candidate) -> None:
        try:
            candidate.synergy = self.scorer.score(
                self.commander_card, self.commander_profile, candidate.card, candidate.profile
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CardAnalysisError(candidate.name, f"scoring failed: {e}") from e
        bonus = 0.0
        matches: List[str] = []
        if self.constraints.keyword_focus:
            kw_bonus, kw_matches = keyword_focus_bonus(candidate.card, candidate.profile, self.constraints.keyword_focus)
            bonus += kw_bonus
            matches.extend(kw_matches)
        if self.constraints.keywords:
            tag_bonus, tag_matches = theme_tag_bonus(candidate.card, candidate.profile, self.constraints.keywords)
            bonus += tag_bonus
            matches.extend(tag_matches)
        candidate.theme_bonus = bonus
        candidate.theme_matches = matches
        candidate.random_bonus = random_tag_bonus(candidate.profile, self.random_tags)

    def score_candidates(self) -> None:  # type: ignore[override]
        """Score every candidate; cards that fail are dropped from the pool."""
        self.choose_random_tags()
        scored = []
        for candidate in self.candidates:
            try:
                self._score_candidate(candidate)
            except CardAnalysisError as e:
                logger.warning(f"Skipping candidate: {e.message}")
                self.skipped_cards.append(candidate.name)
                continue
            scored.append(candidate)
            logger.debug(
                f"{candidate.name}: final={candidate.final_score:.1f} synergy={candidate.synergy.total:.1f} "
                f"theme={candidate.theme_bonus:.0f} random={candidate.random_bonus:.0f}"
            )
        self.candidates = scored
        themed = sum(1 for c in scored if c.theme_bonus > 0)
        logger.info(f"Scored {len(scored)} candidates ({themed} with theme bonuses)")

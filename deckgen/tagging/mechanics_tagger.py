"""Card mechanics tagger.

Runs a fixed, ordered battery of detectors over one card's oracle text, type
line and keyword field and summarizes the result as a CardMechanicsProfile.

Detectors fall in two groups:
- pattern detectors: one tag each, confidence 0.95 on an exact phrase match and
  0.6 on a partial match, priority nudged by how much of the card the ability
  takes up
- family detectors: type-line tags, keyword-field tags (always confidence 1.0),
  catalog keywords found in text, tribal phrasing, ETB payoffs, cost reduction

Analysis is a pure function of the card and the static tag vocabulary. Overlap
between namespaces (mechanic_X vs ability_keyword_X) is left alone here and
folded offline by deckgen.tagging.tag_overlap.

Usage:
    from deckgen.tagging.mechanics_tagger import analyze_card

    profile = analyze_card(card)
    profile.primary_type, profile.tag_names()
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple

from deckgen import settings
from deckgen.exceptions import CardAnalysisError
from deckgen.logging_util import get_logger
from deckgen.tagging import regex_patterns as rgx
from deckgen.tagging import tag_constants as tc
from deckgen.type_definitions import Card, CardMechanicsProfile, MechanicTag, TagCategory

logger = get_logger(__name__)

EXACT_CONFIDENCE = 0.95
PARTIAL_CONFIDENCE = 0.6
TYPE_HINT_CONFIDENCE = 0.9
KEYWORD_FIELD_CONFIDENCE = 1.0

# Share of the rules text an ability must cover to count as the card's focus.
CENTRAL_COVERAGE = 0.6
MINOR_COVERAGE = 0.2
MINOR_TEXT_MIN_LENGTH = 120

# Shared keyword list also used by the legacy synergy heuristic.
BASIC_SHARED_KEYWORDS: Tuple[str, ...] = (
    'flying', 'trample', 'haste', 'vigilance', 'lifelink', 'deathtouch', 'first strike',
    'double strike', 'hexproof', 'menace', 'reach', 'enters', 'leaves', 'exile', 'token',
    'sacrifice', 'destroy',
)


@dataclass(frozen=True)
class CardText:
    """Pre-processed view of one card handed to every detector."""
    name: str
    text: str
    type_line: str
    keywords: Tuple[str, ...]
    cmc: float
    has_pt: bool

    @property
    def sentences(self) -> List[str]:
        return [s for s in rgx.SENTENCE_SPLIT.split(self.text) if s.strip()]


@dataclass(frozen=True)
class PatternDetector:
    """Single-tag detector driven by compiled patterns."""
    tag: str
    priority: int
    exact: Tuple[Pattern, ...]
    partial: Tuple[Pattern, ...] = ()
    exclude_partial: Optional[Pattern] = None
    type_hint: Optional[str] = None
    repeatable_bonus: int = 0

    def detect(self, card: CardText) -> Optional[MechanicTag]:
        matches = _find_all(self.exact, card.text)
        confidence = EXACT_CONFIDENCE
        if not matches:
            matches = _find_all(self.partial, card.text)
            confidence = PARTIAL_CONFIDENCE
            if matches and self.exclude_partial is not None and self.exclude_partial.search(card.text):
                matches = []
        if not matches:
            if self.type_hint and self.type_hint in card.type_line:
                return _make_tag(self.tag, self.priority, TYPE_HINT_CONFIDENCE, [card.type_line])
            return None
        priority = self.priority + _centrality_adjustment(matches, card)
        if self.repeatable_bonus and rgx.REPEATABLE.search(card.text):
            priority += self.repeatable_bonus
        return _make_tag(self.tag, priority, confidence, [m.group(0) for m in matches])


def _find_all(patterns: Sequence[Pattern], text: str) -> List[re.Match]:
    found: List[re.Match] = []
    for pat in patterns:
        found.extend(pat.finditer(text))
    return found


def _make_tag(name: str, priority: int, confidence: float, evidence: Iterable[str]) -> MechanicTag:
    definition = tc.lookup_tag(name)
    snippets: List[str] = []
    for snippet in evidence:
        snippet = snippet.strip()
        if snippet and snippet not in snippets:
            snippets.append(snippet)
        if len(snippets) >= settings.MAX_EVIDENCE_SNIPPETS:
            break
    return MechanicTag(
        name=name,
        category=definition.category,
        priority=priority,
        confidence=confidence,
        evidence=tuple(snippets),
        synergy_weight=definition.synergy_weight,
    )


def _centrality_adjustment(matches: Sequence[re.Match], card: CardText) -> int:
    """+1 when the ability is most of the card, -1 when it is a minor upside."""
    if not card.text:
        return 0
    covered = 0
    for sentence in card.sentences:
        if any(m.group(0) in sentence for m in matches):
            covered += len(sentence)
    coverage = covered / len(card.text)
    if coverage >= CENTRAL_COVERAGE:
        return 1
    if coverage < MINOR_COVERAGE and len(card.text) > MINOR_TEXT_MIN_LENGTH:
        return -1
    return 0


# =============================================================================
# DETECTOR BATTERY (ordered)
# =============================================================================

PATTERN_DETECTORS: Tuple[PatternDetector, ...] = (
    # Resource generation
    PatternDetector('mana_generation', 8, (rgx.ADD_MANA_SYMBOL, rgx.ADD_MANA_WORDS), (rgx.ADD_MANA_LOOSE,)),
    PatternDetector('land_ramp', 8, (rgx.SEARCH_LAND_ONTO_BATTLEFIELD, rgx.PUT_LAND_ONTO_BATTLEFIELD)),
    PatternDetector('extra_land_drop', 7, (rgx.ADDITIONAL_LAND,)),
    PatternDetector('treasure_generation', 7, (rgx.CREATE_TREASURE,), (rgx.TREASURE_WORD,), repeatable_bonus=1),
    PatternDetector('card_draw', 7, (rgx.DRAW_CARDS,), (rgx.DRAW_LOOSE,), repeatable_bonus=2),
    PatternDetector('card_selection', 6, (rgx.SCRY_SURVEIL, rgx.LOOK_AT_TOP)),
    PatternDetector('tutor', 9, (rgx.SEARCH_NONLAND,), (rgx.SEARCH_LIBRARY,), exclude_partial=rgx.SEARCH_FOR_LAND),
    PatternDetector('life_gain', 5, (rgx.GAIN_LIFE,), (rgx.GAIN_LIFE_LOOSE,)),
    PatternDetector('energy_generation', 6, (rgx.ENERGY,)),
    # Tokens
    PatternDetector('token_creation', 6, (rgx.CREATE_TOKEN,), (rgx.TOKEN_WORD,), repeatable_bonus=2),
    PatternDetector('creature_token_creation', 7, (rgx.CREATE_CREATURE_TOKEN,)),
    PatternDetector('token_doubling', 9, (rgx.TOKEN_DOUBLING,)),
    PatternDetector('tokens_matter', 7, (rgx.TOKENS_YOU_CONTROL,)),
    PatternDetector('populate', 8, (rgx.POPULATE,)),
    # Combat
    PatternDetector('evasion_unblockable', 6, (rgx.CANT_BE_BLOCKED,)),
    PatternDetector('extra_combat', 9, (rgx.EXTRA_COMBAT,)),
    PatternDetector('anthem_effect', 7, (rgx.ANTHEM,), (rgx.ANTHEM_LOOSE,)),
    PatternDetector('fight_mechanic', 6, (rgx.FIGHT,)),
    PatternDetector('equipment', 7, (rgx.EQUIP_COST,), (rgx.EQUIPPED_CREATURE,), type_hint='equipment'),
    PatternDetector('aura_synergy', 6, (rgx.AURAS_YOU_CONTROL,)),
    PatternDetector('protection_static', 6, (rgx.GRANT_PROTECTION,)),
    PatternDetector('indestructible', 6, (rgx.INDESTRUCTIBLE_GRANT,), (rgx.INDESTRUCTIBLE_WORD,)),
    # Removal & interaction
    PatternDetector('spot_removal', 8, (rgx.DESTROY_OR_EXILE_TARGET,), (rgx.DESTROY_OR_EXILE_TARGET_LOOSE,)),
    PatternDetector('board_wipe', 9, (rgx.BOARD_WIPE, rgx.MASS_SHRINK), (rgx.DESTROY_ALL_LOOSE,)),
    PatternDetector('counterspell', 8, (rgx.COUNTER_TARGET_SPELL,), (rgx.COUNTER_TARGET_LOOSE,)),
    PatternDetector('damage_dealing', 6, (rgx.DAMAGE_TARGET,), (rgx.DAMAGE_LOOSE,)),
    PatternDetector('bounce_effect', 6, (rgx.BOUNCE_TARGET,), (rgx.BOUNCE_LOOSE,)),
    PatternDetector('graveyard_hate', 6, (rgx.EXILE_GRAVEYARD,), (rgx.EXILE_FROM_GRAVEYARD_LOOSE,)),
    PatternDetector('land_destruction', 6, (rgx.DESTROY_LAND,)),
    PatternDetector('control_magic', 8, (rgx.GAIN_CONTROL,)),
    # Triggers
    PatternDetector('etb_trigger_self', 6, (rgx.ETB_SELF,)),
    PatternDetector('etb_trigger_creature', 9, (rgx.ETB_OTHER_CREATURE,)),
    PatternDetector('death_trigger', 7, (rgx.DIES_TRIGGER,), (rgx.DIES_WORD,)),
    PatternDetector('leaves_battlefield_trigger', 6, (rgx.LEAVES_BATTLEFIELD,)),
    PatternDetector('attack_trigger', 7, (rgx.ATTACKS_TRIGGER,)),
    PatternDetector('combat_damage_trigger', 7, (rgx.COMBAT_DAMAGE_TO_PLAYER,)),
    PatternDetector('spell_trigger', 8, (rgx.CAST_SPELL_TRIGGER,), (rgx.MAGECRAFT,)),
    PatternDetector('upkeep_trigger', 5, (rgx.UPKEEP_TRIGGER,)),
    PatternDetector('end_step_trigger', 5, (rgx.END_STEP_TRIGGER,)),
    PatternDetector('landfall', 9, (rgx.LANDFALL,)),
    PatternDetector('lifegain_trigger', 8, (rgx.LIFEGAIN_TRIGGER,)),
    PatternDetector('draw_trigger', 7, (rgx.DRAW_TRIGGER,)),
    PatternDetector('token_creation_trigger', 7, (rgx.TOKEN_TRIGGER,)),
    # Synergy themes
    PatternDetector('sacrifice_outlet', 7, (rgx.SACRIFICE_OUTLET,), (rgx.SACRIFICE_WORD,)),
    PatternDetector('reanimation', 9, (rgx.REANIMATE,), (rgx.REANIMATE_LOOSE,)),
    PatternDetector('graveyard_recursion', 7, (rgx.REGROWTH,), (rgx.REGROWTH_LOOSE,)),
    PatternDetector('self_mill', 6, (rgx.MILL,)),
    PatternDetector('graveyard_synergy', 6, (rgx.GRAVEYARD_COUNT,)),
    PatternDetector('flicker_effect', 8, (rgx.FLICKER,), (rgx.FLICKER_LOOSE,)),
    PatternDetector('artifact_synergy', 7, (rgx.ARTIFACTS_MATTER,)),
    PatternDetector('enchantment_synergy', 7, (rgx.ENCHANTMENTS_MATTER,)),
    PatternDetector('spell_copying', 8, (rgx.COPY_SPELL,)),
    PatternDetector('lands_matter', 6, (rgx.LANDS_YOU_CONTROL,)),
    PatternDetector('discard_effect', 5, (rgx.DISCARD,)),
    PatternDetector('wheel_effect', 8, (rgx.WHEEL,)),
    # Counters
    PatternDetector('plus_one_counters', 7, (rgx.PUT_PLUS_ONE,), (rgx.PLUS_ONE_WORD,), repeatable_bonus=1),
    PatternDetector('minus_one_counters', 6, (rgx.MINUS_ONE,)),
    PatternDetector('counter_doubling', 9, (rgx.COUNTER_DOUBLING,)),
    PatternDetector('proliferate', 9, (rgx.PROLIFERATE,)),
    PatternDetector('loyalty_abilities', 5, (rgx.LOYALTY_ABILITY,), type_hint='planeswalker'),
    # Win conditions
    PatternDetector('win_condition_direct', 10, (rgx.WIN_GAME,)),
    PatternDetector('lose_condition_direct', 10, (rgx.LOSE_GAME,)),
    PatternDetector('poison_strategy', 8, (rgx.POISON,)),
    PatternDetector('drain_effect', 7, (rgx.DRAIN,), (rgx.DRAIN_LOOSE,)),
)


def _plural_forms() -> Dict[str, str]:
    """Map every written form (singular and plural) of a creature type to its singular."""
    forms: Dict[str, str] = {}
    for singular in tc.CREATURE_TYPES:
        forms[singular] = singular
        if singular.endswith(('s', 'x', 'ch', 'sh')):
            forms[singular + 'es'] = singular
        elif singular.endswith('y') and singular[-2:-1] not in 'aeiou':
            forms[singular[:-1] + 'ies'] = singular
        else:
            forms[singular + 's'] = singular
    forms.update(tc.CREATURE_TYPE_PLURALS)
    return forms


_TRIBE_FORMS: Dict[str, str] = _plural_forms()
_TRIBE_GROUP = '|'.join(sorted((re.escape(f) for f in _TRIBE_FORMS), key=len, reverse=True))
_TRIBAL_PATTERNS: List[Pattern] = rgx.tribal_patterns(_TRIBE_GROUP)
_TRIBAL_MATTERS_PATTERNS: List[Pattern] = rgx.tribal_matters_patterns(_TRIBE_GROUP)
_CATALOG_PATTERNS: List[Tuple[str, Pattern]] = [(kw, rgx.keyword_pattern(kw)) for kw in tc.all_static_keywords()]


class CardMechanicsTagger:
    """Analyzes single cards into CardMechanicsProfile objects.

    The tagger holds no per-card state; one instance may be shared across
    threads.
    """

    def __init__(self, detectors: Sequence[PatternDetector] = PATTERN_DETECTORS):
        self.detectors = tuple(detectors)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def analyze_card(self, card: Card | Mapping[str, Any]) -> CardMechanicsProfile:
        """Analyze one card.

        Args:
            card: Card instance or raw card mapping (Scryfall-style keys)

        Returns:
            CardMechanicsProfile with deterministic tag ordering

        Raises:
            CardAnalysisError: If the input has no usable name or cannot be processed
        """
        if not isinstance(card, Card):
            try:
                card = Card.from_record(card)
            except (AttributeError, TypeError, ValueError) as e:
                label = str(card.get('name', '?')) if isinstance(card, Mapping) else repr(card)
                raise CardAnalysisError(label, f"malformed record: {e}") from e
        if not card.name:
            raise CardAnalysisError('<unnamed>', 'card has no name')

        view = self._prepare(card)
        try:
            tags = self._collect_tags(view)
        except re.error as e:
            raise CardAnalysisError(card.name, f"pattern failure: {e}") from e

        ordered = tuple(sorted(tags.values(), key=lambda t: (-t.priority, tc.namespace_rank(t.name), t.name)))
        profile = CardMechanicsProfile(
            card_id=card.id,
            card_name=card.name,
            primary_type=self._primary_type(ordered, view),
            functional_roles=self._functional_roles(ordered, view),
            power_level=self._power_level(card, ordered),
            archetype_relevance=self._archetype_relevance(ordered),
            synergy_keywords=self._synergy_keywords(ordered, view),
            mechanic_tags=ordered,
        )
        logger.debug(f"Analyzed {card.name}: {len(ordered)} tags, primary={profile.primary_type}")
        return profile

    # ------------------------------------------------------------------
    # Preparation
    # ------------------------------------------------------------------
    @staticmethod
    def _prepare(card: Card) -> CardText:
        text = card.oracle_text or ''
        text = rgx.REMINDER_TEXT.sub('', text)
        names = {card.name}
        if ' // ' in card.name:
            names.update(part.strip() for part in card.name.split(' // '))
        for nm in sorted(names, key=len, reverse=True):
            if nm:
                text = text.replace(nm, '~')
                # Legendary shorthand ("Atraxa" for "Atraxa, Praetors' Voice")
                short = nm.split(',')[0].strip()
                if short and short != nm:
                    text = re.sub(r'\b' + re.escape(short) + r'\b', '~', text)
        text = rgx.WHITESPACE.sub(' ', text).strip().lower()
        return CardText(
            name=card.name,
            text=text,
            type_line=card.type_line.lower(),
            keywords=tuple(k.lower() for k in card.keywords),
            cmc=card.cmc,
            has_pt=card.power is not None and card.toughness is not None,
        )

    # ------------------------------------------------------------------
    # Detector battery
    # ------------------------------------------------------------------
    def _collect_tags(self, view: CardText) -> Dict[str, MechanicTag]:
        tags: Dict[str, MechanicTag] = {}

        def add(tag: Optional[MechanicTag]) -> None:
            if tag is None:
                return
            current = tags.get(tag.name)
            if current is None or (tag.priority, tag.confidence) > (current.priority, current.confidence):
                tags[tag.name] = tag

        for tag in self._type_line_tags(view):
            add(tag)
        for tag in self._keyword_field_tags(view):
            add(tag)
        if view.text:
            for detector in self.detectors:
                add(detector.detect(view))
            for tag in self._catalog_keyword_tags(view):
                add(tag)
            for tag in self._tribal_tags(view):
                add(tag)
            for tag in self._etb_payoff_tags(view):
                add(tag)
            add(self._cost_reduction_tag(view))
        elif 'planeswalker' in view.type_line:
            add(_make_tag('loyalty_abilities', 5, TYPE_HINT_CONFIDENCE, [view.type_line]))
        return tags

    @staticmethod
    def _type_line_tags(view: CardText) -> List[MechanicTag]:
        tags: List[MechanicTag] = []
        front = view.type_line.split('//')[0]
        left, _, right = front.partition('—')
        if not right:
            left, _, right = front.partition(' - ')
        words = left.split()
        evidence = [view.type_line]
        for word in words:
            if word in tc.SUPERTYPES:
                tags.append(_make_tag(f'supertype_{word}', 2, 1.0, evidence))
            elif word in tc.CARD_TYPES:
                tags.append(_make_tag(f'type_{word}', 3, 1.0, evidence))
        is_creature = 'creature' in words or 'kindred' in words or 'tribal' in words
        is_walker = 'planeswalker' in words
        for sub in right.split():
            sub = tc.slugify(sub)
            if not sub:
                continue
            if is_creature:
                tags.append(_make_tag(f'creature_type_{sub}', 5, 1.0, evidence))
            elif is_walker:
                tags.append(_make_tag(f'planeswalker_type_{sub}', 4, 1.0, evidence))
            else:
                tags.append(_make_tag(f'subtype_{sub}', 4, 1.0, evidence))
        return tags

    @staticmethod
    def _keyword_field_tags(view: CardText) -> List[MechanicTag]:
        return [
            _make_tag(f'ability_keyword_{tc.slugify(kw)}', tc.keyword_priority(kw), KEYWORD_FIELD_CONFIDENCE, [f'keyword: {kw}'])
            for kw in view.keywords if tc.slugify(kw)
        ]

    @staticmethod
    def _catalog_keyword_tags(view: CardText) -> List[MechanicTag]:
        tags: List[MechanicTag] = []
        lines = view.text.split('\n')
        for keyword, pattern in _CATALOG_PATTERNS:
            match = pattern.search(view.text)
            if not match:
                continue
            leading = any(line.strip().startswith(keyword) for line in lines)
            confidence = EXACT_CONFIDENCE if leading or keyword in view.keywords else PARTIAL_CONFIDENCE
            tags.append(_make_tag(f'mechanic_{tc.slugify(keyword)}', tc.keyword_priority(keyword), confidence, [match.group(0)]))
        return tags

    @staticmethod
    def _tribal_tags(view: CardText) -> List[MechanicTag]:
        tags: List[MechanicTag] = []
        for pattern in _TRIBAL_PATTERNS:
            for match in pattern.finditer(view.text):
                tribe = _TRIBE_FORMS.get(match.group('tribe').lower())
                if tribe:
                    tags.append(_make_tag(f'tribal_{tribe}', 8, EXACT_CONFIDENCE, [match.group(0)]))
        for pattern in _TRIBAL_MATTERS_PATTERNS:
            for match in pattern.finditer(view.text):
                tribe = _TRIBE_FORMS.get(match.group('tribe').lower())
                if tribe:
                    tags.append(_make_tag(f'{tribe}_matters', 7, 0.9, [match.group(0)]))
        return tags

    @staticmethod
    def _etb_payoff_tags(view: CardText) -> List[MechanicTag]:
        """Classify creature-ETB payoffs as generic, tribal-only or harmful."""
        if rgx.ETB_HARMFUL.search(view.text):
            match = rgx.ETB_HARMFUL.search(view.text)
            return [_make_tag('creature_hostile_etb', 4, EXACT_CONFIDENCE, [match.group(0)])]
        tags: List[MechanicTag] = []
        generic = rgx.ETB_OTHER_CREATURE.search(view.text)
        if generic:
            tags.append(_make_tag('etb_payoff_generic', 10, EXACT_CONFIDENCE, [generic.group(0)]))
            return tags
        for match in rgx.ETB_TRIBAL.finditer(view.text):
            word = match.group('tribe').lower()
            tribe = _TRIBE_FORMS.get(word) or _TRIBE_FORMS.get(word + 's')
            if tribe:
                tags.append(_make_tag('etb_payoff_tribal', 8, EXACT_CONFIDENCE, [match.group(0)]))
                tags.append(_make_tag(f'{tribe}_matters', 7, EXACT_CONFIDENCE, [match.group(0)]))
        return tags

    @staticmethod
    def _cost_reduction_tag(view: CardText) -> Optional[MechanicTag]:
        match = rgx.COST_REDUCTION.search(view.text)
        if match:
            return _make_tag('cost_reduction', 7, EXACT_CONFIDENCE, [match.group(0)])
        loose = rgx.COST_REDUCTION_LOOSE.search(view.text)
        if loose:
            return _make_tag('cost_reduction', 6, PARTIAL_CONFIDENCE, [loose.group(0)])
        return None

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------
    @staticmethod
    def _primary_type(tags: Sequence[MechanicTag], view: CardText) -> str:
        functional = [t for t in tags if tc.role_for_tag(t.name)]
        if functional:
            best = min(functional, key=lambda t: (-t.priority, tc.namespace_rank(t.name), t.name))
            return tc.role_for_tag(best.name)
        if 'land' in view.type_line and 'creature' not in view.type_line:
            return 'land'
        return tc.DEFAULT_ROLE

    @staticmethod
    def _functional_roles(tags: Sequence[MechanicTag], view: CardText) -> Tuple[str, ...]:
        roles = {tc.role_for_tag(t.name) for t in tags if tc.role_for_tag(t.name)}
        if 'land' in view.type_line and 'creature' not in view.type_line:
            roles.add('land')
        if not roles:
            roles.add(tc.DEFAULT_ROLE)
        return tuple(sorted(roles))

    @staticmethod
    def _archetype_relevance(tags: Sequence[MechanicTag]) -> Tuple[str, ...]:
        names = {t.name for t in tags}
        found = {arch for arch, members in tc.ARCHETYPE_RELEVANCE.items() if names & members}
        if any(n.startswith('tribal_') or n.endswith('_matters') or n == 'etb_payoff_tribal' for n in names):
            found.add('tribal')
        return tuple(sorted(found))

    @staticmethod
    def _synergy_keywords(tags: Sequence[MechanicTag], view: CardText) -> Tuple[str, ...]:
        found = set(view.keywords)
        for tag in tags:
            if tag.name.startswith('mechanic_'):
                found.add(tag.name[len('mechanic_'):].replace('_', ' '))
        for word in BASIC_SHARED_KEYWORDS:
            if re.search(r'\b' + re.escape(word) + r'\b', view.text):
                found.add(word)
        for card_type in tc.CARD_TYPES:
            if card_type in view.type_line.split():
                found.add(card_type)
        for match in rgx.TOKEN_SUBTYPE.finditer(view.text):
            found.add(f"{match.group('subtype').lower()} token")
        return tuple(sorted(found))

    @staticmethod
    def _power_level(card: Card, tags: Sequence[MechanicTag]) -> int:
        """Heuristic 1-10 rating: many high-priority abilities on a cheap card rate higher."""
        score = 5.0
        if card.edhrec_rank is not None:
            if card.edhrec_rank <= 100:
                score += 2
            elif card.edhrec_rank <= 1000:
                score += 1
            elif card.edhrec_rank > 10000:
                score -= 1
        functional = [t for t in tags if tc.namespace_of(t.name) == '']
        for tag in functional:
            if tag.priority >= 9:
                score += 1
            elif tag.priority >= 7:
                score += 0.5
        if functional:
            if card.cmc <= 2:
                score += 1
            elif card.cmc >= 7:
                score -= 1
        if card.name.lower() in tc.STAPLE_CARDS:
            score = max(score, tc.STAPLE_MIN_POWER)
        return int(max(1, min(10, round(score))))


_DEFAULT_TAGGER = CardMechanicsTagger()


def analyze_card(card: Card | Mapping[str, Any]) -> CardMechanicsProfile:
    """Analyze one card with the shared default tagger."""
    return _DEFAULT_TAGGER.analyze_card(card)


def profile_tags_by_category(profile: CardMechanicsProfile) -> Dict[TagCategory, List[str]]:
    """Group a profile's tag names by category (used by reports and the CLI)."""
    grouped: Dict[TagCategory, List[str]] = {}
    for tag in profile.mechanic_tags:
        grouped.setdefault(tag.category, []).append(tag.name)
    return grouped

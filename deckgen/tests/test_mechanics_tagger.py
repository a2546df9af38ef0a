from __future__ import annotations

import pytest

from card_test_utils import make_card, make_tag
from deckgen.exceptions import CardAnalysisError
from deckgen.tagging import tag_constants as tc
from deckgen.tagging.mechanics_tagger import (
    EXACT_CONFIDENCE,
    PARTIAL_CONFIDENCE,
    CardMechanicsTagger,
    analyze_card,
    profile_tags_by_category,
)
from deckgen.type_definitions import TagCategory


def _tags(profile):
    return {t.name: t for t in profile.mechanic_tags}


def test_exact_draw_phrase_tags_card_draw():
    profile = analyze_card(make_card('Divination', 'Sorcery', 'Draw two cards.'))
    tags = _tags(profile)
    assert 'card_draw' in tags
    assert tags['card_draw'].confidence == EXACT_CONFIDENCE
    # the whole card is the draw effect, so priority is nudged up
    assert tags['card_draw'].priority == 8
    assert profile.primary_type == 'draw'
    assert 'draw' in profile.functional_roles


def test_loose_draw_phrase_is_partial_match():
    card = make_card('Howling Test', 'Sorcery', 'Each player draws cards equal to the number of cards in their hand.')
    tags = _tags(analyze_card(card))
    assert tags['card_draw'].confidence == PARTIAL_CONFIDENCE


def test_keyword_field_tags_are_fully_confident():
    card = make_card('Serra Angel', 'Creature — Angel', 'Flying, vigilance', keywords=['Flying', 'Vigilance'])
    tags = _tags(analyze_card(card))
    assert tags['ability_keyword_flying'].confidence == 1.0
    assert tags['ability_keyword_vigilance'].confidence == 1.0
    assert 'mechanic_flying' in tags
    assert tags['creature_type_angel'].category == TagCategory.TRIBAL


def test_type_line_families():
    tags = _tags(analyze_card(make_card('Test Druid', 'Legendary Creature — Elf Druid')))
    for name in ('supertype_legendary', 'type_creature', 'creature_type_elf', 'creature_type_druid'):
        assert name in tags
    assert tags['type_creature'].category == TagCategory.CARD_TYPES


def test_mana_ability_is_ramp_with_name_replaced():
    profile = analyze_card(make_card('Llanowar Elves', 'Creature — Elf Druid', '{T}: Add {G}.'))
    assert 'mana_generation' in _tags(profile)
    assert profile.primary_type == 'ramp'


def test_tribal_phrasing_uses_singular_tribe():
    card = make_card('Elvish Leader', 'Creature — Elf Warrior', 'Other Elves you control get +1/+1.')
    tags = _tags(analyze_card(card))
    assert 'tribal_elf' in tags
    assert 'tribal' in analyze_card(card).archetype_relevance


class TestEtbPayoffs:
    def test_generic_creature_etb_payoff(self):
        card = make_card(
            'Soul Warden Test', 'Creature — Human Cleric',
            'Whenever another creature enters the battlefield under your control, you gain 1 life.',
        )
        tags = _tags(analyze_card(card))
        assert tags['etb_payoff_generic'].priority == 10
        assert 'creature_hostile_etb' not in tags

    def test_harmful_etb_is_not_a_payoff(self):
        card = make_card(
            'Pain Engine', 'Enchantment',
            "Whenever a creature enters, this deals 1 damage to that creature's controller.",
        )
        tags = _tags(analyze_card(card))
        assert 'creature_hostile_etb' in tags
        assert 'etb_payoff_generic' not in tags


def test_reminder_text_is_ignored():
    card = make_card('Wind Drake Test', 'Creature — Drake',
                     "Flying (This creature can't be blocked except by creatures with flying or reach.)")
    assert 'evasion_unblockable' not in _tags(analyze_card(card))


def test_tags_are_ordered_by_priority_then_namespace_then_name():
    card = make_card(
        'Busy Card', 'Legendary Creature — Elf Druid',
        'Flying\nWhen this creature enters, draw two cards.\n{T}: Add {G}.',
        keywords=['Flying'],
    )
    tags = list(analyze_card(card).mechanic_tags)
    assert tags == sorted(tags, key=lambda t: (-t.priority, tc.namespace_rank(t.name), t.name))


def test_analysis_is_deterministic():
    card = make_card('Divination', 'Sorcery', 'Draw two cards.')
    tagger = CardMechanicsTagger()
    assert tagger.analyze_card(card) == tagger.analyze_card(card)


def test_land_without_text_is_land_role():
    profile = analyze_card(make_card('Plain Land', 'Land'))
    assert profile.primary_type == 'land'
    assert profile.functional_roles == ('land',)


def test_textless_planeswalker_gets_loyalty_tag():
    tags = _tags(analyze_card(make_card('Blank Walker', 'Legendary Planeswalker — Test')))
    assert 'loyalty_abilities' in tags


def test_raw_mapping_accepted_and_staples_rate_high():
    profile = analyze_card({'id': 'sol', 'name': 'Sol Ring', 'type_line': 'Artifact', 'oracle_text': '{T}: Add {C}{C}.'})
    assert 'mana_generation' in profile.tag_names()
    assert profile.power_level >= tc.STAPLE_MIN_POWER


def test_unnamed_record_raises():
    with pytest.raises(CardAnalysisError):
        analyze_card({'type_line': 'Creature — Bear'})


def test_tags_grouped_by_category():
    profile = analyze_card(make_card('Divination', 'Sorcery', 'Draw two cards.'))
    grouped = profile_tags_by_category(profile)
    assert 'card_draw' in grouped[TagCategory.RESOURCE_GENERATION]
    assert 'type_sorcery' in grouped[TagCategory.CARD_TYPES]


class TestNamespaces:
    @pytest.mark.parametrize('name, namespace', [
        ('card_draw', ''),
        ('tribal_elf', 'tribal_'),
        ('elf_matters', '_matters'),
        ('ability_keyword_flying', 'ability_keyword_'),
        ('creature_type_elf', 'creature_type_'),
    ])
    def test_namespace_of(self, name, namespace):
        assert tc.namespace_of(name) == namespace
        assert tc.NAMESPACE_ORDER[tc.namespace_rank(name)] == namespace

    def test_matters_payoffs_do_not_raise_power_level(self):
        card = make_card('Elf Chief', 'Creature — Elf', cmc=3)
        assert CardMechanicsTagger._power_level(card, [make_tag('elf_matters', priority=9)]) == 5
        assert CardMechanicsTagger._power_level(card, [make_tag('card_draw', priority=9)]) == 6

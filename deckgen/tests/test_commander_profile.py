from __future__ import annotations

from deckgen.synergy.commander_profile import (
    CommanderProfileBuilder,
    strategies_for_tags,
    tribes_for_tags,
)
from deckgen.tagging.mechanics_tagger import analyze_card


def test_single_tag_signature():
    assert '+1/+1 counters' in strategies_for_tags({'proliferate'})


def test_group_signature_needs_every_tag():
    assert 'go_wide' not in strategies_for_tags({'token_creation'})
    assert 'go_wide' in strategies_for_tags({'token_creation', 'anthem_effect'})


def test_tribal_strategy_from_tribal_tags():
    assert 'tribal' in strategies_for_tags({'tribal_elf'})
    assert 'tribal' in strategies_for_tags({'goblin_matters'})


def test_no_strategy_for_vanilla_tags():
    assert strategies_for_tags({'type_creature', 'creature_type_bear'}) == frozenset()


def test_tribes_for_tags():
    tribes = tribes_for_tags({'tribal_elf', 'elf_matters', 'goblin_matters', 'card_draw'})
    assert tribes == {'elf': (True, True), 'goblin': (False, True)}


def test_builder_uses_commander_analysis(atraxa_card):
    profile = CommanderProfileBuilder().build(atraxa_card, analyze_card(atraxa_card))
    assert profile.name == atraxa_card.name
    assert 'proliferate' in profile.tags
    assert '+1/+1 counters' in profile.strategies
    assert profile.color_identity == ('W', 'U', 'B', 'G')
    assert profile.has('proliferate') and profile.has('+1/+1 counters')


def test_profile_is_deterministic(atraxa_card):
    builder = CommanderProfileBuilder()
    first = builder.build(atraxa_card, analyze_card(atraxa_card))
    second = builder.build(atraxa_card, analyze_card(atraxa_card))
    assert first == second
    assert first.to_dict()['strategies'] == sorted(first.strategies)

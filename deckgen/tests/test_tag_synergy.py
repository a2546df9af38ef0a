from __future__ import annotations

import pytest

from card_test_utils import make_card, make_profile, make_tag
from deckgen.synergy.commander_profile import strategies_for_tags
from deckgen.synergy.rules import SynergyRule
from deckgen.synergy.scorer import calculate_synergy
from deckgen.synergy.tag_synergy import TagBasedSynergyScorer
from deckgen.tagging.mechanics_tagger import analyze_card
from deckgen.type_definitions import CommanderProfile


def _commander(*tags, strategies=None):
    tag_set = frozenset(tags)
    return CommanderProfile(
        name='Test Commander',
        tags=tag_set,
        strategies=frozenset(strategies) if strategies is not None else strategies_for_tags(tag_set),
        color_identity=('G',),
    )


@pytest.fixture()
def scorer():
    return TagBasedSynergyScorer()


def test_token_doubler_for_token_commander(scorer):
    commander = _commander('token_creation')
    card = make_profile('Doubler', make_tag('token_doubling', priority=9, confidence=0.95))

    score, breakdown = scorer.calculate_synergy(commander, card)

    # 40 * 1.2 * 0.95 + 25 * 1.2 * 0.95 + 9 * 1.2 * 0.95
    assert score == pytest.approx(84.36)
    assert [(c.source, c.commander_key) for c in breakdown] == [
        ('rule', 'tokens'),
        ('rule', 'token_creation'),
        ('baseline', 'tokens'),
    ]
    assert breakdown[0].score == pytest.approx(45.6)


def test_shared_tag_scores_double_priority(scorer):
    commander = _commander('landfall', strategies=())
    card = make_profile('Lotus Cobra Test', make_tag('landfall', priority=9))
    score, breakdown = scorer.calculate_synergy(commander, card)
    # 9 * 2 * 1.1 from the shared tag, nothing else applies without strategies
    assert score == pytest.approx(19.8)
    assert breakdown[0].source == 'baseline'


def test_card_type_tags_never_match_directly(scorer):
    commander = _commander('type_creature', strategies=())
    card = make_profile('Bear', make_tag('type_creature', priority=3))
    assert scorer.calculate_synergy(commander, card) == (0.0, [])


class TestTribal:
    def test_tribe_member_gets_tier_bonus(self, scorer):
        commander = _commander('tribal_elf')
        card = make_profile('Elf', make_tag('creature_type_elf'))
        score, breakdown = scorer.calculate_synergy(commander, card)
        tribal = [c for c in breakdown if c.source == 'tribal']
        assert len(tribal) == 1
        assert tribal[0].score == pytest.approx(96.0)
        # plus the tribal-category baseline of 5 * 0.8
        assert score == pytest.approx(100.0)

    def test_double_bonus_with_matters_tag(self, scorer):
        commander = _commander('tribal_elf', 'elf_matters')
        card = make_profile('Elf', make_tag('creature_type_elf'))
        _, breakdown = scorer.calculate_synergy(commander, card)
        tribal = sorted(c.score for c in breakdown if c.source == 'tribal')
        assert tribal == [pytest.approx(40.0), pytest.approx(96.0)]

    def test_other_tribe_gets_nothing(self, scorer):
        commander = _commander('tribal_elf')
        card = make_profile('Goblin', make_tag('creature_type_goblin'))
        _, breakdown = scorer.calculate_synergy(commander, card)
        assert not [c for c in breakdown if c.source == 'tribal']


def test_anti_synergy_is_floored_at_zero(scorer):
    commander = _commander('etb_payoff_generic', strategies={'etb'})
    card = make_profile('Punisher', make_tag('creature_hostile_etb', priority=4, confidence=0.95))
    score, breakdown = scorer.calculate_synergy(commander, card)
    assert score == 0.0
    assert any(c.score < 0 for c in breakdown)


def test_confidence_scales_rule_contribution(scorer):
    commander = _commander('token_creation')
    sure = make_profile('Sure', make_tag('token_doubling', priority=9, confidence=1.0))
    unsure = make_profile('Unsure', make_tag('token_doubling', priority=9, confidence=0.6))
    assert scorer.calculate_synergy(commander, sure)[0] > scorer.calculate_synergy(commander, unsure)[0]


@pytest.mark.parametrize('commander_tags, strategies, card_tag', [
    (('landfall',), (), 'landfall'),
    (('token_creation',), None, 'token_doubling'),
], ids=['shared-tag', 'category-strategy'])
def test_confidence_scales_baseline_contribution(scorer, commander_tags, strategies, card_tag):
    commander = _commander(*commander_tags, strategies=strategies)

    def baseline(confidence):
        card = make_profile('Card', make_tag(card_tag, priority=9, confidence=confidence))
        _, breakdown = scorer.calculate_synergy(commander, card)
        return [c.score for c in breakdown if c.source == 'baseline']

    sure, unsure = baseline(1.0), baseline(0.3)
    assert sure and len(sure) == len(unsure)
    assert unsure == [pytest.approx(s * 0.3) for s in sure]


def test_custom_rule(scorer):
    commander = _commander('card_draw', strategies=())
    card = make_profile('Tutor', make_tag('tutor', priority=9))
    assert scorer.calculate_synergy(commander, card)[0] == 0.0
    scorer.add_custom_rule(SynergyRule(commander_tag='card_draw', card_tag='tutor', score=10, description='test'))
    assert scorer.calculate_synergy(commander, card)[0] == pytest.approx(10.0)


def test_module_level_helper_matches_scorer():
    commander = _commander('token_creation')
    card = make_profile('Doubler', make_tag('token_doubling', priority=9, confidence=0.95))
    assert calculate_synergy(commander, card)[0] == pytest.approx(84.36)


def test_scoring_is_deterministic(scorer):
    commander = _commander('token_creation', 'sacrifice_outlet')
    card = make_profile('Mixed', make_tag('token_creation', 7), make_tag('sacrifice_outlet', 7), make_tag('tutor', 9))
    assert scorer.calculate_synergy(commander, card) == scorer.calculate_synergy(commander, card)


def test_token_maker_prefers_token_commander(scorer):
    card = make_card('Squad Leader', 'Creature — Human Soldier',
                     'When this creature enters, create a 1/1 white Soldier creature token.')
    profile = analyze_card(card)
    assert 'token_creation' in profile.tag_names()
    with_tokens = scorer.calculate_synergy(_commander('token_creation'), profile)[0]
    without = scorer.calculate_synergy(_commander('card_draw', strategies=()), profile)[0]
    assert with_tokens > without

from __future__ import annotations

import pytest

from card_test_utils import make_card, make_profile
from deckgen.deck_builder import mana_curve as mc
from deckgen.deck_builder.phases.phase2_pool import Candidate
from deckgen.deck_builder.phases.phase4_selection import rank_candidates


@pytest.mark.parametrize('cmc, bucket', [(0, '0'), (None, '0'), (2.0, '2'), (5.5, '5'), (6, '6+'), (12, '6+')])
def test_curve_bucket(cmc, bucket):
    assert mc.curve_bucket(cmc) == bucket


class TestArchetype:
    @pytest.mark.parametrize('text, cmc, power, archetype', [
        ('Haste', 3, '2', 'aggro'),
        ('', 3, '5', 'aggro'),
        ('Whenever you cast an instant or sorcery spell, draw a card.', 4, '3', 'control'),
        ('You may play an additional land on each of your turns.', 4, '3', 'ramp'),
        ('', 7, '7', 'ramp'),
        ('Whenever this creature becomes tapped, untap target permanent.', 4, '3', 'combo'),
        ('Vigilance', 4, '4', 'midrange'),
    ])
    def test_first_matching_signal(self, text, cmc, power, archetype):
        commander = make_card('Leader', 'Legendary Creature — Human', text, cmc=cmc, power=power)
        assert mc.determine_curve_archetype(commander) == archetype

    def test_atraxa_is_midrange(self, atraxa_card):
        assert mc.determine_curve_archetype(atraxa_card) == 'midrange'

    def test_unknown_archetype_targets_midrange(self):
        assert mc.target_curve('tempo') == mc.CURVE_ARCHETYPES['midrange']


def test_analyze_skips_lands():
    cards = [
        make_card('Sol Ring Test', 'Artifact', cmc=1),
        make_card('Bear', 'Creature — Bear', cmc=2),
        make_card('Titan', 'Creature — Giant', cmc=6),
        make_card('Eldrazi', 'Creature — Eldrazi', cmc=10),
        make_card('Forest', 'Basic Land — Forest'),
    ]
    assert mc.analyze_mana_curve(cards) == {'0': 0, '1': 1, '2': 1, '3': 0, '4': 0, '5': 0, '6+': 2}


def test_average_and_deviation():
    assert mc.average_cmc({'1': 2, '6+': 2}) == pytest.approx(3.5)
    assert mc.average_cmc({}) == 0.0
    assert mc.curve_deviation({'2': 30}, mc.CURVE_ARCHETYPES['midrange']) == 69


def test_recommendations():
    recs = mc.curve_recommendations({'2': 30}, mc.CURVE_ARCHETYPES['midrange'])
    assert 'Consider cutting 16 cards at 2 CMC' in recs
    assert 'Consider adding 6 more cards at 6+ CMC' in recs
    assert recs[-1] == 'Curve might be too low - consider some higher impact cards'
    # within the slack nothing is flagged
    assert mc.curve_recommendations(mc.CURVE_ARCHETYPES['midrange'], mc.CURVE_ARCHETYPES['midrange']) == []


def test_perform_analysis(atraxa_card):
    cards = [make_card(f'Spell {i}', 'Sorcery', cmc=3) for i in range(4)]
    analysis = mc.perform_mana_curve_analysis(cards, atraxa_card)
    assert analysis.archetype == 'midrange'
    assert analysis.current['3'] == 4
    assert analysis.average_cmc == pytest.approx(3.0)
    assert analysis.distribution() == '0=0, 1=0, 2=0, 3=4, 4=0, 5=0, 6+=0'


def test_curve_breaks_score_ties():
    def candidate(name, cmc):
        return Candidate(card=make_card(name, 'Sorcery', cmc=cmc), profile=make_profile(name), category='sorceries')

    cheap, mid = candidate('Alpha', 0), candidate('Beta', 3)
    assert [c.name for c in rank_candidates([mid, cheap])] == ['Alpha', 'Beta']
    midrange = mc.CURVE_ARCHETYPES['midrange']
    assert [c.name for c in rank_candidates([cheap, mid], midrange)] == ['Beta', 'Alpha']
    # score still comes first
    cheap.theme_bonus = 1.0
    assert [c.name for c in rank_candidates([mid, cheap], midrange)] == ['Alpha', 'Beta']

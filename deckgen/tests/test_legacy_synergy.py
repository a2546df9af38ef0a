from __future__ import annotations

import pytest

from card_test_utils import make_card
from deckgen.synergy.commander_profile import CommanderProfileBuilder
from deckgen.synergy.keyword_synergy import KeywordCatalog
from deckgen.synergy.legacy_synergy import calculate_legacy_synergy
from deckgen.synergy.scorer import SynergyScorer
from deckgen.tagging.mechanics_tagger import analyze_card

SOL_RING = make_card('Sol Ring', 'Artifact', '{T}: Add {C}{C}.')


def _vanilla_legend():
    return make_card('Vanilla Legend', 'Legendary Creature — Human', '', color_identity=['W'])


class TestLegacyHeuristic:
    def test_colorless_staple(self):
        score, items = calculate_legacy_synergy(_vanilla_legend(), SOL_RING)
        assert score == 7
        assert {i.commander_key for i in items} == {'color_identity', 'staple'}
        assert all(i.source == 'legacy' for i in items)

    def test_color_overlap(self):
        commander = make_card('Two Color', 'Legendary Creature — Elf', '', color_identity=['W', 'G'])
        card = make_card('Green Thing', 'Creature — Elf', '', color_identity=['G'])
        assert calculate_legacy_synergy(commander, card)[0] == 1

    def test_etb_payoff_for_blink_commander(self):
        commander = make_card('Blinker', 'Legendary Creature — Wizard',
                              'Exile another target creature you control, then return it to the battlefield.',
                              color_identity=['W'])
        card = make_card('Payoff', 'Enchantment', 'Whenever a creature enters, you gain 1 life.', color_identity=['W'])
        score, items = calculate_legacy_synergy(commander, card)
        assert any(i.commander_key == 'etb' and i.score == 10 for i in items)
        # one shared color plus the payoff; the commander never mentions enchantments
        assert score == 11

    def test_type_words_and_shared_keywords(self):
        commander = make_card('Artificer', 'Legendary Creature — Human', 'Artifact spells you cast have flying.')
        card = make_card('Thopter Kit', 'Artifact', 'Equipped creature has flying.')
        score, items = calculate_legacy_synergy(commander, card)
        keys = {i.commander_key: i.score for i in items}
        assert keys['type_artifact'] == 3
        assert keys['keywords'] == 1
        assert score == 2 + 3 + 1


class TestSynergyScorer:
    @pytest.fixture()
    def scorer(self, tmp_path):
        catalog = KeywordCatalog(cache_path=str(tmp_path / 'kw.json'), fetch_enabled=False)
        return SynergyScorer(keyword_catalog=catalog)

    def _score(self, scorer, commander_card, card):
        commander = CommanderProfileBuilder().build(commander_card, analyze_card(commander_card))
        return scorer.score(commander_card, commander, card, analyze_card(card))

    def test_legacy_used_only_without_tag_synergy(self, scorer):
        result = self._score(scorer, _vanilla_legend(), SOL_RING)
        assert result.used_legacy
        assert result.tag_score == 0
        assert result.total == 7
        assert result.breakdown[0].source == 'legacy'

    def test_tag_synergy_replaces_legacy(self, scorer, atraxa_card):
        card = make_card('Counter Mage', 'Creature — Human Wizard',
                         'When this creature enters, put a +1/+1 counter on target creature.',
                         color_identity=['U'])
        result = self._score(scorer, atraxa_card, card)
        assert not result.used_legacy
        assert result.legacy_score == 0
        assert result.tag_score > 0
        assert result.total == pytest.approx(result.tag_score + result.keyword_score)

    def test_keyword_overlap_is_added(self, scorer):
        commander = make_card('Sky Legend', 'Legendary Creature — Bird', 'Flying', keywords=['Flying'])
        card = make_card('Sky Bird', 'Creature — Bird', 'Flying', keywords=['Flying'])
        result = self._score(scorer, commander, card)
        assert result.keyword_score == 10.0
        assert 'flying' in result.shared_keywords
        assert any(c.source == 'keyword' for c in result.breakdown)

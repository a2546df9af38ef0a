from __future__ import annotations

import pandas as pd

from card_test_utils import make_card
from deckgen.tagging.analysis_cache import AnalysisCache
from deckgen.tagging.mechanics_tagger import analyze_card
from deckgen.tagging.parallel_utils import analyze_cards
from deckgen.tagging.tag_index import TagIndex
from deckgen.type_definitions import Card, TagCategory


def _index() -> TagIndex:
    index = TagIndex()
    index.build([
        ('Divination', ['card_draw', 'type_sorcery']),
        ('Harmonize', ['card_draw']),
        ('Demonic Tutor', ['tutor', 'type_sorcery']),
        ('Blank', []),
    ])
    return index


class TestTagIndex:
    def test_build_stats_skip_untagged_cards(self):
        stats = _index().get_stats()
        assert stats.total_cards == 3
        assert stats.total_tags == 3
        assert stats.total_mappings == 5

    def test_and_or_queries(self):
        index = _index()
        assert index.get_cards_with_all_tags(['card_draw', 'type_sorcery']) == {'Divination'}
        assert index.get_cards_with_any_tags(['tutor', 'card_draw']) == {'Divination', 'Harmonize', 'Demonic Tutor'}
        assert index.get_cards_with_all_tags([]) == set()
        assert index.get_cards_with_tag('unknown') == set()

    def test_tags_for_card_are_sorted_copies(self):
        index = _index()
        tags = index.get_tags_for_card('Divination')
        assert tags == ['card_draw', 'type_sorcery']
        tags.append('mutated')
        assert index.get_tags_for_card('Divination') == ['card_draw', 'type_sorcery']

    def test_popular_tags_order(self):
        assert _index().get_popular_tags(limit=2) == [('card_draw', 2), ('type_sorcery', 2)]

    def test_available_tags_carry_category_and_count(self):
        available = {t['name']: t for t in _index().get_available_tags()}
        assert available['card_draw']['count'] == 2
        assert available['card_draw']['category'] == TagCategory.RESOURCE_GENERATION.value
        assert available['type_sorcery']['category'] == TagCategory.CARD_TYPES.value

    def test_build_from_frame_normalizes_stored_tags(self):
        frame = pd.DataFrame({
            'name': ['Divination', 'Harmonize'],
            'tags': ['["Card Draw"]', 'card_draw, tutor'],
        })
        index = TagIndex()
        index.build_from_frame(frame)
        assert index.get_cards_with_tag('card_draw') == {'Divination', 'Harmonize'}

    def test_build_from_frame_without_tags_column(self):
        index = TagIndex()
        stats = index.build_from_frame(pd.DataFrame({'name': ['Divination']}))
        assert stats.total_cards == 0

    def test_build_from_profiles(self):
        profile = analyze_card(make_card('Divination', 'Sorcery', 'Draw two cards.'))
        index = TagIndex()
        index.build_from_profiles([profile])
        assert 'Divination' in index.get_cards_with_tag('card_draw')


class TestAnalysisCache:
    def test_hit_and_miss_counting(self):
        cache = AnalysisCache()
        card = make_card('Divination', 'Sorcery', 'Draw two cards.')
        calls = []

        def analyze(c):
            calls.append(c.name)
            return analyze_card(c)

        first = cache.get_or_analyze(card, analyze)
        second = cache.get_or_analyze(card, analyze)
        assert first is second
        assert calls == ['Divination']
        assert (cache.hits, cache.misses) == (1, 1)

    def test_changed_text_is_a_new_entry(self):
        cache = AnalysisCache()
        card = make_card('Divination', 'Sorcery', 'Draw two cards.')
        cache.put(card, analyze_card(card))
        errata = make_card('Divination', 'Sorcery', 'Draw three cards.')
        assert cache.get(errata) is None
        assert cache.get(card) is not None

    def test_bounded_size_drops_oldest(self):
        cache = AnalysisCache(max_entries=2)
        cards = [make_card(f'Card {i}', 'Sorcery', 'Draw a card.') for i in range(3)]
        for card in cards:
            cache.put(card, analyze_card(card))
        assert len(cache) == 2
        assert cache.get(cards[0]) is None


class TestBulkAnalysis:
    def _cards(self):
        return [
            make_card('B Card', 'Sorcery', 'Draw two cards.', id='b'),
            make_card('A Card', 'Instant', 'Counter target spell.', id='a'),
            Card(id='z', name='', type_line='Creature'),
        ]

    def test_serial_results_sorted_and_failures_recorded(self):
        result = analyze_cards(self._cards(), workers=1)
        assert [card.id for card, _ in result.analyzed] == ['a', 'b']
        assert len(result.failures) == 1
        assert set(result.profiles_by_id()) == {'a', 'b'}

    def test_threaded_matches_serial(self):
        serial = analyze_cards(self._cards(), workers=1)
        threaded = analyze_cards(self._cards(), workers=3)
        assert [p for _, p in serial.analyzed] == [p for _, p in threaded.analyzed]

    def test_cache_is_consulted(self):
        cache = AnalysisCache()
        cards = self._cards()[:2]
        analyze_cards(cards, workers=1, cache=cache)
        analyze_cards(cards, workers=1, cache=cache)
        assert cache.hits == 2

from __future__ import annotations

import pandas as pd
import pytest

from card_test_utils import ATRAXA
from deckgen.exceptions import CardSourceUnavailableError
from deckgen.services.card_source import CardFilters, DataFrameCardSource

CORPUS_SIZE = 116


class TestLookup:
    def test_case_insensitive_name(self, card_source):
        card = card_source.get_card_by_name("atraxa, PRAETORS' voice")
        assert card is not None
        assert card.name == ATRAXA
        assert card.color_identity == ('W', 'U', 'B', 'G')

    def test_front_face_of_split_card(self, card_source):
        card = card_source.get_card_by_name('Fire')
        assert card.name == 'Fire // Ice'

    def test_unknown_and_blank_names(self, card_source):
        assert card_source.get_card_by_name('No Such Card') is None
        assert card_source.get_card_by_name('   ') is None


class TestFilters:
    def test_color_identity_and_legality(self, card_source):
        cards = card_source.search_by_filters(CardFilters(color_identity=['W', 'U', 'B', 'G']))
        names = {c.name for c in cards}
        assert 'Test Red Bolt' not in names
        assert 'Fire // Ice' not in names
        assert 'Primeval Titan' not in names
        assert 'Karn, Test Golem' in names
        assert len(cards) == CORPUS_SIZE - 3

    def test_type_and_name_filters(self, card_source):
        walkers = card_source.search_by_filters(CardFilters(type_includes=['planeswalker']))
        assert len(walkers) == 3
        no_creatures = card_source.search_by_filters(CardFilters(type_excludes=['creature'], exclude_names=[ATRAXA]))
        assert all('creature' not in c.type_line.lower() for c in no_creatures)

    def test_text_query(self, card_source):
        names = {c.name for c in card_source.search_by_filters(CardFilters(text_query='proliferate'))}
        assert names == {ATRAXA, 'Test Walker 0', 'Test Walker 1', 'Test Walker 2'}

    def test_limit(self, card_source):
        assert len(card_source.search_by_filters(CardFilters(), limit=10)) == 10

    def test_missing_legality_counts_as_legal(self):
        source = DataFrameCardSource(frame=pd.DataFrame([
            {'id': 'x', 'name': 'Unknown Legality', 'type_line': 'Artifact', 'legalities': None},
        ]))
        assert len(source.search_by_filters(CardFilters())) == 1

    def test_duplicate_names_collapse(self, corpus_records):
        frame = pd.DataFrame(corpus_records + [dict(corpus_records[0], id='reprint')])
        source = DataFrameCardSource(frame=frame)
        matches = source.search_by_filters(CardFilters(text_query='praetors'))
        assert [c.id for c in matches] == ['cmd-atraxa']


class TestFileBacked:
    def test_loads_json_snapshot(self, corpus_file):
        source = DataFrameCardSource(corpus_file)
        assert source.get_card_by_name(ATRAXA).name == ATRAXA
        stats = source.get_stats()
        assert stats['total_cards'] == CORPUS_SIZE
        assert stats['file_path'] == corpus_file

    def test_missing_snapshot(self, tmp_path):
        source = DataFrameCardSource(str(tmp_path / 'missing.json'))
        with pytest.raises(CardSourceUnavailableError):
            source.get_card_by_name(ATRAXA)

    def test_clear_cache_reloads(self, corpus_file):
        source = DataFrameCardSource(corpus_file)
        source.load()
        source.clear_cache()
        assert source.get_stats()['total_cards'] == CORPUS_SIZE


class TestAvailableTags:
    def test_analyzes_corpus_without_stored_tags(self, card_source):
        tags = {t['name']: t for t in card_source.get_available_tags()}
        assert tags['proliferate']['count'] == 4
        assert tags['counterspell']['category'] == 'removal_interaction'

    def test_uses_stored_tags_when_present(self):
        frame = pd.DataFrame([
            {'id': 'a', 'name': 'Card A', 'type_line': 'Artifact', 'tags': '["Card Draw"]'},
            {'id': 'b', 'name': 'Card B', 'type_line': 'Artifact', 'tags': 'card_draw, tutor'},
        ])
        tags = {t['name']: t['count'] for t in DataFrameCardSource(frame=frame).get_available_tags()}
        assert tags == {'card_draw': 2, 'tutor': 1}

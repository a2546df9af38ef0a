from __future__ import annotations

import json

import pytest
import requests

from deckgen.synergy.keyword_synergy import (
    STATIC_VERSION,
    KeywordCatalog,
    detect_specific_keywords,
)

PAYLOAD = {
    'meta': {'version': '5.2.2', 'date': '2026-10-01'},
    'data': {
        'abilityWords': ['Landfall', 'Raid'],
        'keywordAbilities': ['Flying', 'Trample', 'Storm', 'Cascade'],
        'keywordActions': ['Scry', 'Proliferate'],
    },
}


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture()
def static_catalog(tmp_path):
    return KeywordCatalog(cache_path=str(tmp_path / 'kw.json'), fetch_enabled=False)


class TestCatalogLoading:
    def test_fetch_parses_and_caches_to_disk(self, tmp_path):
        cache = tmp_path / 'kw.json'
        session = FakeSession(FakeResponse(PAYLOAD))
        catalog = KeywordCatalog(url='https://example.test/Keywords.json', cache_path=str(cache),
                                 fetch_enabled=True, session=session)

        categories = catalog.get_keyword_categories()
        assert categories['ability_words'] == ['landfall', 'raid']
        assert catalog.metadata()['version'] == '5.2.2'
        assert catalog.metadata()['total_keywords'] == 8
        assert len(session.calls) == 1
        assert 'fetched_on' in json.loads(cache.read_text(encoding='utf-8'))

    def test_same_day_disk_cache_skips_network(self, tmp_path):
        cache = str(tmp_path / 'kw.json')
        KeywordCatalog(cache_path=cache, fetch_enabled=True, session=FakeSession(FakeResponse(PAYLOAD))).metadata()

        offline = FakeSession(error=requests.ConnectionError('offline'))
        catalog = KeywordCatalog(cache_path=cache, fetch_enabled=True, session=offline)
        assert catalog.metadata()['version'] == '5.2.2'
        assert offline.calls == []

    def test_network_failure_falls_back_to_static(self, tmp_path):
        session = FakeSession(error=requests.ConnectionError('offline'))
        catalog = KeywordCatalog(cache_path=str(tmp_path / 'kw.json'), fetch_enabled=True, session=session)
        assert catalog.metadata()['version'] == STATIC_VERSION
        assert 'landfall' in catalog.get_keyword_categories()['ability_words']

    def test_http_error_falls_back_to_static(self, tmp_path):
        session = FakeSession(FakeResponse(status_code=503))
        catalog = KeywordCatalog(cache_path=str(tmp_path / 'kw.json'), fetch_enabled=True, session=session)
        assert catalog.metadata()['version'] == STATIC_VERSION

    def test_bad_payload_falls_back_to_static(self, tmp_path):
        session = FakeSession(FakeResponse({'unexpected': True}))
        catalog = KeywordCatalog(cache_path=str(tmp_path / 'kw.json'), fetch_enabled=True, session=session)
        assert catalog.metadata()['version'] == STATIC_VERSION

    def test_fetch_disabled_never_calls_network(self, tmp_path):
        session = FakeSession(FakeResponse(PAYLOAD))
        catalog = KeywordCatalog(cache_path=str(tmp_path / 'kw.json'), fetch_enabled=False, session=session)
        assert catalog.metadata()['version'] == STATIC_VERSION
        assert session.calls == []


class TestKeywordSynergy:
    def test_rare_and_common_shared_keywords(self, static_catalog):
        commander = 'Flying\nLandfall — Whenever a land you control enters, draw a card.'
        card = 'Flying\nLandfall — Whenever a land you control enters, you gain 2 life.'
        result = static_catalog.calculate_keyword_synergy(commander, card)
        assert result.shared_keywords == ('landfall', 'flying')
        # 20 + 10 plus the multi-match bonus of 2 per keyword
        assert result.score == 34.0
        assert result.analysis == 'Shared keywords: landfall, flying'

    def test_single_shared_keyword_has_no_bonus(self, static_catalog):
        assert static_catalog.calculate_keyword_synergy('Flying', 'Flying, trample').score == 10.0

    def test_score_is_capped(self, static_catalog):
        result = static_catalog.calculate_keyword_synergy('Storm, cascade', 'Cascade\nStorm')
        assert result.score == 35.0

    def test_no_overlap(self, static_catalog):
        result = static_catalog.calculate_keyword_synergy('Flying', 'Trample')
        assert result.score == 0.0
        assert result.analysis == 'No shared keywords found'

    def test_keywords_match_whole_words(self, static_catalog):
        found = static_catalog.analyze_card_keywords('Flashback {2}{R}')
        assert 'flashback' in found.keyword_abilities
        assert 'flash' not in found.keyword_abilities

    def test_pseudo_keywords_score_by_tier(self, static_catalog):
        result = static_catalog.calculate_keyword_synergy('{T}: Add {G}.', '{T}: Add {R}.')
        assert result.shared_keywords == ('Tap Ability',)
        assert result.score == 6.0

    def test_has_keyword_synergy(self, static_catalog):
        assert static_catalog.has_keyword_synergy('Proliferate.', 'Then proliferate.', ['prolif'])
        assert not static_catalog.has_keyword_synergy('Proliferate.', 'Flying', ['proliferate'])


@pytest.mark.parametrize('text, expected', [
    ('{T}: Add {G}.', 'Tap Ability'),
    ('Tap target creature.', 'Tap Target'),
    ('This land enters tapped.', 'Enters Tapped'),
    ('Untap target permanent.', 'Untap Effect'),
    ("This creature doesn't untap during your untap step.", 'Prevent Untap'),
    ('Create a Treasure token.', 'Create Treasure'),
    ('Create a 1/1 green Saproling creature token.', 'Create Creature Token'),
    ('Create a Clue artifact token.', 'Create Artifact Token'),
    ('Create a token that is a copy of target permanent.', 'Create Token'),
])
def test_specific_keywords(text, expected):
    assert expected in detect_specific_keywords(text)


def test_empty_text_has_no_keywords(static_catalog):
    assert static_catalog.analyze_card_keywords('').total == 0

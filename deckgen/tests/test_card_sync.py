from __future__ import annotations

from datetime import date

import pytest
import requests

from card_test_utils import make_card
from deckgen.exceptions import CardSourceUnavailableError, SyncCancelledError
from deckgen.services.card_sync import (
    CancellationToken,
    CardSyncJob,
    ScryfallSearchClient,
    build_sync_query,
    has_significant_changes,
)


def _raw(card_id, name, text='Draw a card.', type_line='Sorcery'):
    return {'id': card_id, 'name': name, 'type_line': type_line, 'oracle_text': text,
            'color_identity': ['U'], 'legalities': {'commander': 'legal'}}


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
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _client(session, sleeps):
    return ScryfallSearchClient(base_url='https://api.test/cards/search', session=session,
                                rate_limit_delay=0.1, sleep=sleeps.append)


def test_sync_query():
    assert build_sync_query() == 'game:paper legal:commander lang:en -is:digital'
    assert build_sync_query(date(2024, 1, 1)).endswith('firstprint>2024-01-01')


class TestSearchClient:
    def test_follows_pages(self):
        sleeps = []
        session = FakeSession(
            FakeResponse({'data': [_raw('1', 'One'), _raw('2', 'Two')], 'has_more': True,
                          'next_page': 'https://api.test/cards/search?page=2'}),
            FakeResponse({'data': [_raw('3', 'Three')], 'has_more': False}),
        )
        names = [c['name'] for c in _client(session, sleeps).search('q')]
        assert names == ['One', 'Two', 'Three']
        assert session.calls[0][1]['q'] == 'q'
        assert session.calls[1] == ('https://api.test/cards/search?page=2', None)
        assert sleeps == [0.1]

    def test_404_means_no_results(self):
        session = FakeSession(FakeResponse(status_code=404))
        assert list(_client(session, []).search('q')) == []

    def test_retries_after_rate_limit(self):
        sleeps = []
        session = FakeSession(
            FakeResponse(status_code=429),
            FakeResponse({'data': [_raw('1', 'One')], 'has_more': False}),
        )
        assert len(list(_client(session, sleeps).search('q'))) == 1
        assert sleeps == [1]

    def test_gives_up_after_max_retries(self):
        sleeps = []
        session = FakeSession(*[requests.ConnectionError('down')] * 3)
        with pytest.raises(CardSourceUnavailableError):
            list(_client(session, sleeps).search('q'))
        assert sleeps == [1, 2]

    def test_cancelled_before_first_page(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(SyncCancelledError):
            list(_client(FakeSession(), []).search('q', token))


class TestSyncJob:
    def _job(self, pages, known=None, batch_size=10):
        store = {}
        statuses = []
        known = known or {}

        def sink(card, profile, status):
            store[card.id] = (card, profile)
            statuses.append((card.name, status))

        session = FakeSession(*[FakeResponse(p) for p in pages])
        job = CardSyncJob(_client(session, []), sink=sink, lookup=known.get, batch_size=batch_size)
        return job, store, statuses

    def test_new_changed_and_unchanged_cards(self):
        unchanged = make_card('Same', 'Sorcery', 'Draw a card.', id='2', color_identity=['U'])
        changed = make_card('Errata', 'Sorcery', 'Draw a card.', id='3', color_identity=['U'])
        page = {'data': [
            _raw('1', 'Fresh'),
            _raw('2', 'Same'),
            _raw('3', 'Errata', text='Draw two cards.'),
        ], 'has_more': False}
        job, store, statuses = self._job([page], known={'2': unchanged, '3': changed})

        result = job.run()

        assert result.processed == 3
        assert (result.new_cards, result.updated, result.failed) == (1, 1, 0)
        assert statuses == [('Fresh', 'new'), ('Errata', 'updated')]
        assert 'card_draw' in store['3'][1].tag_names()
        assert not result.stopped

    def test_unnamed_card_is_counted_as_failure(self):
        page = {'data': [{'id': '9', 'type_line': 'Artifact'}], 'has_more': False}
        job, store, _ = self._job([page])
        result = job.run()
        assert result.failed == 1
        assert store == {}

    def test_cancellation_returns_partial_result(self):
        token = CancellationToken()
        page = {'data': [_raw(str(i), f'Card {i}') for i in range(5)], 'has_more': False}
        job, store, _ = self._job([page], batch_size=2)
        original_sink = job.sink

        def cancelling_sink(card, profile, status):
            original_sink(card, profile, status)
            token.cancel()

        job.sink = cancelling_sink
        result = job.run(token)

        assert result.stopped
        assert result.processed == 2
        assert len(store) == 2
        assert result.to_dict()['stopped'] is True


def test_significant_change_detection():
    base = make_card('Card', 'Sorcery', 'Draw a card.')
    assert not has_significant_changes(base, make_card('Card', 'Sorcery', 'Draw a card.'))
    assert has_significant_changes(base, make_card('Card', 'Instant', 'Draw a card.'))

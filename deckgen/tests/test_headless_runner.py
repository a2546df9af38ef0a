from __future__ import annotations

import json

from card_test_utils import ATRAXA
from deckgen import headless_runner


def test_json_output(corpus_file, capsys):
    code = headless_runner._main(['--cards', corpus_file, '--commander', ATRAXA, '--seed', '3', '--json'])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload['commander']['name'] == ATRAXA
    assert len(payload['cards']) == 99
    assert sum(payload['role_breakdown'].values()) == 99


def test_text_output(corpus_file, capsys):
    code = headless_runner._main(['--cards', corpus_file, '--commander', ATRAXA, '--planeswalkers', '1'])
    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith(f"Commander: {ATRAXA}")
    assert 'Planeswalker (1)' in out
    assert 'Total: 100 cards' in out


def test_unknown_commander_exits_2(corpus_file, capsys):
    assert headless_runner._main(['--cards', corpus_file, '--commander', 'Nobody']) == 2
    assert 'Nobody' in capsys.readouterr().out


def test_invalid_weight_exits_2(corpus_file):
    assert headless_runner._main(['--cards', corpus_file, '--commander', ATRAXA, '--creatures', '30']) == 2


def test_missing_corpus_exits_1(tmp_path):
    missing = str(tmp_path / 'nope.json')
    assert headless_runner._main(['--cards', missing, '--commander', ATRAXA]) == 1


class TestDryRun:
    def test_cli_env_and_config_precedence(self, tmp_path, monkeypatch, capsys):
        config = tmp_path / 'deck.json'
        config.write_text(json.dumps({
            'commander': ATRAXA,
            'keywords': ['tokens'],
            'random_tag_count': 2,
            'card_type_weights': {'creatures': 9, 'artifacts': 3},
        }), encoding='utf-8')
        monkeypatch.setenv('DECK_ARTIFACTS', '7')

        code = headless_runner._main(['--config', str(config), '--creatures', '12', '--dry-run'])
        resolved = json.loads(capsys.readouterr().out)

        assert code == 0
        assert resolved['commander'] == ATRAXA
        constraints = resolved['constraints']
        assert constraints['card_type_weights'] == {'creatures': 12, 'artifacts': 7}
        assert constraints['keywords'] == ['tokens']
        assert constraints['random_tag_count'] == 2
        assert constraints['prefer_cheapest'] is False

    def test_bad_config_exits_2(self, tmp_path):
        config = tmp_path / 'deck.json'
        config.write_text('[1, 2]', encoding='utf-8')
        assert headless_runner._main(['--config', str(config), '--dry-run']) == 2


class TestAnalyze:
    def test_prints_profile(self, corpus_file, capsys):
        assert headless_runner._main(['--cards', corpus_file, '--analyze', 'Test Instant 00']) == 0
        out = capsys.readouterr().out
        assert out.startswith('Test Instant 00: primary=')
        assert 'counterspell' in out

    def test_unknown_card(self, corpus_file, capsys):
        assert headless_runner._main(['--cards', corpus_file, '--analyze', 'Missing Card']) == 2
        assert 'Card not found: Missing Card' in capsys.readouterr().out

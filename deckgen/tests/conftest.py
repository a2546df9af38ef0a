"""Pytest configuration: import path, environment isolation and corpus fixtures."""

import os
import sys
import tempfile
from typing import Any, Dict, List

import pytest

# Repository root (three levels up from this file)
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Log files go to a scratch dir; logging_util reads this at import time
os.environ.setdefault('DECKGEN_LOG_DIR', tempfile.mkdtemp(prefix='deckgen-logs-'))
os.environ.setdefault('DECKGEN_FETCH_KEYWORDS', '0')

import pandas as pd  # noqa: E402

from card_test_utils import build_corpus_records  # noqa: E402
from deckgen.services.card_source import DataFrameCardSource  # noqa: E402
from deckgen.type_definitions import Card  # noqa: E402


@pytest.fixture(autouse=True)
def ensure_test_environment(tmp_path, monkeypatch):
    """Keep every test off the network and away from real card files."""
    monkeypatch.setenv('DECKGEN_FETCH_KEYWORDS', '0')
    monkeypatch.setenv('CARD_FILES_DIR', str(tmp_path / 'card_files'))
    monkeypatch.setenv('DECKGEN_KEYWORDS_CACHE', str(tmp_path / 'keywords.json'))
    yield


@pytest.fixture()
def corpus_records() -> List[Dict[str, Any]]:
    return build_corpus_records()


@pytest.fixture()
def corpus_frame(corpus_records) -> pd.DataFrame:
    return pd.DataFrame(corpus_records)


@pytest.fixture()
def card_source(corpus_frame) -> DataFrameCardSource:
    return DataFrameCardSource(frame=corpus_frame)


@pytest.fixture()
def corpus_file(tmp_path, corpus_frame) -> str:
    path = tmp_path / 'cards.json'
    corpus_frame.to_json(path, orient='records')
    return str(path)


@pytest.fixture()
def atraxa_card(corpus_records) -> Card:
    return Card.from_record(corpus_records[0])

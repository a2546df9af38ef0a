from __future__ import annotations

import pytest

from deckgen.deck_builder.color_identity_utils import (
    canon_color_code,
    color_label_from_code,
    format_color_label,
    is_identity_subset,
    is_multicolor,
)


@pytest.mark.parametrize('identity, expected', [
    (['G', 'W'], 'WG'),
    ('B, U', 'UB'),
    ('["G", "U", "B", "W"]', 'WUBG'),
    ([], 'C'),
    (None, 'C'),
])
def test_canon_color_code(identity, expected):
    assert canon_color_code(identity) == expected


@pytest.mark.parametrize('code, expected', [
    ('W', 'White (W)'),
    ('C', 'Colorless (C)'),
    ('UB', 'Dimir (UB)'),
    ('WUBG', 'Witch-Maw (WUBG)'),
    ('WUBRG', 'Five-Color (WUBRG)'),
    ('GW', 'Green / White (GW)'),
    ('', ''),
])
def test_color_label_from_code(code, expected):
    assert color_label_from_code(code) == expected


def test_format_color_label_canonicalizes_first():
    assert format_color_label(['G', 'W']) == 'Selesnya (WG)'
    assert format_color_label([]) == 'Colorless (C)'


def test_identity_subset_and_multicolor():
    assert is_identity_subset([], ['G'])
    assert is_identity_subset(['G'], 'WUBG')
    assert not is_identity_subset(['R'], ['W', 'U', 'B', 'G'])
    assert is_multicolor('WU')
    assert not is_multicolor(['G'])
    assert not is_multicolor([])

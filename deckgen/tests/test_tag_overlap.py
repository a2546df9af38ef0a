from __future__ import annotations

import importlib
import json

from deckgen.tagging.tag_overlap import (
    TagUnionFind,
    build_canonical_map,
    cleanup_overlapping_tags,
    find_overlapping_pairs,
)

cleanup_script = importlib.import_module('deckgen.scripts.cleanup_overlapping_tags')


def _sample_card_tags():
    return {
        'Serra Angel': ['mechanic_flying', 'ability_keyword_flying', 'card_draw'],
        'Wind Drake': ['mechanic_flying'],
        'Divination': ['card_draw'],
    }


def test_find_overlapping_pairs():
    names = ['mechanic_flying', 'ability_keyword_flying', 'mechanic_scry', 'card_draw']
    assert find_overlapping_pairs(names) == [('mechanic_flying', 'ability_keyword_flying')]


def test_union_find_prefers_ability_keyword_name():
    uf = TagUnionFind()
    assert uf.union('mechanic_flying', 'ability_keyword_flying') == 'ability_keyword_flying'
    assert uf.find('mechanic_flying') == 'ability_keyword_flying'
    assert uf.groups() == {'ability_keyword_flying': ['ability_keyword_flying', 'mechanic_flying']}


def test_aliases_join_the_same_set():
    mapping = build_canonical_map(['lifegain', 'life_gain'], aliases=[('lifegain', 'life_gain')])
    assert mapping == {'lifegain': 'life_gain'}


def test_cleanup_remaps_every_card():
    report = cleanup_overlapping_tags(['card_draw'], _sample_card_tags())
    assert report.mapping == {'mechanic_flying': 'ability_keyword_flying'}
    assert report.card_tags['Serra Angel'] == ['ability_keyword_flying', 'card_draw']
    assert report.card_tags['Wind Drake'] == ['ability_keyword_flying']
    assert report.card_tags['Divination'] == ['card_draw']
    assert report.cards_updated == 2
    assert report.tags_removed == ['mechanic_flying']
    assert report.vocabulary == ['ability_keyword_flying', 'card_draw']
    assert report.summary() == {
        'overlapping_pairs': 1,
        'cards_updated': 2,
        'tags_removed': 1,
        'tags_remaining': 2,
    }


def test_cleanup_without_overlap_changes_nothing():
    report = cleanup_overlapping_tags([], {'Divination': ['card_draw']})
    assert report.mapping == {}
    assert report.cards_updated == 0


class TestCleanupScript:
    def test_writes_cleaned_mapping(self, tmp_path, capsys):
        src = tmp_path / 'card_tags.json'
        out = tmp_path / 'cleaned.json'
        src.write_text(json.dumps(_sample_card_tags()), encoding='utf-8')

        assert cleanup_script.main([str(src), '--out', str(out)]) == 0
        cleaned = json.loads(out.read_text(encoding='utf-8'))
        assert cleaned['Wind Drake'] == ['ability_keyword_flying']
        assert 'mechanic_flying -> ability_keyword_flying' in capsys.readouterr().out

    def test_dry_run_leaves_input_untouched(self, tmp_path):
        src = tmp_path / 'card_tags.json'
        original = json.dumps(_sample_card_tags())
        src.write_text(original, encoding='utf-8')
        assert cleanup_script.main([str(src), '--dry-run']) == 0
        assert src.read_text(encoding='utf-8') == original

    def test_missing_file(self, tmp_path):
        assert cleanup_script.main([str(tmp_path / 'nope.json')]) == 2

    def test_wrong_shape(self, tmp_path):
        src = tmp_path / 'card_tags.json'
        src.write_text('["not", "a", "mapping"]', encoding='utf-8')
        assert cleanup_script.main([str(src)]) == 2

from __future__ import annotations

import pytest
from pydantic import ValidationError

from deckgen.exceptions import SynergyRulesError
from deckgen.synergy.rules import (
    KeywordSynergyConfig,
    KeywordTier,
    SynergyRule,
    default_rule_table,
    load_synergy_rules,
)


def _write(tmp_path, text):
    path = tmp_path / 'rules.yml'
    path.write_text(text, encoding='utf-8')
    return path


class TestBundledTable:
    def test_loads_and_is_versioned(self):
        table = default_rule_table()
        assert table.rules_version == 3
        assert table.rules
        assert table.category_strategies['tokens'] == ['tokens', 'go_wide']

    def test_is_cached(self):
        assert default_rule_table() is default_rule_table()

    def test_token_rules_present(self):
        by_tag = default_rule_table().rules_by_card_tag()
        keys = {(r.commander_key, r.score) for r in by_tag['token_doubling']}
        assert ('tokens', 40) in keys
        assert ('token_creation', 25) in keys

    def test_anti_synergy_rule(self):
        etb = [r for r in default_rule_table().rules if r.commander_key == 'etb' and r.card_tag == 'etb_payoff_tribal']
        assert etb and etb[0].score < 0

    def test_tribe_tiers(self):
        tribal = default_rule_table().tribal
        assert tribal.tier_for('elf').base_bonus == 120
        assert tribal.tier_for('sliver').double_bonus == 20
        # unlisted tribes fall back to the default tier
        assert tribal.tier_for('octopus').base_bonus == 100


class TestKeywordTiers:
    def test_first_matching_tier_wins(self):
        config = default_rule_table().keyword_synergy
        assert config.tier_score('landfall') == 20
        assert config.tier_score('Flying') == 10
        assert config.tier_score('Create Treasure') == 8
        assert config.tier_score('scry') == config.unmatched_score

    def test_members_match_whole_words_only(self):
        config = KeywordSynergyConfig(tiers=[KeywordTier(name='instant_speed', score=9, members=['flash'])])
        assert config.tier_score('Flash') == 9
        assert config.tier_score('flash of insight') == 9
        assert config.tier_score('flashback') == config.unmatched_score

    def test_defaults(self):
        config = KeywordSynergyConfig()
        assert (config.unmatched_score, config.multi_match_bonus, config.score_cap) == (1, 2, 35)


class TestRuleSchema:
    def test_rule_needs_exactly_one_key(self):
        with pytest.raises(ValidationError):
            SynergyRule(card_tag='tutor', score=5)
        with pytest.raises(ValidationError):
            SynergyRule(commander_strategy='tokens', commander_tag='token_creation', card_tag='tutor', score=5)

    def test_commander_key(self):
        assert SynergyRule(commander_tag='landfall', card_tag='land_ramp', score=10).commander_key == 'landfall'
        assert SynergyRule(commander_strategy='tokens', card_tag='populate', score=20).is_strategy_rule


class TestLoadErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(SynergyRulesError):
            load_synergy_rules(tmp_path / 'absent.yml')

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(SynergyRulesError):
            load_synergy_rules(_write(tmp_path, 'rules: [unclosed'))

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(SynergyRulesError):
            load_synergy_rules(_write(tmp_path, '- just\n- a list\n'))

    def test_unknown_category(self, tmp_path):
        text = 'rules_version: 1\ncategory_strategies:\n  not_a_category: [tokens]\n'
        with pytest.raises(SynergyRulesError) as excinfo:
            load_synergy_rules(_write(tmp_path, text))
        assert excinfo.value.code == 'RULES_INVALID'

    def test_undefined_tribe_tier(self, tmp_path):
        text = (
            'rules_version: 1\n'
            'tribal:\n'
            '  default_tier: common\n'
            '  tiers: {common: {base_bonus: 1, double_bonus: 1}}\n'
            '  tribe_sizes: {elf: legendary}\n'
        )
        with pytest.raises(SynergyRulesError):
            load_synergy_rules(_write(tmp_path, text))

    def test_minimal_table(self, tmp_path):
        text = (
            'rules_version: 7\n'
            'rules:\n'
            '  - {commander_tag: landfall, card_tag: land_ramp, score: 10}\n'
        )
        table = load_synergy_rules(_write(tmp_path, text))
        assert table.rules_version == 7
        assert table.rules[0].description == ''

from __future__ import annotations

import pytest

from deckgen.deck_builder.builder import validate_constraints
from deckgen.exceptions import InvalidConstraintsError
from deckgen.type_definitions import CardTypeWeights, GenerationConstraints


def test_defaults():
    constraints = validate_constraints(None)
    assert constraints.card_type_weights == CardTypeWeights()
    assert constraints.total_budget is None
    assert constraints.random_tag_count == 0


def test_mapping_is_coerced():
    constraints = validate_constraints({
        'card_type_weights': {'creatures': 10, 'planeswalkers': 2},
        'keywords': 'tokens, sacrifice ,',
        'keyword_focus': ['  counterspell ', ''],
        'total_budget': 150,
        'max_card_price': 5.5,
        'random_tag_count': '3',
    })
    assert isinstance(constraints, GenerationConstraints)
    assert constraints.card_type_weights.creatures == 10
    assert constraints.card_type_weights.artifacts == 5
    assert constraints.keywords == ['tokens', 'sacrifice']
    assert constraints.keyword_focus == ['counterspell']
    assert constraints.total_budget == 150.0
    assert constraints.random_tag_count == 3


@pytest.mark.parametrize('data, field_name', [
    ({'card_type_weights': {'creatures': 21}}, 'card_type_weights.creatures'),
    ({'card_type_weights': {'artifacts': -1}}, 'card_type_weights.artifacts'),
    ({'card_type_weights': {'instants': 2.5}}, 'card_type_weights.instants'),
    ({'card_type_weights': {'sorceries': True}}, 'card_type_weights.sorceries'),
    ({'card_type_weights': [1, 2]}, 'card_type_weights'),
    ({'random_tag_count': 11}, 'random_tag_count'),
    ({'random_tag_count': 'many'}, 'constraints'),
    ({'total_budget': -5}, 'total_budget'),
    ({'max_card_price': float('nan')}, 'max_card_price'),
    ({'max_card_price': '10'}, 'max_card_price'),
    ({'keywords': ['tokens', 3]}, 'keywords'),
])
def test_invalid_values(data, field_name):
    with pytest.raises(InvalidConstraintsError) as excinfo:
        validate_constraints(data)
    assert excinfo.value.field_name == field_name


def test_dataclass_input_is_checked_too():
    constraints = GenerationConstraints(random_tag_count=-1)
    with pytest.raises(InvalidConstraintsError):
        validate_constraints(constraints)


def test_zero_weights_and_budget_are_valid():
    constraints = validate_constraints({
        'card_type_weights': {'creatures': 0, 'planeswalkers': 0},
        'total_budget': 0,
    })
    assert constraints.card_type_weights.creatures == 0
    assert constraints.total_budget == 0.0

"""Card mechanics tagging: vocabulary, tagger, normalization and curation helpers."""

from deckgen.tagging.mechanics_tagger import CardMechanicsTagger, analyze_card

__all__ = ['CardMechanicsTagger', 'analyze_card']

"""Deck generation phases, mixed into deck_builder.builder.DeckBuilder."""

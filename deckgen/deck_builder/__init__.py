__all__ = ['DeckBuilder', 'generate_deck']


def __getattr__(name):
    # Lazy-load the builder so importing commander_rules or builder_utils stays light
    if name in ('DeckBuilder', 'generate_deck'):
        from . import builder
        return getattr(builder, name)
    raise AttributeError(name)

"""Services package: card corpus access and card sync."""

from deckgen.services.card_source import CardFilters, CardSource, DataFrameCardSource
from deckgen.services.card_sync import CancellationToken, CardSyncJob, ScryfallSearchClient

__all__ = ["CardFilters", "CardSource", "DataFrameCardSource", "CancellationToken", "CardSyncJob", "ScryfallSearchClient"]

from .entry import StoreEntry

# Export all models for easy importing
__all__ = ["StoreEntry"]

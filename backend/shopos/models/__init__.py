from .storage import StorageRecord

__all__ = [
    'StorageRecord',
]

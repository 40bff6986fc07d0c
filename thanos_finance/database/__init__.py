from .storage import (
    StorageError, StorageReadError, StorageWriteError,
    StoragePort, JsonFileStorage, MemoryStorage, create_storage
)

__all__ = [
    'StorageError', 'StorageReadError', 'StorageWriteError',
    'StoragePort', 'JsonFileStorage', 'MemoryStorage', 'create_storage'
]

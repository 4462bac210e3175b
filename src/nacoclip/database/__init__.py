"""
Storage backends for NacoClip.

Provides the durable key-value slots the persistence layer writes to.
"""

from nacoclip.database.storage import FileStorage, KeyValueStorage, RedisStorage, StorageError

__all__ = [
    'FileStorage',
    'KeyValueStorage',
    'RedisStorage',
    'StorageError',
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Snapshot Storage
Key-value persistence port with JSON file and in-memory backends

Version: 1.0.0
Date: 2026-10-18
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
import logging

from thanos_finance.config import config

logger = logging.getLogger(__name__)

# ===== EXCEPTIONS =====

class StorageError(Exception):
    """Base storage error"""
    pass

class StorageReadError(StorageError):
    """Stored value could not be read"""
    pass

class StorageWriteError(StorageError):
    """Value could not be written"""
    pass

# ===== PORT =====

class StoragePort(ABC):
    """Read and write raw string values by key"""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Stored value, or None when the key is absent"""
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

# ===== BACKENDS =====

class JsonFileStorage(StoragePort):
    """One <key>.json file per key under a data directory"""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _key_file(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._key_file(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, value: str) -> None:
        path = self._key_file(key)
        temp_file = path.with_suffix('.tmp')
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(temp_file, path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise StorageWriteError(f"Failed to write {path}: {e}") from e

    def remove(self, key: str) -> None:
        path = self._key_file(key)
        try:
            if path.exists():
                path.unlink()
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {path}: {e}") from e

class MemoryStorage(StoragePort):
    """Dictionary-backed storage"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)

def create_storage(data_dir: Optional[Path] = None) -> StoragePort:
    """File storage under the configured data directory"""
    return JsonFileStorage(data_dir or config.storage.data_dir)

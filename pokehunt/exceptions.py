"""
pokehunt/exceptions.py
Custom exceptions for the Pokédex cache and spawn engine
"""
from typing import Optional


class PokeHuntError(Exception):
    """Base exception for PokeHunt errors"""
    pass


class CatalogFetchError(PokeHuntError):
    """Raised when the remote catalog cannot be reached or answers with an error"""
    def __init__(self, url: str, status: Optional[int] = None, details: Optional[str] = None):
        self.url = url
        self.status = status
        message = f"Unable to load data from {url}"
        if status is not None:
            message += f" (HTTP {status})"
        elif details:
            message += f" ({details})"
        super().__init__(message)


class StorageFullError(PokeHuntError):
    """Raised by a storage backend when it cannot accept another record"""
    def __init__(self, key: str, capacity: int):
        self.key = key
        self.capacity = capacity
        super().__init__(f"Storage is full ({capacity} records), cannot write '{key}'")


class ConfigurationError(PokeHuntError, ValueError):
    """Raised when a component is constructed with invalid settings"""
    def __init__(self, setting: str, value, requirement: str):
        self.setting = setting
        self.value = value
        super().__init__(f"Invalid {setting}={value!r}: {requirement}")

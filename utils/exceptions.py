"""
Custom Exceptions
Error hierarchy for the shortcut sync engine
"""


class ShortcutSyncError(Exception):
    """Base exception for shortcut synchronization"""
    
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
    
    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(ShortcutSyncError):
    """Invalid configuration"""
    pass


class EntitySourceError(ShortcutSyncError):
    """Contact query failed"""
    
    def __init__(self, message: str, query: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.query = query


class PhotoStoreError(ShortcutSyncError):
    """Photo bytes could not be read"""
    
    def __init__(self, message: str, entity_id: int = None, **kwargs):
        super().__init__(message, kwargs)
        self.entity_id = entity_id


class IconDecodeError(ShortcutSyncError):
    """Photo stream could not be decoded into an icon"""
    pass


class PlatformError(ShortcutSyncError):
    """Shortcut platform rejected a call"""
    
    def __init__(self, message: str, operation: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.operation = operation

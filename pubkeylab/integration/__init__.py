# Integration Module
"""
Audit logging of cryptosystem operations to a hash-chained event log.

Messages, cipher texts and key values are never written to the log.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import event_logger
    return getattr(event_logger, name)

__all__ = [
    'EventType',
    'CryptoEvent',
    'EventLogger',
    'get_text_fingerprint',
    'create_event_logger',
]

"""
Event Logger Module

Records every cryptosystem operation to a tamper-evident audit log.
Each entry stores the SHA-256 of the previous entry, so editing, dropping or
reordering entries breaks the chain and verify_integrity() notices.

Features:
- Key generation and key import events
- Encrypt / decrypt events, including failed ones
- Privacy: messages, cipher texts and key values are never stored, only
  block counts, field names and a short SHA-256 fingerprint of the text
- JSON export / import

Author: PubKeyLab Project
"""

import hashlib
import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
GENESIS_HASH = "0" * 64
FINGERPRINT_LENGTH = 16


# ============================================================================
# Privacy Functions
# ============================================================================

def get_text_fingerprint(text: str) -> str:
    """
    Short SHA-256 fingerprint of a message or cipher text.

    Lets an auditor correlate operations on the same text without the log
    ever holding the text itself.

    Args:
        text: The plaintext or cipher text

    Returns:
        First 16 hex characters of the SHA-256 digest
    """
    return hashlib.sha256(text.encode()).hexdigest()[:FINGERPRINT_LENGTH]


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of cryptosystem events that can be logged."""

    # Key lifecycle
    KEYS_GENERATED = "keys_generated"
    KEYS_IMPORTED = "keys_imported"

    # Operations
    MESSAGE_ENCRYPTED = "message_encrypted"
    MESSAGE_DECRYPTED = "message_decrypted"
    OPERATION_FAILED = "operation_failed"

    # System
    SYSTEM_START = "system_start"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class CryptoEvent:
    """A single audit log entry."""
    event_type: EventType
    algorithm: str
    timestamp: int  # Unix timestamp
    details: Dict[str, Any] = field(default_factory=dict)
    prev_hash: str = GENESIS_HASH

    def to_record(self) -> Dict[str, Any]:
        """Serializable form of the event (without its own hash)."""
        return {
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'algorithm': self.algorithm,
            'time': self.timestamp,
            'details': self.details,
            'prev': self.prev_hash,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'CryptoEvent':
        """Rebuild an event from its serialized form."""
        return cls(
            event_type=EventType(record['type']),
            algorithm=record['algorithm'],
            timestamp=record['time'],
            details=record.get('details', {}),
            prev_hash=record['prev'],
        )

    def compute_hash(self) -> str:
        """SHA-256 over the canonical JSON of the record."""
        canonical = json.dumps(self.to_record(), sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(canonical.encode()).hexdigest()

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | {self.algorithm}"
        )


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    Hash-chained audit log for cryptosystem operations.

    Example:
        >>> logger = EventLogger()
        >>> event = logger.log_keys_generated("RSA", ["p", "q", "n", "e", "d"])
        >>> logger.verify_integrity()
        True
    """

    def __init__(self, record_start: bool = True):
        """
        Initialize the event logger.

        Args:
            record_start: If True, open the log with a SYSTEM_START entry
        """
        self._events: List[CryptoEvent] = []
        self._hashes: List[str] = []
        self._callbacks: List[Callable[[CryptoEvent], None]] = []

        if record_start:
            self._add_event(EventType.SYSTEM_START, "system", {'node': 'pubkeylab'})

    def _add_event(self, event_type: EventType, algorithm: str,
                   details: Optional[Dict[str, Any]] = None) -> CryptoEvent:
        """Append an event to the chain and notify callbacks."""
        event = CryptoEvent(
            event_type=event_type,
            algorithm=algorithm,
            timestamp=int(time.time()),
            details=details or {},
            prev_hash=self._hashes[-1] if self._hashes else GENESIS_HASH,
        )
        self._events.append(event)
        self._hashes.append(event.compute_hash())

        for callback in self._callbacks:
            callback(event)

        return event

    def add_callback(self, callback: Callable[[CryptoEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[CryptoEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # Key Events
    # ========================================================================

    def log_keys_generated(self, algorithm: str, fields: List[str]) -> CryptoEvent:
        """
        Log a key generation.

        Args:
            algorithm: Cryptosystem name
            fields: Names of the generated key fields (never their values)

        Returns:
            The logged event
        """
        return self._add_event(EventType.KEYS_GENERATED, algorithm, {'fields': list(fields)})

    def log_keys_imported(self, algorithm: str, group: str,
                          fields: List[str]) -> CryptoEvent:
        """Log an import of the public or private key group."""
        return self._add_event(
            EventType.KEYS_IMPORTED, algorithm,
            {'group': group, 'fields': list(fields)}
        )

    # ========================================================================
    # Operation Events
    # ========================================================================

    def log_encrypt(self, algorithm: str, message: str, block_count: int) -> CryptoEvent:
        """
        Log a successful encryption.

        Args:
            algorithm: Cryptosystem name
            message: The plaintext (fingerprinted, not stored)
            block_count: Number of cipher blocks produced

        Returns:
            The logged event
        """
        return self._add_event(EventType.MESSAGE_ENCRYPTED, algorithm, {
            'text_id': get_text_fingerprint(message),
            'blocks': block_count,
        })

    def log_decrypt(self, algorithm: str, cipher_text: str, block_count: int) -> CryptoEvent:
        """Log a successful decryption."""
        return self._add_event(EventType.MESSAGE_DECRYPTED, algorithm, {
            'text_id': get_text_fingerprint(cipher_text),
            'blocks': block_count,
        })

    def log_failure(self, algorithm: str, operation: str, error_kind: str,
                    position: Optional[int] = None) -> CryptoEvent:
        """Log a rejected encrypt/decrypt call."""
        details = {'operation': operation, 'error': error_kind}
        if position is not None:
            details['position'] = position
        return self._add_event(EventType.OPERATION_FAILED, algorithm, details)

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get_all_events(self) -> List[CryptoEvent]:
        """All logged events, oldest first."""
        return list(self._events)

    def get_events_by_type(self, event_type: EventType) -> List[CryptoEvent]:
        """Get all events of a specific type."""
        return [e for e in self._events if e.event_type == event_type]

    def get_algorithm_events(self, algorithm: str) -> List[CryptoEvent]:
        """Get all events recorded for one cryptosystem."""
        return [e for e in self._events if e.algorithm == algorithm]

    def get_recent_events(self, count: int = 10) -> List[CryptoEvent]:
        """Get the most recent events."""
        return self._events[-count:] if len(self._events) > count else list(self._events)

    @property
    def length(self) -> int:
        return len(self._events)

    def print_audit_log(self, last_n: Optional[int] = None) -> None:
        """Print the audit log in a readable format."""
        events = self._events[-last_n:] if last_n else self._events

        print("\n" + "=" * 70)
        print("CRYPTOSYSTEM AUDIT LOG")
        print("=" * 70)

        for event in events:
            print(event)
            for k, v in event.details.items():
                print(f"    {k}: {v}")

        print("=" * 70)
        print(f"Total events: {len(self._events)}")
        print("=" * 70)

    def verify_integrity(self) -> bool:
        """Check that every entry links to the hash of the one before it."""
        prev_hash = GENESIS_HASH
        for event, stored_hash in zip(self._events, self._hashes):
            if event.prev_hash != prev_hash:
                return False
            if event.compute_hash() != stored_hash:
                return False
            prev_hash = stored_hash
        return len(self._events) == len(self._hashes)

    def export_log(self) -> str:
        """Export the entire audit log as JSON."""
        return json.dumps([
            dict(event.to_record(), hash=stored_hash)
            for event, stored_hash in zip(self._events, self._hashes)
        ], indent=2)

    @classmethod
    def import_log(cls, json_str: str) -> 'EventLogger':
        """
        Import an audit log from JSON.

        Hashes are taken from the export, so a tampered file imports but
        fails verify_integrity().
        """
        logger = cls(record_start=False)
        for record in json.loads(json_str):
            logger._events.append(CryptoEvent.from_record(record))
            logger._hashes.append(record['hash'])
        return logger


# ============================================================================
# Convenience Functions
# ============================================================================

def create_event_logger() -> EventLogger:
    """Create a new event logger."""
    return EventLogger()

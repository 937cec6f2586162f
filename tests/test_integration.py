"""
Integration tests for PubKeyLab.

Tests end-to-end workflows combining cryptosystems with the audit log.
"""

import json
import random

import pytest

from pubkeylab.cryptosystems import (
    CRYPTOSYSTEMS, RSA, ElGamal, Knapsack, create_cryptosystem,
)
from pubkeylab.integration.event_logger import (
    EventLogger, EventType, CryptoEvent, get_text_fingerprint,
)
from pubkeylab.cryptosystems.results import OperationResult
from pubkeylab.errors import InputError
from pubkeylab.main import main, run_demo


class TestPolymorphicWorkflow:
    """Every variant behaves the same through the shared interface."""

    @pytest.mark.parametrize("name", sorted(CRYPTOSYSTEMS))
    def test_generate_encrypt_decrypt(self, name):
        system = create_cryptosystem(name, rng=random.Random(8))
        encrypted = system.encrypt("Meet at 10")
        assert encrypted.success
        decrypted = system.decrypt(encrypted.text)
        assert decrypted.success
        assert "".join(decrypted.blocks) in ("MEETAT10", "MEETAT10X")

    def test_factory_types(self):
        assert isinstance(create_cryptosystem("RSA", generate=False), RSA)
        assert isinstance(create_cryptosystem("elgamal", generate=False), ElGamal)
        assert isinstance(create_cryptosystem("Knapsack", generate=False), Knapsack)

    def test_factory_unknown(self):
        with pytest.raises(ValueError):
            create_cryptosystem("DES")

    def test_exchange_public_keys(self):
        """A sender holding only the public keys encrypts for the receiver."""
        receiver = RSA(rng=random.Random(4))
        public = receiver.export_keys()

        sender = RSA(generate=False)
        sender.set_public_keys(public['n'], public['e'])

        encrypted = sender.encrypt("SECRET")
        assert "".join(receiver.decrypt(encrypted.text).blocks) == "SECRET"

    def test_exchange_knapsack_public_key(self):
        receiver = Knapsack(rng=random.Random(4))
        sender = Knapsack(generate=False)
        sender.set_public_keys(receiver.get_key("W"))

        encrypted = sender.encrypt("KNAP")
        assert "".join(receiver.decrypt(encrypted.text).blocks) == "KNAP"

    def test_public_only_cannot_decrypt(self):
        sender = Knapsack(generate=False)
        sender.set_public_keys("106, 39, 11, 22, 30, 21")
        with pytest.raises(RuntimeError):
            sender.decrypt("41")


class TestAuditLog:
    """Event logger wired into the cryptosystems."""

    @pytest.fixture
    def logger(self):
        return EventLogger()

    def test_system_start(self, logger):
        events = logger.get_all_events()
        assert len(events) == 1
        assert events[0].event_type == EventType.SYSTEM_START

    def test_key_generation_logged(self, logger):
        RSA(rng=random.Random(1), event_logger=logger)
        events = logger.get_events_by_type(EventType.KEYS_GENERATED)
        assert len(events) == 1
        assert events[0].algorithm == "RSA"
        assert events[0].details['fields'] == ['p', 'q', 'n', 'e', 'd']

    def test_key_import_logged(self, logger):
        elgamal = ElGamal(generate=False, event_logger=logger)
        elgamal.set_public_keys("2579", "2", "949")
        event = logger.get_events_by_type(EventType.KEYS_IMPORTED)[0]
        assert event.details == {'group': 'public', 'fields': ['p', 'g', 'r']}

    def test_operations_logged(self, logger):
        knapsack = Knapsack(rng=random.Random(1), event_logger=logger)
        encrypted = knapsack.encrypt("ABC")
        knapsack.decrypt(encrypted.text)
        knapsack.decrypt("oops")

        enc = logger.get_events_by_type(EventType.MESSAGE_ENCRYPTED)[0]
        assert enc.details['blocks'] == 3
        assert enc.details['text_id'] == get_text_fingerprint("ABC")

        assert len(logger.get_events_by_type(EventType.MESSAGE_DECRYPTED)) == 1
        failed = logger.get_events_by_type(EventType.OPERATION_FAILED)[0]
        assert failed.details == {'operation': 'decrypt', 'error': 'input_error', 'position': 0}

    def test_no_secrets_in_log(self, logger):
        rsa = RSA(rng=random.Random(2), event_logger=logger)
        rsa.encrypt("TOPSECRETMESSAGE")
        exported = logger.export_log()
        assert "TOPSECRETMESSAGE" not in exported
        assert f'"{rsa.keys.d}"' not in exported

    def test_algorithm_filter(self, logger):
        RSA(rng=random.Random(1), event_logger=logger)
        ElGamal(rng=random.Random(1), event_logger=logger)
        assert len(logger.get_algorithm_events("ElGamal")) == 1
        assert len(logger.get_recent_events(2)) == 2

    def test_callbacks(self, logger):
        seen = []
        logger.add_callback(seen.append)
        RSA(rng=random.Random(1), event_logger=logger).encrypt("HI")
        assert [e.event_type for e in seen] == [
            EventType.KEYS_GENERATED, EventType.MESSAGE_ENCRYPTED
        ]
        logger.remove_callback(seen.append)
        RSA(rng=random.Random(1), event_logger=logger)
        assert len(seen) == 2

    def test_integrity(self, logger):
        RSA(rng=random.Random(1), event_logger=logger).encrypt("HELLO")
        assert logger.verify_integrity()

    def test_tampering_detected(self, logger):
        RSA(rng=random.Random(1), event_logger=logger).encrypt("HELLO")
        logger._events[2].details['blocks'] = 99
        assert not logger.verify_integrity()

    def test_export_import(self, logger):
        RSA(rng=random.Random(1), event_logger=logger).encrypt("HELLO")
        restored = EventLogger.import_log(logger.export_log())
        assert restored.length == logger.length
        assert restored.verify_integrity()

    def test_tampered_export_detected(self, logger):
        RSA(rng=random.Random(1), event_logger=logger).encrypt("HELLO")
        records = json.loads(logger.export_log())
        records[-1]['details']['blocks'] = 1
        restored = EventLogger.import_log(json.dumps(records))
        assert not restored.verify_integrity()

    def test_event_record_round_trip(self):
        event = CryptoEvent(EventType.MESSAGE_DECRYPTED, "RSA", 1700000000, {'blocks': 2})
        assert CryptoEvent.from_record(event.to_record()) == event


class TestDemo:
    """The demo entry point runs end to end."""

    def test_run_demo(self, capsys):
        logger = run_demo("HELLO", seed=5)
        out = capsys.readouterr().out
        assert "RSA" in out and "ElGamal" in out and "Knapsack" in out
        assert len(logger.get_events_by_type(EventType.MESSAGE_DECRYPTED)) == 3
        assert logger.verify_integrity()

    def test_main(self, capsys):
        assert main(["Hi there", "3"]) == 0
        assert "AUDIT LOG" in capsys.readouterr().out

    def test_demo_reports_failed_decrypt(self, capsys, monkeypatch):
        """A failed decrypt shows its error text rather than an empty line."""
        failure = OperationResult.failed(
            InputError("Cipher token 7 does not decrypt to a valid block", token="7", position=0)
        )
        monkeypatch.setattr(RSA, "decrypt", lambda self, cipher_text: failure)

        run_demo("HELLO", seed=5)
        out = capsys.readouterr().out
        assert "Decrypt failed: Cipher token 7 does not decrypt to a valid block" in out

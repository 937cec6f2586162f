"""
PubKeyLab - Main Entry Point
Demonstrates RSA, ElGamal and Knapsack on a short message.

Usage:
    pubkeylab-demo [message] [seed]
"""

import random
import sys

from .cryptosystems import create_cryptosystem, CRYPTOSYSTEMS
from .integration.event_logger import EventLogger


DEFAULT_MESSAGE = "Hello World 2024"


def run_demo(message: str = DEFAULT_MESSAGE, seed=None) -> EventLogger:
    """
    Generate keys for every cryptosystem and round-trip the message.

    Returns:
        The event logger holding the audit trail of the demo
    """
    rng = random.Random(seed)
    logger = EventLogger()

    for name in CRYPTOSYSTEMS:
        system = create_cryptosystem(name, rng=rng, event_logger=logger)

        print("\n" + "-" * 50)
        print(f"{system.algorithm}")
        print("-" * 50)
        for field, value in system.export_keys().items():
            print(f"  {field:>2} = {value}")

        encrypted = system.encrypt(message)
        if not encrypted.success:
            print(f"  Encrypt failed: {encrypted.text}")
            continue

        decrypted = system.decrypt(encrypted.text)
        print(f"  Cipher text: {' | '.join(encrypted.blocks)}")
        if decrypted.success:
            print(f"  Decrypted:   {''.join(decrypted.blocks)}")
        else:
            print(f"  Decrypt failed: {decrypted.text}")

    return logger


def main(argv=None):
    """Main entry point for PubKeyLab."""
    argv = sys.argv[1:] if argv is None else argv
    message = argv[0] if argv else DEFAULT_MESSAGE
    seed = int(argv[1]) if len(argv) > 1 else None

    print("=" * 50)
    print("Welcome to PubKeyLab")
    print("=" * 50)
    print(f"\nMessage: {message!r}")

    logger = run_demo(message, seed)
    logger.print_audit_log()
    return 0


if __name__ == "__main__":
    sys.exit(main())

# Cryptosystems Module
"""
Cryptosystem implementations sharing one capability interface:
- RSA (rsa.py)
- ElGamal (elgamal.py)
- Merkle-Hellman Knapsack (knapsack.py)

encrypt()/decrypt() return OperationResult values; key generation and key
import raise KeyGenerationError / KeyParseError.
"""

from .base import (
    Cryptosystem,
    DEFAULT_MAX_VALUE,
    parse_key_int,
    parse_key_list,
)

from .results import (
    ErrorKind,
    OperationError,
    OperationResult,
)

from .rsa import RSA, RSAKeys, generate_rsa_keys
from .elgamal import ElGamal, ElGamalKeys, generate_elgamal_keys
from .knapsack import (
    DEFAULT_WEIGHT_COUNT,
    Knapsack,
    KnapsackKeys,
    generate_knapsack_keys,
    is_superincreasing,
)
from .factory import CRYPTOSYSTEMS, create_cryptosystem

__all__ = [
    # Interface
    'Cryptosystem',
    'DEFAULT_MAX_VALUE',
    'parse_key_int',
    'parse_key_list',
    'create_cryptosystem',
    'CRYPTOSYSTEMS',
    # Results
    'ErrorKind',
    'OperationError',
    'OperationResult',
    # RSA
    'RSA',
    'RSAKeys',
    'generate_rsa_keys',
    # ElGamal
    'ElGamal',
    'ElGamalKeys',
    'generate_elgamal_keys',
    # Knapsack
    'DEFAULT_WEIGHT_COUNT',
    'Knapsack',
    'KnapsackKeys',
    'generate_knapsack_keys',
    'is_superincreasing',
]

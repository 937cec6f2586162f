"""
Select a cryptosystem variant by name.
"""

from typing import Dict, Type

from .base import Cryptosystem
from .elgamal import ElGamal
from .knapsack import Knapsack
from .rsa import RSA


CRYPTOSYSTEMS: Dict[str, Type[Cryptosystem]] = {
    'rsa': RSA,
    'elgamal': ElGamal,
    'knapsack': Knapsack,
}


def create_cryptosystem(name: str, **kwargs) -> Cryptosystem:
    """
    Create a cryptosystem by (case-insensitive) name.

    Args:
        name: "RSA", "ElGamal" or "Knapsack"
        **kwargs: Passed to the constructor (max_value, rng, event_logger, ...)

    Raises:
        ValueError: If the name is unknown
    """
    try:
        cls = CRYPTOSYSTEMS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown cryptosystem {name!r}; choose from {', '.join(CRYPTOSYSTEMS)}"
        ) from None
    return cls(**kwargs)

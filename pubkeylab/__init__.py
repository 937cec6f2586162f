# PubKeyLab
"""
Classical public-key cryptosystems over arbitrary-precision integers:
- RSA
- ElGamal
- Merkle-Hellman Knapsack

For teaching only: keys are deliberately small and randomness is not
cryptographically strong.
"""

__version__ = "1.0.0"

# Core Cryptography Module
"""
Arithmetic and encoding shared by every cryptosystem:
- Modular arithmetic and Miller-Rabin (number_theory.py)
- Bounded prime generation (primes.py)
- Radix-36 character / block encoding (encoding.py)
"""

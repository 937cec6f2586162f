# PubKeyLab Test Suite
"""
Comprehensive test suite including:
- Unit tests (arithmetic, primes, encoding, each cryptosystem)
- Integration tests (audit log, factory, demo)
- Security tests (invalid inputs and keys)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""

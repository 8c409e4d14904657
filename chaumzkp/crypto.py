"""Number-theoretic primitives for the Chaum-Pedersen proof of equality of discrete logs."""

from __future__ import annotations

import hashlib
import secrets

__all__ = [
    "is_probably_prime",
    "generate_safe_prime_pair",
    "find_generator",
    "generate_params",
    "generate_random_element",
    "generate_commitment",
    "generate_challenge",
    "compute_y1y2",
    "compute_z",
    "verify_proof",
    "generate_secrets",
    "generate_prover_secret",
]

_PRIMALITY_ROUNDS = 40


def _random_below_bits(bits: int) -> int:
    """Uniform random integer with at most ``bits`` bits."""
    return secrets.randbits(bits) if bits > 0 else 0


def _random_range(low: int, high: int) -> int:
    """Uniform random integer in ``[low, high)``."""
    if low >= high:
        raise ValueError(f"empty random range [{low}, {high})")
    return low + secrets.randbelow(high - low)


def _to_bytes_be(value: int) -> bytes:
    """Minimal big-endian encoding; zero encodes as a single zero byte."""
    if value < 0:
        raise ValueError("value must be non-negative")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def is_probably_prime(n: int, rounds: int = _PRIMALITY_ROUNDS) -> bool:
    """Miller-Rabin probabilistic primality test."""
    if n < 2:
        return False
    if n in (2, 3):
        return True
    if n % 2 == 0:
        return False

    d = n - 1
    r = 0
    while d % 2 == 0:
        d >>= 1
        r += 1

    for _ in range(rounds):
        a = _random_range(2, n - 1)
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(r - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def generate_safe_prime_pair(bits: int) -> tuple[int, int]:
    """Return ``(p, q)`` where ``q`` is a Sophie Germain prime and ``p = 2q + 1``."""
    if bits < 3:
        raise ValueError("bit size must be at least 3")
    while True:
        q = _random_below_bits(bits - 1)
        if q % 2 == 0:
            q += 1
        if is_probably_prime(q, _PRIMALITY_ROUNDS):
            p = 2 * q + 1
            if is_probably_prime(p, _PRIMALITY_ROUNDS):
                return p, q


def find_generator(p: int, q: int) -> int:
    """Find a generator of the subgroup of order ``q`` in the multiplicative group mod ``p``."""
    while True:
        h = _random_range(2, p - 1)
        # Squaring lands in the subgroup of quadratic residues, which has order q.
        g = pow(h, 2, p)
        if g != 1 and pow(g, q, p) == 1:
            return g


def generate_params(bits: int) -> tuple[int, int, int]:
    """Generate public parameters ``(p, q, g)``."""
    p, q = generate_safe_prime_pair(bits)
    g = find_generator(p, q)
    return p, q, g


def generate_random_element(q: int) -> int:
    """Random integer in ``[1, q - 1)``."""
    return _random_range(1, q - 1)


def generate_commitment(g: int, a: int, b: int, p: int) -> tuple[int, int, int]:
    """Return ``(g^a, g^b, g^(ab))`` modulo ``p``."""
    return pow(g, a, p), pow(g, b, p), pow(g, a * b, p)


def generate_challenge(y1: int, y2: int, q: int) -> int:
    """Fiat-Shamir challenge: SHA-256 over the big-endian encodings of y1 and y2, reduced mod q."""
    digest = hashlib.sha256(_to_bytes_be(y1) + _to_bytes_be(y2)).digest()
    return int.from_bytes(digest, "big") % q


def compute_y1y2(x: int, g: int, b1: int, p: int) -> tuple[int, int]:
    """Return ``(g^x, b1^x)`` modulo ``p``."""
    return pow(g, x, p), pow(b1, x, p)


def compute_z(x: int, a: int, s: int, q: int) -> int:
    """Prover response ``x + a*s`` modulo ``q``."""
    return (x + a * s) % q


def verify_proof(
    g: int, b1: int, y1: int, y2: int, a1: int, c1: int, s: int, z: int, p: int
) -> bool:
    """Check ``g^z == a1^s * y1`` and ``b1^z == c1^s * y2`` modulo ``p``."""
    left1 = pow(g, z, p)
    right1 = (pow(a1, s, p) * y1) % p
    left2 = pow(b1, z, p)
    right2 = (pow(c1, s, p) * y2) % p
    return left1 == right1 and left2 == right2


def generate_secrets(q: int) -> tuple[int, int]:
    """Two independent random secrets in ``[1, q)``."""
    return _random_range(1, q), _random_range(1, q)


def generate_prover_secret(q: int) -> int:
    """Random nonce in ``[1, q)``."""
    return _random_range(1, q)
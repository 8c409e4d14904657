import hashlib

import pytest

from chaumzkp.crypto import (
    compute_y1y2,
    compute_z,
    find_generator,
    generate_challenge,
    generate_commitment,
    generate_params,
    generate_prover_secret,
    generate_random_element,
    generate_safe_prime_pair,
    generate_secrets,
    is_probably_prime,
    verify_proof,
)

# A small safe-prime group: p = 2q + 1 with generator 4 of order q.
P, Q, G = 23, 11, 4


@pytest.mark.parametrize("n", [2, 3, 5, 7, 97, 7919, 2**61 - 1, 2**127 - 1])
def test_primes_are_detected(n):
    assert is_probably_prime(n, 40) is True


@pytest.mark.parametrize("n", [0, 1, 4, 9, 15, 561, 1105, 2**61 + 1, (2**31 - 1) * (2**61 - 1)])
def test_composites_are_rejected(n):
    assert is_probably_prime(n, 40) is False


def test_safe_prime_pair_structure():
    p, q = generate_safe_prime_pair(32)
    assert p == 2 * q + 1
    assert is_probably_prime(p, 40)
    assert is_probably_prime(q, 40)
    assert q.bit_length() <= 31


def test_safe_prime_pair_rejects_tiny_bit_size():
    with pytest.raises(ValueError):
        generate_safe_prime_pair(2)


def test_find_generator_has_order_q():
    for _ in range(20):
        g = find_generator(P, Q)
        assert g != 1
        assert pow(g, Q, P) == 1


def test_generate_params_consistent():
    p, q, g = generate_params(40)
    assert p == 2 * q + 1
    assert 1 < g < p
    assert pow(g, q, p) == 1


def test_random_element_range():
    for _ in range(200):
        value = generate_random_element(Q)
        assert 1 <= value < Q - 1


def test_secrets_range():
    for _ in range(200):
        a, b = generate_secrets(Q)
        assert 1 <= a < Q
        assert 1 <= b < Q
        assert 1 <= generate_prover_secret(Q) < Q


def test_prover_secret_empty_range_raises():
    with pytest.raises(ValueError):
        generate_prover_secret(1)


def test_commitment_is_diffie_hellman_triple():
    a1, b1, c1 = generate_commitment(G, 3, 5, P)
    assert pow(a1, 5, P) == c1
    assert pow(b1, 3, P) == c1
    assert all(pow(v, Q, P) == 1 for v in (a1, b1, c1))


def test_challenge_hashes_big_endian_encodings():
    big_q = 2**300
    expected = int.from_bytes(hashlib.sha256(b"\x01\x02").digest(), "big")
    assert generate_challenge(1, 2, big_q) == expected


def test_challenge_encodes_zero_as_single_byte():
    big_q = 2**300
    expected = int.from_bytes(hashlib.sha256(b"\x00\x00").digest(), "big")
    assert generate_challenge(0, 0, big_q) == expected


def test_challenge_is_reduced_and_deterministic():
    c = generate_challenge(12345, 67890, Q)
    assert 0 <= c < Q
    assert generate_challenge(12345, 67890, Q) == c


def test_challenge_depends_on_order_of_inputs():
    big_q = 2**300
    assert generate_challenge(1, 256, big_q) != generate_challenge(256, 1, big_q)


def test_compute_z_reduced_mod_q():
    z = compute_z(10, 9, 8, Q)
    assert 0 <= z < Q
    assert (z - (10 + 9 * 8)) % Q == 0


def test_honest_proof_verifies():
    a, b, x = 3, 5, 7
    a1, b1, c1 = generate_commitment(G, a, b, P)
    y1, y2 = compute_y1y2(x, G, b1, P)
    for s in range(Q):
        z = compute_z(x, a, s, Q)
        assert verify_proof(G, b1, y1, y2, a1, c1, s, z, P)


def test_wrong_response_fails():
    a, b, x, s = 3, 5, 7, 6
    a1, b1, c1 = generate_commitment(G, a, b, P)
    y1, y2 = compute_y1y2(x, G, b1, P)
    z = compute_z(x, a, s, Q)
    assert not verify_proof(G, b1, y1, y2, a1, c1, s, (z + 1) % Q, P)


def test_non_dh_commitment_fails():
    a, b, x, s = 3, 5, 7, 6
    a1, b1, _ = generate_commitment(G, a, b, P)
    fake_c1 = pow(G, a * b + 1, P)
    y1, y2 = compute_y1y2(x, G, b1, P)
    z = compute_z(x, a, s, Q)
    assert not verify_proof(G, b1, y1, y2, a1, fake_c1, s, z, P)


def test_full_flow_with_generated_params():
    p, q, g = generate_params(64)
    a, b = generate_secrets(q)
    a1, b1, c1 = generate_commitment(g, a, b, p)
    x = generate_prover_secret(q)
    y1, y2 = compute_y1y2(x, g, b1, p)
    s = generate_challenge(y1, y2, q)
    z = compute_z(x, a, s, q)
    assert verify_proof(g, b1, y1, y2, a1, c1, s, z, p)
"""Prover and verifier for the non-interactive Chaum-Pedersen proof."""

from __future__ import annotations

from dataclasses import dataclass

from chaumzkp.crypto import (
    compute_y1y2,
    compute_z,
    generate_challenge,
    generate_commitment,
    generate_params,
    generate_prover_secret,
    generate_secrets,
    verify_proof,
)

__all__ = [
    "PublicParameters",
    "Commitment",
    "ProofChallenge",
    "ProofResponse",
    "ZKProof",
    "Prover",
    "Verifier",
]


@dataclass(frozen=True)
class PublicParameters:
    """Safe prime ``p = 2q + 1``, subgroup order ``q`` and generator ``g``."""

    p: int
    q: int
    g: int

    @classmethod
    def generate(cls, bits: int) -> PublicParameters:
        p, q, g = generate_params(bits)
        return cls(p=p, q=q, g=g)


@dataclass(frozen=True)
class Commitment:
    """``a1 = g^a``, ``b1 = g^b``, ``c1 = g^(ab)`` modulo ``p``."""

    a1: int
    b1: int
    c1: int


@dataclass(frozen=True)
class ProofChallenge:
    """``y1 = g^x``, ``y2 = b1^x`` modulo ``p``."""

    y1: int
    y2: int


@dataclass(frozen=True)
class ProofResponse:
    """``z = x + a*s`` modulo ``q``."""

    z: int


@dataclass(frozen=True)
class ZKProof:
    commitment: Commitment
    challenge: ProofChallenge
    response: ProofResponse
    challenge_hash: int


@dataclass(frozen=True)
class Prover:
    params: PublicParameters
    secret_a: int
    secret_b: int

    @classmethod
    def from_params(cls, params: PublicParameters) -> Prover:
        """Create a prover with freshly drawn secrets."""
        secret_a, secret_b = generate_secrets(params.q)
        return cls(params=params, secret_a=secret_a, secret_b=secret_b)

    def generate_commitment(self) -> Commitment:
        a1, b1, c1 = generate_commitment(
            self.params.g, self.secret_a, self.secret_b, self.params.p
        )
        return Commitment(a1=a1, b1=b1, c1=c1)

    def generate_proof_challenge(self, commitment: Commitment) -> tuple[ProofChallenge, int]:
        """Draw a nonce ``x`` and return the challenge values with it."""
        x = generate_prover_secret(self.params.q)
        y1, y2 = compute_y1y2(x, self.params.g, commitment.b1, self.params.p)
        return ProofChallenge(y1=y1, y2=y2), x

    def generate_response(self, x: int, challenge_hash: int) -> ProofResponse:
        return ProofResponse(z=compute_z(x, self.secret_a, challenge_hash, self.params.q))

    def create_proof(self) -> ZKProof:
        commitment = self.generate_commitment()
        challenge, x = self.generate_proof_challenge(commitment)
        challenge_hash = generate_challenge(challenge.y1, challenge.y2, self.params.q)
        response = self.generate_response(x, challenge_hash)
        return ZKProof(
            commitment=commitment,
            challenge=challenge,
            response=response,
            challenge_hash=challenge_hash,
        )


@dataclass(frozen=True)
class Verifier:
    params: PublicParameters

    def verify_proof(self, proof: ZKProof) -> bool:
        expected = generate_challenge(proof.challenge.y1, proof.challenge.y2, self.params.q)
        if expected != proof.challenge_hash:
            return False
        return verify_proof(
            self.params.g,
            proof.commitment.b1,
            proof.challenge.y1,
            proof.challenge.y2,
            proof.commitment.a1,
            proof.commitment.c1,
            proof.challenge_hash,
            proof.response.z,
            self.params.p,
        )
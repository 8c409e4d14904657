"""gRPC prover client for the interactive Chaum-Pedersen protocol."""

from __future__ import annotations

import argparse
from functools import partial
from types import TracebackType

import grpc

from chaumzkp.crypto import compute_y1y2, compute_z, generate_prover_secret
from chaumzkp.messages import (
    SERVICE_NAME,
    ChallengeResponse,
    CommitmentRequest,
    InitializeRequest,
    InitializeResponse,
    VerifyProofRequest,
    VerifyProofResponse,
    decode_message,
    encode_message,
)
from chaumzkp.protocol import ProofChallenge, Prover

__all__ = ["ChaumPedersenClient", "main"]

DEFAULT_ADDRESS = "http://[::1]:50051"
DEFAULT_BIT_SIZE = 512
_CONNECT_TIMEOUT = 10.0


def _target(addr: str) -> str:
    for scheme in ("http://", "https://"):
        if addr.startswith(scheme):
            return addr[len(scheme):].rstrip("/")
    return addr


class ChaumPedersenClient:
    """Prover side of the protocol, talking to a remote verifier."""

    def __init__(self, channel: grpc.Channel) -> None:
        self._channel = channel
        self._initialize = self._method("InitializeProtocol", InitializeResponse)
        self._send_commitment = self._method("SendCommitment", ChallengeResponse)
        self._verify = self._method("VerifyProof", VerifyProofResponse)

    def _method(self, name: str, response_type: type) -> grpc.UnaryUnaryMultiCallable:
        return self._channel.unary_unary(
            f"/{SERVICE_NAME}/{name}",
            request_serializer=encode_message,
            response_deserializer=partial(decode_message, response_type),
        )

    @classmethod
    def connect(cls, addr: str) -> ChaumPedersenClient:
        """Open a channel to ``addr`` and wait until it is ready."""
        channel = grpc.insecure_channel(_target(addr))
        try:
            grpc.channel_ready_future(channel).result(timeout=_CONNECT_TIMEOUT)
        except grpc.FutureTimeoutError as exc:
            channel.close()
            raise ConnectionError(f"could not connect to {addr}") from exc
        return cls(channel)

    def close(self) -> None:
        self._channel.close()

    def __enter__(self) -> ChaumPedersenClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def run_protocol(self, bit_size: int) -> bool:
        """Run one full proof against the verifier and return whether it was accepted."""
        print("Starting Chaum-Pedersen Zero-Knowledge Proof Protocol")

        print("Getting public parameters from verifier...")
        init = self._initialize(InitializeRequest(bit_size=bit_size))
        session_id = init.session_id
        params = init.params
        if params is None:
            raise ValueError("Missing parameters")

        print("Received public parameters")
        print(f"   Session ID: {session_id}")
        print(f"   Safe prime p: {params.p.bit_length()} bits")
        print(f"   Sophie Germain prime q: {params.q.bit_length()} bits")

        print("\nGenerating secrets and commitment...")
        prover = Prover.from_params(params)
        commitment = prover.generate_commitment()
        print("Generated commitment:")
        print("   a1 = g^a mod p")
        print("   b1 = g^b mod p")
        print("   c1 = g^(a*b) mod p")

        print("\nGenerating proof challenge values...")
        x = generate_prover_secret(params.q)
        y1, y2 = compute_y1y2(x, params.g, commitment.b1, params.p)
        print("Generated challenge values:")
        print("   y1 = g^x mod p")
        print("   y2 = b1^x mod p")

        print("\nSending commitment and challenge values...")
        challenge = self._send_commitment(
            CommitmentRequest(
                session_id=session_id,
                commitment=commitment,
                challenge_values=ProofChallenge(y1=y1, y2=y2),
            )
        ).challenge
        print("Received challenge from verifier")

        print("\nComputing proof response...")
        z = compute_z(x, prover.secret_a, challenge, params.q)
        print("Computed response z = x + a*s mod q (here s is the challenge)")

        print("\nSending response for verification...")
        result = self._verify(VerifyProofRequest(session_id=session_id, z=z))

        if result.verified:
            print(f"SUCCESS: {result.message}")
            print(
                "Verified: The prover demonstrated knowledge of the discrete logarithm "
                "without revealing the secret value"
            )
        else:
            print(f"FAILED: {result.message}")
            print("The zero-knowledge proof verification failed!")
        return result.verified


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Chaum-Pedersen zero-knowledge proof prover")
    parser.add_argument("--address", default=DEFAULT_ADDRESS, help="verifier address")
    parser.add_argument("--bits", type=int, default=DEFAULT_BIT_SIZE, help="parameter bit size")
    args = parser.parse_args(argv)

    with ChaumPedersenClient.connect(args.address) as client:
        print("Connected to Chaum-Pedersen ZKP Server.")
        result = client.run_protocol(args.bits)
    print(f"Result: {'Proof has been verified.' if result else 'Proof has failed!'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
"""gRPC verifier service for the interactive Chaum-Pedersen protocol."""

from __future__ import annotations

import argparse
import threading
import uuid
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any

import grpc

from chaumzkp import crypto
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
from chaumzkp.protocol import Commitment, ProofChallenge, PublicParameters

__all__ = ["ProtocolError", "ChaumPedersenServer", "serve", "main"]

MIN_BIT_SIZE = 256
MAX_BIT_SIZE = 4096
DEFAULT_ADDRESS = "[::1]:50051"


class ProtocolError(Exception):
    """A request the verifier refuses, carrying the gRPC status to report."""

    def __init__(self, code: grpc.StatusCode, details: str) -> None:
        super().__init__(details)
        self.code = code
        self.details = details


@dataclass
class _VerifierSession:
    params: PublicParameters
    commitment: Commitment | None = None
    challenge_values: ProofChallenge | None = None
    challenge: int | None = None


class ChaumPedersenServer:
    """Verifier that keeps per-session protocol state."""

    def __init__(
        self,
        params_factory: Callable[[int], PublicParameters] = PublicParameters.generate,
    ) -> None:
        self._params_factory = params_factory
        self._sessions: dict[str, _VerifierSession] = {}
        self._lock = threading.Lock()

    def initialize_protocol(self, request: InitializeRequest) -> InitializeResponse:
        bit_size = request.bit_size
        if not MIN_BIT_SIZE <= bit_size <= MAX_BIT_SIZE:
            raise ProtocolError(
                grpc.StatusCode.INVALID_ARGUMENT,
                f"Bit size must be between {MIN_BIT_SIZE} and {MAX_BIT_SIZE}",
            )
        params = self._params_factory(bit_size)
        session_id = str(uuid.uuid4())
        with self._lock:
            self._sessions[session_id] = _VerifierSession(params=params)
        print(f"Protocol initialized with session ID: {session_id}")
        return InitializeResponse(session_id=session_id, params=params)

    def send_commitment(self, request: CommitmentRequest) -> ChallengeResponse:
        if request.commitment is None:
            raise ProtocolError(grpc.StatusCode.INVALID_ARGUMENT, "Missing commitment")
        if request.challenge_values is None:
            raise ProtocolError(grpc.StatusCode.INVALID_ARGUMENT, "Missing challenge values")

        with self._lock:
            session = self._sessions.get(request.session_id)
            if session is None:
                raise ProtocolError(grpc.StatusCode.NOT_FOUND, "Session not found")
            values = request.challenge_values
            challenge = crypto.generate_challenge(values.y1, values.y2, session.params.q)
            session.commitment = request.commitment
            session.challenge_values = values
            session.challenge = challenge

        print(f"Generated challenge for session: {request.session_id}")
        return ChallengeResponse(challenge=challenge)

    def verify_proof(self, request: VerifyProofRequest) -> VerifyProofResponse:
        session_id = request.session_id
        with self._lock:
            session = self._sessions.get(session_id)
            if (
                session is None
                or session.commitment is None
                or session.challenge_values is None
                or session.challenge is None
            ):
                raise ProtocolError(
                    grpc.StatusCode.INVALID_ARGUMENT,
                    "Invalid session state or session not found",
                )
            verified = crypto.verify_proof(
                session.params.g,
                session.commitment.b1,
                session.challenge_values.y1,
                session.challenge_values.y2,
                session.commitment.a1,
                session.commitment.c1,
                session.challenge,
                request.z,
                session.params.p,
            )
            if verified:
                del self._sessions[session_id]

        if verified:
            print(f"Proof verified successfully for session: {session_id}")
            return VerifyProofResponse(
                verified=True, message="Zero-knowledge proof verified successfully!"
            )
        print(f"Proof verification failed for session: {session_id}")
        return VerifyProofResponse(
            verified=False, message="Zero-knowledge proof verification failed!"
        )


def _rpc(method: Callable[[Any], Any]) -> Callable[[Any, grpc.ServicerContext], Any]:
    def handler(request: Any, context: grpc.ServicerContext) -> Any:
        try:
            return method(request)
        except ProtocolError as exc:
            context.abort(exc.code, exc.details)

    return handler


def _generic_handler(server: ChaumPedersenServer) -> grpc.GenericRpcHandler:
    routes = {
        "InitializeProtocol": (server.initialize_protocol, InitializeRequest),
        "SendCommitment": (server.send_commitment, CommitmentRequest),
        "VerifyProof": (server.verify_proof, VerifyProofRequest),
    }
    handlers = {
        name: grpc.unary_unary_rpc_method_handler(
            _rpc(method),
            request_deserializer=partial(decode_message, request_type),
            response_serializer=encode_message,
        )
        for name, (method, request_type) in routes.items()
    }
    return grpc.method_handlers_generic_handler(SERVICE_NAME, handlers)


def _build_grpc_server(
    address: str, server: ChaumPedersenServer, max_workers: int = 10
) -> tuple[grpc.Server, int]:
    """Create an unstarted gRPC server bound to ``address``; return it and its port."""
    grpc_server = grpc.server(ThreadPoolExecutor(max_workers=max_workers))
    grpc_server.add_generic_rpc_handlers((_generic_handler(server),))
    port = grpc_server.add_insecure_port(address)
    if port == 0:
        raise OSError(f"could not bind to {address}")
    return grpc_server, port


def serve(address: str = DEFAULT_ADDRESS, server: ChaumPedersenServer | None = None) -> None:
    """Run the verifier service until interrupted."""
    grpc_server, _ = _build_grpc_server(address, server or ChaumPedersenServer())
    grpc_server.start()
    print(f"Listening on {address}")
    try:
        grpc_server.wait_for_termination()
    except KeyboardInterrupt:
        grpc_server.stop(None)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Chaum-Pedersen zero-knowledge proof verifier")
    parser.add_argument("--address", default=DEFAULT_ADDRESS, help="address to listen on")
    args = parser.parse_args(argv)
    serve(args.address)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
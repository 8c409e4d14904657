import grpc
import pytest

from chaumzkp.messages import (
    SERVICE_NAME,
    CommitmentRequest,
    InitializeRequest,
    VerifyProofRequest,
    decode_message,
    encode_message,
    ChallengeResponse,
)
from chaumzkp.protocol import Commitment, ProofChallenge, Prover, PublicParameters
from chaumzkp.server import ChaumPedersenServer, ProtocolError, _build_grpc_server

FIXED = PublicParameters(p=2039, q=1019, g=4)


@pytest.fixture
def server():
    return ChaumPedersenServer(params_factory=lambda bits: FIXED)


def _open_session(server):
    return server.initialize_protocol(InitializeRequest(bit_size=256)).session_id


def _commit(server, session_id, prover):
    commitment = prover.generate_commitment()
    values, x = prover.generate_proof_challenge(commitment)
    response = server.send_commitment(
        CommitmentRequest(session_id=session_id, commitment=commitment, challenge_values=values)
    )
    return response.challenge, x


def test_initialize_returns_params_and_unique_sessions(server):
    first = server.initialize_protocol(InitializeRequest(bit_size=256))
    second = server.initialize_protocol(InitializeRequest(bit_size=4096))
    assert first.params == FIXED
    assert first.session_id != second.session_id


def test_initialize_passes_bit_size_to_factory():
    seen = []

    def factory(bits):
        seen.append(bits)
        return FIXED

    response = ChaumPedersenServer(params_factory=factory).initialize_protocol(
        InitializeRequest(bit_size=1024)
    )
    assert seen == [1024]
    assert response.params == FIXED


@pytest.mark.parametrize("bits", [0, 255, 4097])
def test_initialize_rejects_bad_bit_size(server, bits):
    with pytest.raises(ProtocolError) as info:
        server.initialize_protocol(InitializeRequest(bit_size=bits))
    assert info.value.code == grpc.StatusCode.INVALID_ARGUMENT
    assert info.value.details == "Bit size must be between 256 and 4096"


def test_missing_commitment(server):
    session_id = _open_session(server)
    with pytest.raises(ProtocolError) as info:
        server.send_commitment(
            CommitmentRequest(session_id=session_id, challenge_values=ProofChallenge(1, 2))
        )
    assert info.value.details == "Missing commitment"


def test_missing_challenge_values(server):
    session_id = _open_session(server)
    with pytest.raises(ProtocolError) as info:
        server.send_commitment(CommitmentRequest(session_id=session_id, commitment=Commitment(1, 2, 3)))
    assert info.value.details == "Missing challenge values"


def test_unknown_session_is_not_found(server):
    with pytest.raises(ProtocolError) as info:
        server.send_commitment(
            CommitmentRequest(
                session_id="nope", commitment=Commitment(1, 2, 3), challenge_values=ProofChallenge(1, 2)
            )
        )
    assert info.value.code == grpc.StatusCode.NOT_FOUND


def test_verify_before_commitment_is_invalid(server):
    session_id = _open_session(server)
    with pytest.raises(ProtocolError) as info:
        server.verify_proof(VerifyProofRequest(session_id=session_id, z=1))
    assert info.value.code == grpc.StatusCode.INVALID_ARGUMENT


def test_honest_proof_verifies_and_closes_session(server):
    session_id = _open_session(server)
    prover = Prover.from_params(FIXED)
    challenge, x = _commit(server, session_id, prover)
    assert 0 <= challenge < FIXED.q
    z = prover.generate_response(x, challenge).z
    result = server.verify_proof(VerifyProofRequest(session_id=session_id, z=z))
    assert result.verified is True
    assert result.message == "Zero-knowledge proof verified successfully!"
    with pytest.raises(ProtocolError):
        server.verify_proof(VerifyProofRequest(session_id=session_id, z=z))


def test_wrong_response_fails_and_keeps_session(server):
    session_id = _open_session(server)
    prover = Prover.from_params(FIXED)
    challenge, x = _commit(server, session_id, prover)
    z = prover.generate_response(x, challenge).z
    bad = server.verify_proof(VerifyProofRequest(session_id=session_id, z=(z + 1) % FIXED.q))
    assert bad.verified is False
    assert bad.message == "Zero-knowledge proof verification failed!"
    good = server.verify_proof(VerifyProofRequest(session_id=session_id, z=z))
    assert good.verified is True


def test_grpc_error_status_over_the_wire(server):
    grpc_server, port = _build_grpc_server("127.0.0.1:0", server)
    grpc_server.start()
    try:
        with grpc.insecure_channel(f"127.0.0.1:{port}") as channel:
            call = channel.unary_unary(
                f"/{SERVICE_NAME}/SendCommitment",
                request_serializer=encode_message,
                response_deserializer=lambda data: decode_message(ChallengeResponse, data),
            )
            with pytest.raises(grpc.RpcError) as info:
                call(
                    CommitmentRequest(
                        session_id="missing",
                        commitment=Commitment(1, 2, 3),
                        challenge_values=ProofChallenge(4, 5),
                    ),
                    timeout=10,
                )
        assert info.value.code() == grpc.StatusCode.NOT_FOUND
        assert info.value.details() == "Session not found"
    finally:
        grpc_server.stop(None)
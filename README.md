# chaumzkp

An interactive Chaum-Pedersen zero-knowledge proof over a safe-prime group.
A prover shows that it knows the discrete logarithm `a` of `a1 = g^a mod p`
without revealing `a`, and a verifier checks the proof over gRPC.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the protocol over gRPC

Start the verifier server. By default it listens on `[::1]:50051`; use
`--address` to choose another address:

```
grpc-zkp-server
grpc-zkp-server --address 127.0.0.1:50051
```

In another terminal, run the prover client. It connects to the server
(default `http://[::1]:50051`, changed with `--address`), asks for public
parameters of `--bits` bits (default 512) and walks through the whole protocol:

```
grpc-zkp-client
grpc-zkp-client --address 127.0.0.1:50051 --bits 256
```

The client waits up to ten seconds for the server and raises
`ConnectionError` if it cannot reach it.

The exchange has three calls on the service `zkp.ChaumPedersenService`:

1. `InitializeProtocol` – the server creates a session and returns a safe
   prime `p = 2q + 1`, the Sophie Germain prime `q` and a generator `g` of the
   subgroup of order `q`. Bit sizes outside 256–4096 are rejected with
   `INVALID_ARGUMENT`.
2. `SendCommitment` – the client sends its commitment `(a1, b1, c1)` and the
   values `y1 = g^x`, `y2 = b1^x`; the server answers with the challenge
   `s = SHA-256(y1 || y2) mod q`. A missing commitment or missing challenge
   values give `INVALID_ARGUMENT`, an unknown session `NOT_FOUND`.
3. `VerifyProof` – the client sends `z = x + a*s mod q`; the server checks
   `g^z = a1^s * y1` and `b1^z = c1^s * y2` (mod `p`) and reports the outcome.
   A verified session is removed; a failed one is kept. A session that is
   unknown or has no commitment yet gives `INVALID_ARGUMENT`.

Messages use the protocol-buffer wire format, with big integers carried as
minimal big-endian byte strings. The message classes and
`encode_message` / `decode_message` live in `chaumzkp.messages`.

## Using the library directly

```python
from chaumzkp.protocol import PublicParameters, Prover, Verifier

params = PublicParameters.generate(256)
prover = Prover.from_params(params)
proof = prover.create_proof()

assert Verifier(params).verify_proof(proof)
```

The lower-level building blocks — `generate_params`, `generate_commitment`,
`generate_challenge`, `compute_y1y2`, `compute_z`, `verify_proof` and
`is_probably_prime` — live in `chaumzkp.crypto`.

The verifier logic can be used without a network: `ChaumPedersenServer` in
`chaumzkp.server` has `initialize_protocol`, `send_commitment` and
`verify_proof` methods that take and return the message objects and raise
`ProtocolError` (with a gRPC status `code` and `details`) for rejected
requests. `serve(address, server)` runs it as a gRPC service.

From Python the client can be driven directly; it is also a context manager:

```python
from chaumzkp.client import ChaumPedersenClient

with ChaumPedersenClient.connect("localhost:50051") as client:
    verified = client.run_protocol(512)
```

Generating safe primes of large bit sizes takes time; 256 or 512 bits is
enough for experimenting.

## Limitations

Sessions are held in memory only and are lost when the server stops. The
gRPC channel is unencrypted; there is no TLS support.
"""Chaum-Pedersen zero-knowledge proofs with a gRPC verifier server and prover client."""

__version__ = "0.1.0"
__all__ = ["crypto", "protocol", "messages", "server", "client"]
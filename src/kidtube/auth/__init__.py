"""Authentication module for the KidTube API."""

from .identity import (
    AuthenticationError,
    IdentityVerifier,
    JWKSVerifier,
    SharedSecretVerifier,
    create_verifier,
)
from .schemas import OwnerInfo

__all__ = [
    "AuthenticationError",
    "IdentityVerifier",
    "JWKSVerifier",
    "SharedSecretVerifier",
    "create_verifier",
    "OwnerInfo",
]

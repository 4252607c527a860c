"""Signing credential decoding."""

from appvault.credentials.decoder import CredentialDecoder, decode_credential

__all__ = ["CredentialDecoder", "decode_credential"]

"""Signing credential decoding.

A credential file is an opaque binary container (a CMS envelope) with an
XML property list embedded in it. The document starts at the first
``<?xml`` marker and ends at its closing ``</plist>`` tag; the bytes
after it belong to the container's signature.
"""

import logging
import plistlib
from pathlib import Path
from xml.parsers.expat import ExpatError

from pydantic import ValidationError

from appvault.models.credential import SigningCredential

logger = logging.getLogger(__name__)

XML_MARKER = b"<?xml"
PLIST_END_MARKER = b"</plist>"
HEURISTIC_MARKER = b"PPQ"


class CredentialDecoder:
    """Decodes signing credential files into SigningCredential records.

    Decoding never raises: every failure yields None, which callers treat
    as an unsigned or unknown credential.
    """

    def decode(self, path: Path | None) -> SigningCredential | None:
        """Read and decode a credential file.

        Args:
            path: Credential file, or None.

        Returns:
            The decoded credential, or None if it cannot be decoded.
        """
        if path is None:
            return None

        try:
            raw = path.read_bytes()
        except OSError as e:
            logger.error("Cannot read credential %s: %s", path, e)
            return None

        return self.decode_bytes(raw)

    def decode_bytes(self, raw: bytes) -> SigningCredential | None:
        """Decode credential content already in memory.

        Args:
            raw: Entire credential file content.

        Returns:
            The decoded credential, or None if it cannot be decoded.
        """
        start = raw.find(XML_MARKER)
        if start < 0:
            logger.error("XML start not found in credential")
            return None

        end = raw.find(PLIST_END_MARKER, start)
        document = raw[start:] if end < 0 else raw[start : end + len(PLIST_END_MARKER)]

        try:
            data = plistlib.loads(document, fmt=plistlib.FMT_XML)
        except (
            plistlib.InvalidFileException,
            ExpatError,
            ValueError,
            LookupError,
            AttributeError,
            TypeError,
        ) as e:
            # unknown encodings raise LookupError, malformed dates AttributeError
            logger.error("Error extracting credential document: %s", e)
            return None

        if not isinstance(data, dict):
            logger.error("Credential document is not a dictionary")
            return None

        try:
            credential = SigningCredential.model_validate(data)
        except ValidationError as e:
            logger.error("Credential document is incomplete: %s", e)
            return None

        if credential.ppq_check is None:
            # Scan the whole file, not only the decoded document
            flag = HEURISTIC_MARKER in raw.upper()
            credential = credential.model_copy(update={"ppq_check": flag})

        return credential


def decode_credential(path: Path | None) -> SigningCredential | None:
    """Decode a credential file with a default decoder."""
    return CredentialDecoder().decode(path)

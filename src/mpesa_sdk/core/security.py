"""Security credential generation.

Privileged operations carry the initiator password encrypted under the
public key of the environment's X.509 certificate, using PKCS#1 v1.5
padding as mandated by the provider, and base64 encoded.
"""

from __future__ import annotations

import base64

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..errors import EncryptionError, ErrorCode


def load_certificate(certificate: str | bytes) -> x509.Certificate:
    """Parse a PEM certificate, falling back to DER.

    Raises:
        EncryptionError: If the data is not a certificate.
    """
    try:
        # PEM text is ASCII; UnicodeEncodeError is a ValueError.
        data = certificate.encode("ascii") if isinstance(certificate, str) else certificate
        if b"-----BEGIN" in data:
            return x509.load_pem_x509_certificate(data)
        return x509.load_der_x509_certificate(data)
    except ValueError as e:
        raise EncryptionError(
            "Could not parse the environment certificate",
            code=ErrorCode.CERTIFICATE_ERROR,
            cause=e,
        ) from e


def encrypt_password(password: str, certificate: str | bytes) -> str:
    """Encrypt the initiator password into a security credential.

    The output differs on every call: PKCS#1 v1.5 padding is randomized.

    Args:
        password: Initiator password in plain text.
        certificate: PEM or DER encoded X.509 certificate.

    Returns:
        Base64 encoded ciphertext.

    Raises:
        EncryptionError: If the certificate is unusable or the password
            does not fit in a single RSA block.
    """
    public_key = load_certificate(certificate).public_key()
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise EncryptionError(
            f"Certificate key must be RSA, got {type(public_key).__name__}",
            code=ErrorCode.CERTIFICATE_ERROR,
        )

    try:
        ciphertext = public_key.encrypt(password.encode("utf-8"), padding.PKCS1v15())
    except ValueError as e:
        raise EncryptionError("Could not encrypt the initiator password", cause=e) from e

    return base64.b64encode(ciphertext).decode("ascii")

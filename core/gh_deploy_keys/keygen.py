"""SSH keypair generation for new deploy keys"""

from typing import Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519


def generate_ssh_keypair(comment: str = "") -> Tuple[str, str]:
    """Generate an Ed25519 SSH keypair

    Args:
        comment: Appended to the public key line (usually the key title)

    Returns:
        Tuple of (private_key, public_key). The private key is in OpenSSH
        PEM format, the public key is one ``ssh-ed25519 AAAA...`` line.
    """
    private_key = ed25519.Ed25519PrivateKey.generate()

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.OpenSSH,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('ascii')

    public_line = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH
    ).decode('ascii')

    if comment:
        public_line = f"{public_line} {comment}"

    return private_pem, public_line

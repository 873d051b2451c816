"""
Encryption of repository secrets.

GitHub only accepts secrets encrypted for the repository's public key with a
libsodium sealed box: an ephemeral X25519 key pair, a nonce derived with
BLAKE2b from both public keys, and an XSalsa20-Poly1305 box. The output is the
ephemeral public key followed by the ciphertext, base64 encoded.
"""

from nacl import encoding, public

EPHEMERAL_KEY_LENGTH = public.PublicKey.SIZE
MAC_LENGTH = 16


def encrypt_secret(plaintext: str, base64_public_key: str) -> str:
    """
    Encrypt `plaintext` for the holder of the private key matching `base64_public_key`.

    Args:
        plaintext: Secret value
        base64_public_key: Repository public key as returned by the secrets API

    Returns:
        Base64 of the sealed box, `32 + 16 + len(plaintext)` bytes before encoding
    """
    key = public.PublicKey(base64_public_key.encode("utf-8"), encoding.Base64Encoder)
    sealed_box = public.SealedBox(key)
    return encoding.Base64Encoder.encode(sealed_box.encrypt(plaintext.encode("utf-8"))).decode("utf-8")

"""Encryption plugin: values are encrypted before storage and decrypted on read.

Options:
    secret: Passphrase the encryption key is derived from (required)
    algorithm: ``fernet`` or ``aesgcm`` (required)
    iterations: PBKDF2 iterations used for key derivation

Each value gets a fresh salt (and nonce for AES-GCM). The stored payload is
``"@" + JSON`` holding everything needed to decrypt it later.
"""

import base64
import json
import logging
import os

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from hookstore.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PREFIX = "@"
DEFAULT_ITERATIONS = 100_000
SALT_BYTES = 16
NONCE_BYTES = 12


def derive_key(secret: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(secret.encode("utf-8"))


def _encrypt_fernet(key: bytes, plaintext: bytes) -> dict:
    token = Fernet(base64.urlsafe_b64encode(key)).encrypt(plaintext)
    return {"ct": token.decode("ascii")}


def _decrypt_fernet(key: bytes, data: dict) -> bytes:
    return Fernet(base64.urlsafe_b64encode(key)).decrypt(data["ct"].encode("ascii"))


def _encrypt_aesgcm(key: bytes, plaintext: bytes) -> dict:
    nonce = os.urandom(NONCE_BYTES)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    return {"iv": nonce.hex(), "ct": base64.b64encode(ciphertext).decode("ascii")}


def _decrypt_aesgcm(key: bytes, data: dict) -> bytes:
    return AESGCM(key).decrypt(bytes.fromhex(data["iv"]), base64.b64decode(data["ct"]), None)


ALGORITHMS = {
    "fernet": (_encrypt_fernet, _decrypt_fernet),
    "aesgcm": (_encrypt_aesgcm, _decrypt_aesgcm),
}


def stringify(algorithm: str, salt: bytes, fields: dict) -> str:
    """Serialize ciphertext and its parameters into the stored payload.

    The prefix keeps a JSON decoder from parsing the payload before it has
    been decrypted.
    """
    return PREFIX + json.dumps({"alg": algorithm, "s": salt.hex(), **fields})


def parse(payload: str) -> dict:
    return json.loads(payload[len(PREFIX):])


def is_encrypted(value) -> bool:
    return isinstance(value, str) and value.startswith(PREFIX)


def encrypter(ctx):
    """Encrypts all the in/output of the storage using ``secret`` and ``algorithm``."""
    secret = ctx.options.get("secret")
    algorithm = ctx.options.get("algorithm") or ctx.options.get("encryption")
    iterations = int(ctx.options.get("iterations", DEFAULT_ITERATIONS))

    if not secret:
        raise ConfigurationError("the `secret` option must be set", component="encrypt")
    if not algorithm:
        raise ConfigurationError("the `algorithm` option must be set", component="encrypt")
    if algorithm not in ALGORITHMS:
        raise ConfigurationError(
            f"unknown algorithm: {algorithm}. Available: {', '.join(ALGORITHMS)}",
            component="encrypt",
        )

    seal, unseal = ALGORITHMS[algorithm]

    def encrypt(envelope, options):
        value = envelope.get("value")
        if not value:
            return None
        if not isinstance(value, str):
            raise TypeError(
                f"encrypt plugin can only store strings, got {type(value).__name__} "
                f"for key({envelope.get('key')}); install the json plugin as well"
            )

        salt = os.urandom(SALT_BYTES)
        key = derive_key(secret, salt, iterations)
        return {"value": stringify(algorithm, salt, seal(key, value.encode("utf-8")))}

    def decrypt(envelope, options):
        value = envelope.get("value")
        if not is_encrypted(value):
            return None

        data = parse(value)
        key = derive_key(secret, bytes.fromhex(data["s"]), iterations)
        _, open_with = ALGORITHMS.get(data.get("alg"), (None, unseal))
        return {"value": open_with(key, data).decode("utf-8")}

    # Lowest order: encrypts after every other write hook
    ctx.before({"set_item": encrypt, "multi_set": encrypt}, {"order": 0})

    # Above the default order: decrypts before other read hooks see the value
    ctx.after({"get_item": decrypt, "multi_get": decrypt}, {"order": 111})

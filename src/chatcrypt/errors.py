"""
Exceptions raised by the chatcrypt engines.

Input validation errors also derive from ValueError so callers that only
care about "bad input" can catch that.
"""


class ChatCryptError(Exception):
    """Base exception for chatcrypt errors."""
    pass


class InputValidationError(ChatCryptError, ValueError):
    """Input rejected before any cryptographic work was done."""
    pass


class InvalidKeyLengthError(InputValidationError):
    """AES key is not exactly 16 bytes."""

    def __init__(self, length: int, expected: int = 16):
        self.length = length
        self.expected = expected
        super().__init__(f"Key must be {expected} bytes, got {length}")


class InvalidHexError(InputValidationError):
    """Hex string has non-hex characters or an odd length."""
    pass


class InvalidCiphertextLengthError(InputValidationError):
    """Ciphertext byte length is not a multiple of the block size."""

    def __init__(self, length: int, block_size: int = 16):
        self.length = length
        self.block_size = block_size
        super().__init__(
            f"Ciphertext length must be a multiple of {block_size} bytes, got {length}"
        )


class EmptyInputError(InputValidationError):
    """Plaintext or ciphertext is empty."""
    pass


class MessageTooLongError(InputValidationError):
    """Plaintext needs more RSA chunks than allowed."""

    def __init__(self, length: int, maximum: int):
        self.length = length
        self.maximum = maximum
        super().__init__(
            f"Message too long: {length} bytes, maximum is {maximum} bytes"
        )


class InvalidChunkError(InputValidationError):
    """RSA ciphertext chunk is empty or not a byte string."""
    pass


class InvalidKeyFormatError(InputValidationError):
    """Serialized RSA key is not in "<hex>:<hex>" form."""
    pass


class PaddingError(ChatCryptError):
    """Padding check failed after AES decryption."""

    def __init__(self, message: str, pad_value: int | None = None):
        self.pad_value = pad_value
        super().__init__(message)


class DecodingError(ChatCryptError):
    """Decrypted bytes are not valid UTF-8."""
    pass


class KeyGenerationError(ChatCryptError):
    """RSA key generation failed; the caller should retry."""
    pass

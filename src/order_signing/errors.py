"""Errors raised while verifying signed orders.

Every error is fatal for the order or trade it was raised for. None of them
are retried, and none of them say anything about other orders in a batch.
"""


class OrderSigningError(Exception):
    """Base class for order verification failures."""


class InvalidScheme(OrderSigningError):
    """The signing scheme tag is not one of the supported schemes."""


class MalformedSignature(OrderSigningError):
    """The signature payload has the wrong width or shape for its scheme."""


class InvalidSignature(OrderSigningError):
    """The signature is well formed but does not authenticate the order."""


class InvalidDelegatedVerification(OrderSigningError):
    """An EIP-1271 verifier rejected the order or misbehaved while verifying it."""


class IndexOutOfRange(OrderSigningError):
    """A trade references a token index outside of the token list."""


class OrderDecodingError(OrderSigningError):
    """Encoded order or call data could not be decoded."""

"""Request signing and the authenticating transport."""

from .tokens import CoinbaseJwtSigner, SignedToken, format_uri, load_private_key, parse_key, sign
from .transport import AuthenticatingTransport

__all__ = [
    "AuthenticatingTransport",
    "CoinbaseJwtSigner",
    "SignedToken",
    "format_uri",
    "load_private_key",
    "parse_key",
    "sign",
]

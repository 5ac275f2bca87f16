"""Core request machinery shared by every operation.

Holds the parts that do not depend on a particular endpoint: the error
factory, the token cache, security credential encryption, the builder
framework and the dispatch pipeline.
"""

from .builder import RequestBuilder, RequestSpec, check_url, coerce_enum
from .dispatch import Dispatcher
from .errors import ErrorFactory
from .security import encrypt_password, load_certificate
from .token_cache import TokenCache

__all__ = [
    "Dispatcher",
    "ErrorFactory",
    "RequestBuilder",
    "RequestSpec",
    "TokenCache",
    "check_url",
    "coerce_enum",
    "encrypt_password",
    "load_certificate",
]

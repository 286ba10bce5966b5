from .auth import AuthStrategy, CallableTokenAuth, ContextTokenAuth, NoAuth, TokenAuth, request_token
from .cache import TTLCache
from .client import ServerApiClient
from .config import ClientConfig
from .enums import DEFAULT_ENUM_DATA, EnumData, EnumService
from .exceptions import ApiError, BaseClientException, NetworkError
from .logging_config import configure_structlog
from .request import RequestDescriptor
from .utils import with_error_handling, with_retries

__all__ = [
    "ApiError",
    "DEFAULT_ENUM_DATA",
    "AuthStrategy",
    "BaseClientException",
    "CallableTokenAuth",
    "ClientConfig",
    "ContextTokenAuth",
    "EnumData",
    "EnumService",
    "NetworkError",
    "NoAuth",
    "RequestDescriptor",
    "ServerApiClient",
    "TTLCache",
    "TokenAuth",
    "configure_structlog",
    "request_token",
    "with_error_handling",
    "with_retries",
]

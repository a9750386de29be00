from .errors import ApiClientError
from .gateway_api_client import GatewayApiClient

__all__ = [
    "GatewayApiClient",
    "ApiClientError",
]

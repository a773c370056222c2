"""Bearer token acquisition through the Azure default credential chain.

The token is acquired once per process; refreshing it mid-run is not
supported, so long runs should be kept within the token lifetime.

Credential sources tried by DefaultAzureCredential, in order:
    1. Environment variables (service principal)
    2. Workload / managed identity
    3. Azure CLI, Azure PowerShell and developer tool logins
"""

from dataclasses import dataclass

from azure.core.exceptions import ClientAuthenticationError
from azure.identity import DefaultAzureCredential

from blob_inventory.core import get_logger
from blob_inventory.core.exceptions import AuthenticationError

logger = get_logger(__name__)


@dataclass(frozen=True)
class BearerToken:
    """Opaque bearer secret and its expiry (epoch seconds)."""

    secret: str
    expires_on: int

    def __repr__(self) -> str:
        return f"BearerToken(secret='***', expires_on={self.expires_on})"


def acquire_token(scope: str) -> BearerToken:
    """Acquire a bearer token for the given scope.

    Args:
        scope: OAuth scope, e.g. https://storage.azure.com/.default

    Returns:
        BearerToken with the secret and expiry

    Raises:
        AuthenticationError: If no credential in the chain can issue a token
    """
    logger.info("Acquiring bearer token", scope=scope)
    credential = DefaultAzureCredential()
    try:
        access_token = credential.get_token(scope)
    except ClientAuthenticationError as e:
        error_msg = f"Failed to acquire token for scope '{scope}': {e.message}"
        logger.error(error_msg)
        raise AuthenticationError(error_msg) from e
    finally:
        credential.close()

    logger.info("Bearer token acquired", expires_on=access_token.expires_on)
    return BearerToken(secret=access_token.token, expires_on=access_token.expires_on)

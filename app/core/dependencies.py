from fastapi import HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.security import Principal, jwt_manager

security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> Principal:
    """
    Dependency that requires a valid Bearer token and returns the caller.
    Raises 401 Unauthorized if the token is missing or invalid.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return jwt_manager.principal_from_token(credentials.credentials)

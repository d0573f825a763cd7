"""Dependency injection for FastAPI endpoints"""

import logging
from fastapi import Depends, Header, HTTPException, Request
from savings_gateway.infrastructure.clients.identity import IdentityClient
from savings_gateway.domain.exceptions import AuthenticationError, IdentityServiceError


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_identity_client() -> IdentityClient:
    """Provide identity provider client instance"""
    return IdentityClient()


async def get_current_user_id(
    authorization: str | None = Header(None),
    identity_client: IdentityClient = Depends(get_identity_client),
) -> str:
    """Verify the bearer token and return the authenticated user id"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized: No token provided")

    token = authorization.split(" ", 1)[1]
    try:
        return await identity_client.get_user_id(token)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=f"Unauthorized: {e}")
    except IdentityServiceError as e:
        logging.error(f"Identity service error: {e}")
        raise HTTPException(status_code=503, detail="Identity service unavailable")

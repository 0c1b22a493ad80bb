import logging

from fastapi import APIRouter, HTTPException, status, Depends, Request

from backend.crypto import EncodingError, encode_public_key, decode_public_key
from backend.registry import KeyRegistry
from gateway.models import KeyRequest, PublicKeyResponse, TxResponse, MessageResponse, ErrorResponse
from gateway.security import MISSING_FIELDS, has_required_fields

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_REGISTERED = "User not registered"
ALREADY_REGISTERED = "User ID is already registered"
INVALID_KEY = "publicKey is not a valid RSA public key"

def get_registry(request: Request) -> KeyRegistry:
    """Registry collaborator bound to the application at startup"""
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Key registry is not configured"
        )
    return registry

def get_key_encoding(request: Request) -> str:
    return request.app.state.settings.KEY_ENCODING

def _encode_request_key(request: KeyRequest, fmt: str) -> bytes:
    try:
        return encode_public_key(request.publicKey.n, request.publicKey.e, fmt=fmt)
    except EncodingError as e:
        logger.warning(f"Rejected public key for user {request.userId}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_KEY)

def _internal_error(action: str, user_id: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action} for user {user_id}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e)
    )

@router.post(
    "/register",
    summary="Register a user with their public key",
    response_model=TxResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields or user already registered"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
@router.post("/registerUser", response_model=TxResponse, include_in_schema=False)
async def register_user(
    request: KeyRequest,
    registry: KeyRegistry = Depends(get_registry),
    key_encoding: str = Depends(get_key_encoding),
):
    """Store a new user's RSA public key on-chain"""
    if not has_required_fields(request):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_FIELDS)

    try:
        public_key_bytes = _encode_request_key(request, key_encoding)

        if await registry.is_user_registered(request.userId):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_REGISTERED)

        confirmation = await registry.set_public_key(request.userId, public_key_bytes)
        logger.info(f"Registered public key for user {request.userId}: {confirmation.tx_hash}")

        return {"message": "User registered successfully", "txHash": confirmation.tx_hash}

    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("register public key", request.userId, e)

@router.get(
    "/user/{userId}",
    summary="Get a user's public key",
    response_model=PublicKeyResponse,
    responses={
        404: {"model": ErrorResponse, "description": "User not registered"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
@router.get("/getUser/{userId}", response_model=PublicKeyResponse, include_in_schema=False)
async def get_user(
    userId: str,
    registry: KeyRegistry = Depends(get_registry),
):
    """Fetch and decode a user's RSA public key"""
    try:
        if not await registry.is_user_registered(userId):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_REGISTERED)

        public_key_bytes = await registry.get_public_key(userId)
        json_key = decode_public_key(public_key_bytes)

        return {"userId": userId, "publicKey": json_key}

    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("get public key", userId, e)

@router.post(
    "/updateUser",
    summary="Update a registered user's public key",
    response_model=TxResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields"},
        404: {"model": ErrorResponse, "description": "User not registered"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
async def update_user(
    request: KeyRequest,
    registry: KeyRegistry = Depends(get_registry),
    key_encoding: str = Depends(get_key_encoding),
):
    """Replace a registered user's RSA public key"""
    if not has_required_fields(request):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_FIELDS)

    try:
        if not await registry.is_user_registered(request.userId):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_REGISTERED)

        public_key_bytes = _encode_request_key(request, key_encoding)

        confirmation = await registry.update_public_key(request.userId, public_key_bytes)
        logger.info(f"Updated public key for user {request.userId}: {confirmation.tx_hash}")

        return {
            "message": f"Public Key updated for User ID: {request.userId}",
            "txHash": confirmation.tx_hash
        }

    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("update public key", request.userId, e)

@router.delete(
    "/deleteUser/{userId}",
    summary="Delete a user's public key",
    response_model=MessageResponse,
    responses={
        404: {"model": ErrorResponse, "description": "User not registered"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
async def delete_user(
    userId: str,
    registry: KeyRegistry = Depends(get_registry),
):
    """Remove a user's RSA public key from the registry"""
    try:
        if not await registry.is_user_registered(userId):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_REGISTERED)

        confirmation = await registry.delete_public_key(userId)
        logger.info(f"Deleted public key for user {userId}: {confirmation.tx_hash}")

        return {"message": f"User with User ID: {userId} deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("delete public key", userId, e)

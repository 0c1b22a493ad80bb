from pydantic import BaseModel, Field, field_validator
from typing import Optional, Union

# All fields optional: presence is checked in the route handlers.

class PublicKeyJSON(BaseModel):
    n: Optional[Union[str, int]] = Field(default=None, description="RSA modulus as a base-10 string")
    e: Optional[Union[int, str]] = Field(default=None, description="RSA public exponent")

class KeyRequest(BaseModel):
    userId: Optional[str] = None
    publicKey: Optional[PublicKeyJSON] = None

    @field_validator("userId", mode="before")
    @classmethod
    def numeric_user_id(cls, value):
        # numeric ids are stored as their decimal string; 0 counts as missing
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value) if value else None
        return value

    model_config = {
        "json_schema_extra": {
            "examples": [{"userId": "alice", "publicKey": {"n": "2535...9871", "e": 65537}}]
        }
    }

class PublicKeyResponse(BaseModel):
    userId: str
    publicKey: PublicKeyJSON

class TxResponse(BaseModel):
    message: str
    txHash: str

class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    error: str

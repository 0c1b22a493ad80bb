from typing import Optional

from gateway.models import KeyRequest

MISSING_FIELDS = "userId and publicKey are required"

def has_required_fields(request: Optional[KeyRequest]) -> bool:
    """True when userId, publicKey.n and publicKey.e are all present and non-empty"""
    if request is None or not request.userId:
        return False
    key = request.publicKey
    if key is None:
        return False
    # 0 and "" count as missing, same as absent
    return bool(key.n) and bool(key.e)

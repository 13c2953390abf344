"""
Request identity.

Authentication happens upstream; the proxy forwards the verified user id in
a header. These dependencies turn that header into an explicit Identity.
"""

from typing import Optional

from fastapi import Depends, Request

from resume_tailor.errors import Unauthenticated
from resume_tailor.models import Identity

from .settings import settings


def get_identity(request: Request) -> Optional[Identity]:
    """Identity from the request, or None when the caller is anonymous."""
    user_id = (request.headers.get(settings.identity_header) or "").strip()
    if not user_id:
        return None
    return Identity(user_id=user_id)


def require_identity(
    identity: Optional[Identity] = Depends(get_identity),
) -> Identity:
    if identity is None:
        raise Unauthenticated("Unauthorized")
    return identity

from __future__ import annotations

from pydantic import BaseModel


class Identity(BaseModel):
    """Verified session identity of the caller, as issued by the auth provider."""

    uid: str

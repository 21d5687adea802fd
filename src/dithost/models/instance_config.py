"""Uniform instance bootstrap payload consumed by every provider's ``deploy``."""

from __future__ import annotations

from pydantic import BaseModel


class InstanceConfig(BaseModel):
    """Backend-agnostic bootstrap data for one instance.

    ``user_data`` is an opaque string (typically a ``#cloud-config``
    document) that providers hand to the backend verbatim.
    """

    user_data: str

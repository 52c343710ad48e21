"""Shared base configuration for the service's value types."""

from pydantic import BaseModel, ConfigDict


# ═══════════════════════════════════════════════════════════════════════════
# BASE CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════

class CanonicalModel(BaseModel):
    """A base model providing shared configuration for all value types.

    Configuration:
        frozen: Prevents modification after creation.
        extra: Rejects unknown fields.
    """
    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )

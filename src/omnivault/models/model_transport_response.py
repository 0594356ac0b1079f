# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Transport response model returned by the Vault transport."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelTransportResponse(BaseModel):
    """One HTTP response from Vault with its body already parsed.

    Attributes:
        status: HTTP status code
        body: Parsed JSON body (empty for 204 responses)
        headers: Response headers
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: int = Field(ge=100, le=599)
    body: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Return True for 2xx responses."""
        return 200 <= self.status < 300

    @property
    def errors(self) -> list[str]:
        """Return the error strings Vault reported in the body."""
        errors = self.body.get("errors")
        if isinstance(errors, list):
            return [str(e) for e in errors]
        return []


__all__ = ["ModelTransportResponse"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Call descriptor passed to execution strategies."""

from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from omnivault.errors import ModelVaultErrorContext


class ModelCallDescriptor(BaseModel):
    """Metadata describing one logical client call.

    Attributes:
        operation: Operation name used in logs and error context
        method: HTTP method, when the call maps to a single request
        path: Request path relative to ``/v1`` or the lease key
        correlation_id: Correlation ID shared by every attempt of the call
        namespace: Vault namespace the call runs in
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    operation: str = Field(min_length=1)
    method: str | None = Field(default=None)
    path: str | None = Field(default=None)
    correlation_id: UUID = Field(default_factory=uuid4)
    namespace: str | None = Field(default=None)

    def error_context(self) -> ModelVaultErrorContext:
        """Build the error context for failures of this call."""
        return ModelVaultErrorContext(
            operation=self.operation,
            target_name=self.path,
            correlation_id=self.correlation_id,
            namespace=self.namespace,
        )

    def log_extra(self) -> dict[str, str | None]:
        """Return the structured logging fields for this call."""
        return {
            "operation": self.operation,
            "path": self.path,
            "correlation_id": str(self.correlation_id),
        }


__all__ = ["ModelCallDescriptor"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Error Context Configuration Model.

This module defines the model for Vault client error context, bundling the
common structured fields carried by every client error so error constructors
keep a short, strongly typed signature.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ModelVaultErrorContext(BaseModel):
    """Structured context attached to Vault client errors.

    Attributes:
        operation: Operation being performed (e.g. "database.generate_credentials")
        target_name: Request path or lease key the operation targeted
        correlation_id: Call correlation ID for tracing
        namespace: Vault Enterprise namespace, if any

    Example:
        >>> context = ModelVaultErrorContext(
        ...     operation="lease.renew",
        ...     target_name="database:database:readonly",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise ServerError("Vault returned 503", context=context, status=503)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    operation: str | None = Field(
        default=None,
        description="Operation being performed",
    )
    target_name: str | None = Field(
        default=None,
        description="Request path or lease key",
    )
    correlation_id: UUID | None = Field(
        default=None,
        description="Call correlation ID for tracing",
    )
    namespace: str | None = Field(
        default=None,
        description="Vault Enterprise namespace",
    )


__all__ = ["ModelVaultErrorContext"]

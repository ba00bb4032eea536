"""Application-layer errors — failures of a use case as a whole."""

from __future__ import annotations

from mp_mailer.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


__all__ = ["ApplicationError"]

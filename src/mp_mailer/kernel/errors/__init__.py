"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   └── ValidationError
    ├── ApplicationError     (application.py)
    └── InfrastructureError  (infrastructure.py)
        ├── ConnectionError
        └── ExternalServiceError
"""

from mp_mailer.kernel.errors.application import ApplicationError
from mp_mailer.kernel.errors.base import BaseError
from mp_mailer.kernel.errors.domain import (
    DomainError,
    ValidationError,
)
from mp_mailer.kernel.errors.infrastructure import (
    ConnectionError,
    ExternalServiceError,
    InfrastructureError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConnectionError",
    "DomainError",
    "ExternalServiceError",
    "InfrastructureError",
    "ValidationError",
]

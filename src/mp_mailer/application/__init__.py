"""Application – use-case building blocks (framework-agnostic)."""

from mp_mailer.application.email import MailMessage, Part, Resource, deliver

__all__ = ["MailMessage", "Part", "Resource", "deliver"]

"""
mp_mailer – MIME message composition and delivery.

Import path convention::

    from mp_mailer.application.email import MailMessage, Part, Resource
    from mp_mailer.application.email import SmtpTransport, deliver
    from mp_mailer.kernel.errors import ValidationError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

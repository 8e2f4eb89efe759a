"""
Clients for third-party services.

Each client is a thin async wrapper over one HTTP API (or SMTP). Upstream
failures are mapped to application exceptions here, so services and routes
only ever see ``AppException`` subclasses.
"""

from src.integrations.google_api import GoogleApiClient
from src.integrations.google_identity import GoogleIdentity, GoogleIdentityClient
from src.integrations.quote_providers import QUOTE_PROVIDERS, QuoteProvider, get_quote_provider
from src.integrations.smtp import SmtpMailer

__all__ = [
    "GoogleApiClient",
    "GoogleIdentity",
    "GoogleIdentityClient",
    "QUOTE_PROVIDERS",
    "QuoteProvider",
    "SmtpMailer",
    "get_quote_provider",
]

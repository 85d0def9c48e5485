"""
Document Generator Client

A Python client for a document-generation microservice that renders URLs
or HTML fragments to PNG and PDF.

Features:
- One POST per call, no retries
- Optional AES-256-CTR encryption of the request message
- Single error type for callers, original cause preserved

Usage:
    import httpx
    from docgen_client import DocumentGenerator

    with httpx.Client() as client:
        generator = DocumentGenerator("http://localhost:3000", client)
        pdf = generator.generate_pdf_from_url("https://example.com")
"""

from .config import (
    AppConfig,
    GeneratorConfig,
    LogConfig,
    LogFormat,
    load_config,
)

from .crypto import MessageCipher

from .exceptions import (
    ConfigurationError,
    CryptoUnavailableError,
    DocumentGeneratorError,
    GenerationFailure,
    SerializationError,
    TransportError,
    UpstreamError,
    ValidationError,
)

from .generator import DocumentGenerator

from .logging_config import configure_logging

from .models import (
    EncryptedEnvelope,
    GenerationOptions,
    GenerationRequest,
    OutputType,
    SourceKind,
)


__version__ = "0.1.0"
__all__ = [
    # Config
    "AppConfig",
    "GeneratorConfig",
    "LogConfig",
    "LogFormat",
    "load_config",
    "configure_logging",

    # Models
    "EncryptedEnvelope",
    "GenerationOptions",
    "GenerationRequest",
    "OutputType",
    "SourceKind",

    # Errors
    "ConfigurationError",
    "CryptoUnavailableError",
    "DocumentGeneratorError",
    "GenerationFailure",
    "SerializationError",
    "TransportError",
    "UpstreamError",
    "ValidationError",

    # Client
    "DocumentGenerator",
    "MessageCipher",
]

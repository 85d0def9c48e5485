"""
Document Generator Client - Generator

Client for the document-generation microservice. Renders a URL or an HTML
fragment to PNG or PDF and returns the binary payload.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

import httpx
import structlog

from .config import GeneratorConfig
from .crypto import KeyType, MessageCipher
from .exceptions import (
    ConfigurationError,
    DocumentGeneratorError,
    GenerationFailure,
    TransportError,
    UpstreamError,
)
from .models import GenerationRequest, OutputType, SourceKind

log = structlog.get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"

PLAIN_ENDPOINT = "/"
ENCRYPTED_ENDPOINT = "/encrypted"

Options = Optional[Mapping[str, Any]]


class DocumentGenerator:
    """
    Calls the document-generation service and returns the rendered bytes.

    Each public method issues exactly one POST and never retries. Any
    failure is raised as `DocumentGeneratorError`.

    The encryption flag set by `set_encryption` is shared by every call on
    the instance; do not toggle it while other threads use the same
    generator. Pass `encrypted=` per call instead.
    """

    def __init__(
        self,
        base_uri: str,
        client: httpx.Client,
        encryption_key: Optional[KeyType] = None,
        logger: Optional[Any] = None,
        encrypt_data: bool = False,
        cipher: Optional[MessageCipher] = None,
    ):
        """
        Initialize the generator.

        Args:
            base_uri: Base URI of the service, trailing slash ignored
            client: HTTP client used for every request
            encryption_key: Key used to encrypt messages, if any
            logger: Optional logger (structlog or logging) receiving failures
            encrypt_data: Initial state of the encryption flag
            cipher: Cipher to use instead of one built from `encryption_key`
        """
        if not isinstance(base_uri, str) or not base_uri.strip():
            raise ConfigurationError("Base URI of the API must be defined.")

        self.base_uri = base_uri.strip().rstrip("/")
        self.client = client
        self.cipher = cipher or MessageCipher(encryption_key)
        self.logger = logger
        self.encryption_enabled = encrypt_data
        self._owns_client = False

    @classmethod
    def from_config(
        cls,
        config: GeneratorConfig,
        logger: Optional[Any] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "DocumentGenerator":
        """Build a generator and its own HTTP client from configuration."""
        client = httpx.Client(timeout=config.timeout, transport=transport)
        generator = cls(
            config.base_uri,
            client,
            encryption_key=config.get_encryption_key(),
            logger=logger,
            encrypt_data=config.encrypt_data,
        )
        generator._owns_client = True
        return generator

    def __enter__(self) -> "DocumentGenerator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this generator created it."""
        if self._owns_client:
            self.client.close()

    def set_encryption(self, enabled: bool) -> None:
        """Indicates if data should be encrypted before send."""
        self.encryption_enabled = bool(enabled)

    def generate_png_from_url(
        self, url: str, options: Options = None, *, encrypted: Optional[bool] = None
    ) -> bytes:
        """Generate a PNG from a URL."""
        return self._process(OutputType.PNG, SourceKind.URL, url, options, encrypted=encrypted)

    def generate_png_from_html(
        self,
        html: str,
        options: Options = None,
        *,
        encode: bool = False,
        encrypted: Optional[bool] = None,
    ) -> bytes:
        """
        Generate a PNG from an HTML string.

        Args:
            html: HTML code used to generate the document
            options: Generation options (decode, pageOptions, scenario)
            encode: Base64-encode the HTML before sending
            encrypted: Override the encryption flag for this call

        Returns:
            PNG bytes as returned by the service
        """
        return self._process(
            OutputType.PNG, SourceKind.HTML, html, options, encode=encode, encrypted=encrypted
        )

    def generate_pdf_from_url(
        self, url: str, options: Options = None, *, encrypted: Optional[bool] = None
    ) -> bytes:
        """Generate a PDF from a URL."""
        return self._process(OutputType.PDF, SourceKind.URL, url, options, encrypted=encrypted)

    def generate_pdf_from_html(
        self,
        html: str,
        options: Options = None,
        *,
        encode: bool = False,
        encrypted: Optional[bool] = None,
    ) -> bytes:
        """Generate a PDF from an HTML string. See `generate_png_from_html`."""
        return self._process(
            OutputType.PDF, SourceKind.HTML, html, options, encode=encode, encrypted=encrypted
        )

    def _process(
        self,
        output_type: OutputType,
        source_kind: SourceKind,
        value: str,
        options: Options = None,
        encode: bool = False,
        encrypted: Optional[bool] = None,
    ) -> bytes:
        """Build, optionally encrypt and send one request."""
        encrypt = self.encryption_enabled if encrypted is None else encrypted

        try:
            request = GenerationRequest.build(
                output_type, source_kind, value, options, encode=encode
            )
            body = request.to_json()
            content_type, endpoint = JSON_CONTENT_TYPE, PLAIN_ENDPOINT

            if encrypt:
                content_type, endpoint = TEXT_CONTENT_TYPE, ENCRYPTED_ENDPOINT
                body = self.cipher.encrypt_to_string(body).encode("ascii")

            return self._send(endpoint, content_type, body)
        except GenerationFailure as e:
            self._log_failure(e)
            raise DocumentGeneratorError(e) from e

    def _send(self, endpoint: str, content_type: str, body: bytes) -> bytes:
        """POST the body and return the response payload on status 200."""
        url = f"{self.base_uri}{endpoint}"
        log.debug("Posting generation request", url=url, content_type=content_type)

        try:
            with self.client.stream(
                "POST",
                url,
                headers={"Content-Type": content_type},
                content=body,
            ) as response:
                if response.status_code != 200:
                    raise UpstreamError("Invalid response code.", status_code=response.status_code)
                return response.read()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Request to document generator failed: {e}") from e

    def _log_failure(self, error: GenerationFailure) -> None:
        """Log the failure message if a logger was given."""
        if self.logger is None:
            return

        try:
            self.logger.error(error.message)
        except Exception as e:
            log.warning("Failure logger raised", logger_error=type(e).__name__)

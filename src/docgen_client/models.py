"""
Document Generator Client - Data Models

Pydantic models for generation options and the request message sent to
the document-generation service.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import SerializationError, ValidationError


class OutputType(str, Enum):
    """Document formats the service can render."""
    PNG = "png"
    PDF = "pdf"


class SourceKind(str, Enum):
    """Discriminator key naming where the document comes from."""
    URL = "url"
    HTML = "html"


def _validation_error(exc: PydanticValidationError) -> ValidationError:
    """Reduce a pydantic error to the first offending field."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or None
    if error["type"] == "extra_forbidden":
        return ValidationError(f"Unknown option: {field}", field=field)
    return ValidationError(f"Invalid option '{field}': {error['msg']}", field=field)


class GenerationOptions(BaseModel):
    """Normalized generation options.

    Exactly the keys `decode`, `pageOptions` and `scenario`; anything else
    is rejected.
    """

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    decode: bool = False
    page_options: dict[str, Any] = Field(default_factory=dict, alias="pageOptions")
    scenario: Optional[str] = None

    @classmethod
    def normalize(cls, options: Optional[Mapping[str, Any]] = None) -> "GenerationOptions":
        """
        Validate caller supplied options and fill in defaults.

        Args:
            options: Open mapping of options, or None

        Returns:
            Normalized options

        Raises:
            ValidationError: On unknown keys or mistyped values
        """
        if options is None:
            return cls()
        if isinstance(options, GenerationOptions):
            return options
        if not isinstance(options, Mapping):
            raise ValidationError(
                f"Options must be a mapping, got {type(options).__name__}"
            )

        try:
            return cls.model_validate(dict(options))
        except PydanticValidationError as e:
            raise _validation_error(e) from e

    def as_message_fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class GenerationRequest(BaseModel):
    """One generation request, built and discarded within a single call."""

    model_config = ConfigDict(strict=True, frozen=True)

    output_type: OutputType
    source_kind: SourceKind
    source_value: str
    options: GenerationOptions = Field(default_factory=GenerationOptions)

    @classmethod
    def build(
        cls,
        output_type: OutputType,
        source_kind: SourceKind,
        source_value: str,
        options: Optional[Mapping[str, Any]] = None,
        encode: bool = False,
    ) -> "GenerationRequest":
        """
        Build a request from raw caller input.

        Args:
            output_type: Format to render
            source_kind: Whether `source_value` is a URL or HTML
            source_value: The URL or the HTML markup
            options: Caller supplied options, normalized here
            encode: Base64-encode the HTML and ask the service to decode it

        Returns:
            Validated request
        """
        normalized = GenerationOptions.normalize(options)

        if not isinstance(source_value, str):
            raise ValidationError(
                f"{source_kind.value} must be a string, got {type(source_value).__name__}",
                field=source_kind.value,
            )

        if encode and source_kind == SourceKind.HTML:
            source_value = encode_html(source_value)
            normalized = normalized.model_copy(update={"decode": True})

        try:
            return cls(
                output_type=output_type,
                source_kind=source_kind,
                source_value=source_value,
                options=normalized,
            )
        except PydanticValidationError as e:
            raise _validation_error(e) from e

    def to_message(self) -> dict[str, Any]:
        """Merge the options with the type and the discriminated source."""
        message: dict[str, Any] = {
            "type": self.output_type.value,
            self.source_kind.value: self.source_value,
        }
        message.update(self.options.as_message_fields())
        return message

    def to_json(self) -> bytes:
        """Serialize the message to compact UTF-8 JSON."""
        try:
            text = json.dumps(
                self.to_message(), ensure_ascii=False, separators=(",", ":"), allow_nan=False
            )
            return text.encode("utf-8")
        except (TypeError, ValueError) as e:
            # UnicodeEncodeError is a ValueError
            raise SerializationError(f"Can not serialize message: {e}") from e


def encode_html(html: str) -> str:
    """Base64-encode HTML markup for transport."""
    try:
        raw = html.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SerializationError(f"Can not encode HTML: {e}") from e
    return base64.b64encode(raw).decode("ascii")


@dataclass(frozen=True)
class EncryptedEnvelope:
    """IV and ciphertext pair, serialized as `ivHex:ciphertextHex`."""

    iv: bytes
    ciphertext: bytes

    def serialize(self) -> str:
        return f"{self.iv.hex()}:{self.ciphertext.hex()}"

    @classmethod
    def parse(cls, value: str) -> "EncryptedEnvelope":
        iv_hex, sep, ciphertext_hex = value.partition(":")
        if not sep or not iv_hex:
            raise SerializationError("Malformed envelope: expected 'iv:ciphertext'")
        try:
            return cls(iv=bytes.fromhex(iv_hex), ciphertext=bytes.fromhex(ciphertext_hex))
        except ValueError as e:
            raise SerializationError(f"Malformed envelope: {e}") from e

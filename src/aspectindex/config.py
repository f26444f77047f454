"""Environment-based configuration."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

from aspectindex.constants import (
    DEFAULT_ASPECT_FILE_SUFFIX,
    DEFAULT_JVM_RULE_KINDS,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False

    # Decoding
    decode_max_concurrency: int = Field(default=5, ge=1)
    aspect_file_suffix: str = DEFAULT_ASPECT_FILE_SUFFIX
    jvm_rule_kinds: Annotated[list[str], NoDecode] = list(
        DEFAULT_JVM_RULE_KINDS
    )

    # Jar scanning
    include_inner_classes: bool = False

    @field_validator("jvm_rule_kinds", mode="before")
    @classmethod
    def _parse_kinds(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("jvm_rule_kinds")
    @classmethod
    def _validate_kinds(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError(
                "jvm_rule_kinds must contain at least one rule kind"
            )
        seen: set[str] = set()
        dupes: list[str] = []
        for kind in v:
            if kind in seen:
                dupes.append(kind)
            seen.add(kind)
        if dupes:
            logger.warning(
                "Duplicate rule kinds in JVM_RULE_KINDS: %s",
                ", ".join(dupes),
            )
        return v

    @field_validator("aspect_file_suffix")
    @classmethod
    def _validate_suffix(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("aspect_file_suffix must not be empty")
        return v

    @property
    def jvm_kind_set(self) -> frozenset[str]:
        """JVM rule kinds as a set for membership checks."""
        return frozenset(self.jvm_rule_kinds)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }

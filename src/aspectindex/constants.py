"""Shared constants, the single source of truth for aspect JSON keys.

Keys the decoders look up by name, plus decoding defaults.
StrEnum members are str-compatible, so they can be used directly
as mapping keys against parsed JSON documents.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class JvmKey(StrEnum):
    """Keys inside the ``java_ide_info`` sub-record."""

    JAVA_IDE_INFO = "java_ide_info"
    SOURCES = "sources"
    RELATIVE_PATH = "relative_path"
    JARS = "jars"
    GENERATED_JARS = "generated_jars"
    MAIN_CLASS = "main_class"


# ── Defaults ─────────────────────────────────────────────

DEFAULT_ASPECT_FILE_SUFFIX = ".bzljavasdk-data.json"

# Rule kinds decoded as JvmTargetInfo even without java_ide_info
DEFAULT_JVM_RULE_KINDS: tuple[str, ...] = (
    "java_library",
    "java_binary",
    "java_test",
    "java_import",
    "java_plugin",
    "java_proto_library",
    "java_lite_proto_library",
    "java_grpc_library",
    "kt_jvm_library",
    "kt_jvm_binary",
    "kt_jvm_test",
    "scala_library",
    "scala_binary",
    "scala_test",
)

CLASS_FILE_SUFFIX = ".class"
INNER_CLASS_SEPARATOR = "$"
# Compiler-generated descriptors, not types
SKIPPED_CLASS_STEMS = frozenset({"module-info", "package-info"})
# Multi-release copies live under META-INF/versions/
METADATA_DIR = "META-INF/"

ERROR_TRUNCATION_CHARS = 500

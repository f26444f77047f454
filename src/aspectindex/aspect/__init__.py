"""Aspect output decoding: raw per-target records into typed TargetInfo."""

from aspectindex.aspect.batch import (
    DecodeFailure,
    DecodeReport,
    decode_aspect_documents,
    decode_aspect_documents_async,
    find_aspect_files,
    load_aspect_files,
)
from aspectindex.aspect.collection import AspectTargetInfos
from aspectindex.aspect.decoder import (
    decode_jar_triple,
    decode_jvm_target_info,
    decode_target_info,
    load_target_info,
    parse_aspect_record,
)
from aspectindex.aspect.schemas import (
    AnyTargetInfo,
    GenericTargetInfo,
    JarTriple,
    JvmTargetInfo,
    TargetInfo,
)

__all__ = [
    "AnyTargetInfo",
    "AspectTargetInfos",
    "DecodeFailure",
    "DecodeReport",
    "GenericTargetInfo",
    "JarTriple",
    "JvmTargetInfo",
    "TargetInfo",
    "decode_aspect_documents",
    "decode_aspect_documents_async",
    "decode_jar_triple",
    "decode_jvm_target_info",
    "decode_target_info",
    "find_aspect_files",
    "load_aspect_files",
    "load_target_info",
    "parse_aspect_record",
]

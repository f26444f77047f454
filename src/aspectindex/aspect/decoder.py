"""Decode one target's aspect record into a typed TargetInfo.

Decoding walks the raw document one nesting level at a time: the
outer record, the ``java_ide_info`` sub-record, each source entry,
and each jar sub-document. Jar array elements are serialized JSON
documents in their own right, so they get a second parse pass before
they are decoded into a :class:`JarTriple`.

Missing optional fields are never errors. A value of the wrong shape
raises :class:`AspectDecodeError` for that one target only.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Collection, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from aspectindex.aspect.schemas import (
    GenericTargetInfo,
    JarTriple,
    JvmTargetInfo,
    RawArtifactLocation,
    RawAspectRecord,
    RawJarTriple,
    RawJavaIdeInfo,
)
from aspectindex.constants import DEFAULT_JVM_RULE_KINDS, JvmKey
from aspectindex.resilience.errors import AspectDecodeError

logger = logging.getLogger(__name__)

_DEFAULT_JVM_KINDS = frozenset(DEFAULT_JVM_RULE_KINDS)


def decode_jar_triple(
    raw: Any, *, label: str | None = None
) -> JarTriple:
    """Decode one parsed jar sub-document; any subset of keys may be absent."""
    parsed = _validate(RawJarTriple, raw, label, "jar sub-document")
    return JarTriple(
        interface_jar=parsed.interface_jar,
        jar=parsed.jar,
        source_jar=parsed.source_jar,
    )


def decode_jvm_target_info(
    raw: Mapping[str, Any],
    workspace_relative_path: str,
    kind: str,
    label: str,
    deps: Sequence[str],
) -> JvmTargetInfo:
    """Build a JvmTargetInfo from a raw record plus the caller's outer fields.

    Without a ``java_ide_info`` sub-record, sources, jars and generated
    jars are empty and main_class is None.
    """
    if not isinstance(raw, Mapping):
        raise AspectDecodeError(
            label, f"record must be an object, got {type(raw).__name__}"
        )

    ide_info_raw = raw.get(JvmKey.JAVA_IDE_INFO)
    if ide_info_raw is None:
        logger.debug("No %s for %s", JvmKey.JAVA_IDE_INFO, label)
        return JvmTargetInfo(
            label=label,
            kind=kind,
            workspace_relative_path=workspace_relative_path,
            deps=tuple(deps),
        )

    ide_info = _validate(
        RawJavaIdeInfo, ide_info_raw, label, JvmKey.JAVA_IDE_INFO
    )

    # 1. Sources: entries without relative_path contribute nothing
    sources = tuple(
        s.relative_path
        for s in ide_info.sources or ()
        if s.relative_path is not None
    )

    # 2. Jars: second parse pass per element
    jars = _decode_jar_array(ide_info.jars, label, JvmKey.JARS)
    generated_jars = _decode_jar_array(
        ide_info.generated_jars, label, JvmKey.GENERATED_JARS
    )

    return JvmTargetInfo(
        label=label,
        kind=kind,
        workspace_relative_path=workspace_relative_path,
        deps=tuple(deps),
        sources=sources,
        jars=jars,
        generated_jars=generated_jars,
        main_class=ide_info.main_class,
    )


def decode_target_info(
    raw: Mapping[str, Any],
    workspace_relative_path: str,
    kind: str,
    label: str,
    deps: Sequence[str],
    *,
    jvm_kinds: Collection[str] | None = None,
) -> GenericTargetInfo | JvmTargetInfo:
    """Decode a record into the variant selected by its rule kind.

    JVM rule kinds, and any record carrying ``java_ide_info``, decode
    to :class:`JvmTargetInfo`; everything else to
    :class:`GenericTargetInfo`.
    """
    kinds = _DEFAULT_JVM_KINDS if jvm_kinds is None else jvm_kinds
    if not isinstance(raw, Mapping):
        raise AspectDecodeError(
            label, f"record must be an object, got {type(raw).__name__}"
        )
    if kind in kinds or raw.get(JvmKey.JAVA_IDE_INFO) is not None:
        return decode_jvm_target_info(
            raw, workspace_relative_path, kind, label, deps
        )
    return GenericTargetInfo(
        label=label,
        kind=kind,
        workspace_relative_path=workspace_relative_path,
        deps=tuple(deps),
    )


def parse_aspect_record(
    raw: Mapping[str, Any],
    *,
    jvm_kinds: Collection[str] | None = None,
) -> GenericTargetInfo | JvmTargetInfo:
    """Extract label, kind, build file and deps from an outer record, then decode.

    Accepts the flat layout (``label``, ``kind``, ``dependencies``) and
    the keyed layout (``key.label``, ``kind_string``,
    ``deps[].target.label``).
    """
    record = _validate(RawAspectRecord, raw, _peek_label(raw), "record")

    label = record.label
    if label is None and record.key is not None:
        label = record.key.label
    if label is None:
        raise AspectDecodeError(None, "record has no label")

    kind = record.kind if record.kind is not None else record.kind_string
    if kind is None:
        raise AspectDecodeError(label, "record has no kind")

    location = record.build_file_artifact_location
    if isinstance(location, RawArtifactLocation):
        build_file = location.relative_path or ""
    else:
        build_file = location or ""

    if record.dependencies is not None:
        deps = list(record.dependencies)
    else:
        deps = [d.target.label for d in record.deps or ()]

    return decode_target_info(
        raw, build_file, kind, label, deps, jvm_kinds=jvm_kinds
    )


def load_target_info(
    text: str | bytes,
    *,
    jvm_kinds: Collection[str] | None = None,
) -> GenericTargetInfo | JvmTargetInfo:
    """Parse one serialized aspect record and decode it."""
    try:
        raw = json.loads(text)
    except (
        json.JSONDecodeError,
        UnicodeDecodeError,
        RecursionError,
    ) as exc:
        raise AspectDecodeError(None, f"invalid JSON: {exc}") from exc
    return parse_aspect_record(raw, jvm_kinds=jvm_kinds)


# ── Internal helpers ─────────────────────────────────────


M = TypeVar("M", bound=BaseModel)


def _validate(
    model: type[M], raw: Any, label: str | None, what: str
) -> M:
    """Shape-check one nesting level, mapping failures to AspectDecodeError."""
    if not isinstance(raw, Mapping):
        raise AspectDecodeError(
            label, f"{what} must be an object, got {type(raw).__name__}"
        )
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise AspectDecodeError(
            label, f"malformed {what}: {_summarize(exc)}"
        ) from exc


def _decode_jar_array(
    elements: list[Any] | None, label: str, key: str
) -> tuple[JarTriple, ...]:
    if elements is None:
        return ()
    triples: list[JarTriple] = []
    for i, element in enumerate(elements):
        text = _as_serialized(element, label, f"{key}[{i}]")
        try:
            parsed = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise AspectDecodeError(
                label, f"{key}[{i}] is not a JSON document: {exc}"
            ) from exc
        triples.append(decode_jar_triple(parsed, label=label))
    return tuple(triples)


def _as_serialized(element: Any, label: str, where: str) -> str:
    """Serialized text of a jar array element.

    Elements normally arrive as JSON text. One that was already parsed
    is serialized again so every element goes through the same parse.
    """
    if isinstance(element, str):
        return element
    try:
        return json.dumps(element)
    except (TypeError, ValueError, RecursionError) as exc:
        raise AspectDecodeError(
            label, f"{where} is not JSON serializable: {exc}"
        ) from exc


def _peek_label(raw: Any) -> str | None:
    if isinstance(raw, Mapping):
        label = raw.get("label")
        if isinstance(label, str):
            return label
    return None


def _summarize(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)

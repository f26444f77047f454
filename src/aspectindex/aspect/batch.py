"""Decode many aspect records, isolating failures per target.

A malformed record is reported in :attr:`DecodeReport.failures` and
the remaining records still decode.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

from aspectindex.aspect.collection import AspectTargetInfos, DecodedTarget
from aspectindex.aspect.decoder import load_target_info, parse_aspect_record
from aspectindex.config import Settings
from aspectindex.resilience.errors import (
    AspectDecodeError,
    ErrorClass,
    classify_error,
)

logger = logging.getLogger(__name__)

AspectDocument: TypeAlias = str | bytes | Mapping[str, Any]


@dataclass(frozen=True)
class DecodeFailure:
    """One record that could not be decoded."""

    source: str
    error: str
    error_class: ErrorClass
    label: str | None = None


@dataclass
class DecodeReport:
    """Targets that decoded plus failures for the ones that did not."""

    targets: AspectTargetInfos = field(default_factory=AspectTargetInfos)
    failures: list[DecodeFailure] = field(
        default_factory=lambda: list[DecodeFailure]()
    )

    @property
    def ok(self) -> bool:
        return not self.failures


def decode_aspect_documents(
    documents: Iterable[tuple[str, AspectDocument]],
    *,
    jvm_kinds: Collection[str] | None = None,
) -> DecodeReport:
    """Decode ``(source_name, document)`` pairs in order.

    Documents may be serialized JSON or already-parsed mappings.
    """
    report = DecodeReport()
    for source, document in documents:
        _record(report, source, _decode_one(source, document, jvm_kinds))
    _log_summary(report)
    return report


async def decode_aspect_documents_async(
    documents: Iterable[tuple[str, AspectDocument]],
    settings: Settings | None = None,
) -> DecodeReport:
    """Decode documents on worker threads.

    Concurrency is bounded by ``settings.decode_max_concurrency``.
    Results are collected in input order.
    """
    cfg = settings if settings is not None else Settings()
    jvm_kinds = cfg.jvm_kind_set
    semaphore = asyncio.Semaphore(cfg.decode_max_concurrency)

    async def _run(
        source: str, document: AspectDocument
    ) -> DecodedTarget | Exception:
        async with semaphore:
            return await asyncio.to_thread(
                _decode_one, source, document, jvm_kinds
            )

    pairs = list(documents)
    outcomes = await asyncio.gather(
        *(_run(source, document) for source, document in pairs)
    )

    report = DecodeReport()
    for (source, _), outcome in zip(pairs, outcomes, strict=True):
        _record(report, source, outcome)
    _log_summary(report)
    return report


def load_aspect_files(
    paths: Iterable[Path],
    *,
    jvm_kinds: Collection[str] | None = None,
) -> DecodeReport:
    """Read and decode aspect output files; unreadable files are failures."""
    documents: list[tuple[str, AspectDocument]] = []
    read_failures: list[DecodeFailure] = []
    for path in paths:
        try:
            documents.append((str(path), path.read_bytes()))
        except OSError as exc:
            logger.warning("Cannot read aspect file %s: %s", path, exc)
            read_failures.append(
                DecodeFailure(
                    source=str(path),
                    error=str(exc),
                    error_class=classify_error(exc),
                )
            )

    report = decode_aspect_documents(documents, jvm_kinds=jvm_kinds)
    report.failures[:0] = read_failures
    return report


def find_aspect_files(root: Path, suffix: str) -> list[Path]:
    """List aspect output files under ``root``, sorted for determinism."""
    if root.is_file():
        return [root]
    return sorted(
        p for p in root.rglob(f"*{suffix}") if p.is_file()
    )


# ── Internal helpers ─────────────────────────────────────


def _decode_one(
    source: str,
    document: AspectDocument,
    jvm_kinds: Collection[str] | None,
) -> DecodedTarget | Exception:
    """Decode one document, returning the exception instead of raising."""
    try:
        if isinstance(document, (str, bytes)):
            return load_target_info(document, jvm_kinds=jvm_kinds)
        return parse_aspect_record(document, jvm_kinds=jvm_kinds)
    except AspectDecodeError as exc:
        logger.warning("Skipping %s: %s", source, exc)
        return exc


def _record(
    report: DecodeReport,
    source: str,
    outcome: DecodedTarget | Exception,
) -> None:
    if isinstance(outcome, Exception):
        report.failures.append(
            DecodeFailure(
                source=source,
                error=str(outcome),
                error_class=classify_error(outcome),
                label=getattr(outcome, "label", None),
            )
        )
        return
    report.targets.add(outcome)


def _log_summary(report: DecodeReport) -> None:
    logger.info(
        "Decoded %d targets (%d failed)",
        len(report.targets),
        len(report.failures),
    )

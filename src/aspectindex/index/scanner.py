"""Populate index entries from the ``.class`` entries of jar archives.

Only archive member names are read; class files are never parsed.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from aspectindex.aspect.collection import AspectTargetInfos
from aspectindex.constants import (
    CLASS_FILE_SUFFIX,
    INNER_CLASS_SEPARATOR,
    METADATA_DIR,
    SKIPPED_CLASS_STEMS,
)
from aspectindex.index.code_index import CodeIndex
from aspectindex.index.model import (
    ClassIdentifier,
    CodeLocationIdentifier,
    CodeLocationIndexEntry,
)
from aspectindex.resilience.errors import ArchiveScanError

logger = logging.getLogger(__name__)


def scan_jar(
    path: Path,
    location_id: CodeLocationIdentifier,
    bazel_label: str | None = None,
    *,
    include_inner_classes: bool = False,
) -> CodeLocationIndexEntry:
    """Create an entry for ``path`` holding every class listed in the jar.

    Classes are added in archive order. Inner classes (``Outer$Inner``)
    are skipped unless ``include_inner_classes`` is set.
    """
    entry = CodeLocationIndexEntry(
        id=location_id,
        location_on_disk=path,
        bazel_label=bazel_label,
    )
    for name in _list_members(path, bazel_label):
        class_id = _class_for_member(name, include_inner_classes)
        if class_id is not None:
            entry.add_class(class_id)

    logger.debug(
        "Scanned %s: %d classes",
        path,
        len(entry.contained_classes or ()),
    )
    return entry


def index_target_jars(
    targets: AspectTargetInfos,
    execroot: Path,
    index: CodeIndex,
    *,
    include_inner_classes: bool = False,
) -> int:
    """Scan the primary jar of every JVM target into ``index``.

    Jar paths are resolved against ``execroot``. Each entry is keyed by
    the jar's relative path and carries the producing target's label.
    Missing or unreadable jars are logged and skipped. Returns the
    number of entries added.
    """
    added = 0
    for target in targets.jvm_targets():
        for triple in (*target.jars, *target.generated_jars):
            if triple.jar is None:
                continue
            jar_path = execroot / triple.jar
            if not jar_path.is_file():
                logger.warning(
                    "Jar for %s not found: %s", target.label, jar_path
                )
                continue
            try:
                entry = scan_jar(
                    jar_path,
                    CodeLocationIdentifier(triple.jar),
                    target.label,
                    include_inner_classes=include_inner_classes,
                )
            except ArchiveScanError as exc:
                logger.warning("Skipping jar: %s", exc)
                continue
            index.add_entry(entry)
            added += 1
    return added


def _list_members(path: Path, label: str | None) -> list[str]:
    try:
        with zipfile.ZipFile(path) as zf:
            return zf.namelist()
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveScanError(
            label, f"cannot read archive {path}: {exc}"
        ) from exc


def _class_for_member(
    name: str, include_inner_classes: bool
) -> ClassIdentifier | None:
    if not name.endswith(CLASS_FILE_SUFFIX) or name.startswith(METADATA_DIR):
        return None
    stem = name.removesuffix(CLASS_FILE_SUFFIX)
    if stem.rpartition("/")[2] in SKIPPED_CLASS_STEMS:
        return None
    if INNER_CLASS_SEPARATOR in stem and not include_inner_classes:
        return None
    return ClassIdentifier.from_class_file_path(name)

"""In-memory index over code location entries."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

from aspectindex.index.model import (
    ClassIdentifier,
    CodeLocationIdentifier,
    CodeLocationIndexEntry,
)


@dataclass
class CodeIndex:
    """Entries keyed by location id, with class and label lookups."""

    entries: dict[CodeLocationIdentifier, CodeLocationIndexEntry] = field(
        default_factory=lambda: dict[
            CodeLocationIdentifier, CodeLocationIndexEntry
        ]()
    )
    # Lookup indices are auto-maintained, not constructor args.
    _by_class: dict[str, list[CodeLocationIndexEntry]] = field(
        init=False,
        default_factory=lambda: defaultdict[
            str, list[CodeLocationIndexEntry]
        ](list),
        repr=False,
    )
    _by_label: dict[str, list[CodeLocationIndexEntry]] = field(
        init=False,
        default_factory=lambda: defaultdict[
            str, list[CodeLocationIndexEntry]
        ](list),
        repr=False,
    )

    def add_entry(self, entry: CodeLocationIndexEntry) -> None:
        """Register an entry along with any classes it already holds.

        An entry with the same id replaces the earlier one.
        """
        previous = self.entries.get(entry.id)
        if previous is not None:
            self._unindex(previous)
        self.entries[entry.id] = entry
        if entry.bazel_label is not None:
            _append_once(self._by_label[entry.bazel_label], entry)
        for class_id in entry.contained_classes or ():
            _append_once(self._by_class[class_id.fqcn], entry)

    def add_class(
        self,
        entry: CodeLocationIndexEntry,
        class_id: ClassIdentifier,
    ) -> None:
        """Append a class to a registered entry and index it.

        Raises:
            KeyError: If the entry was never registered with add_entry().
        """
        if self.entries.get(entry.id) is not entry:
            raise KeyError(f"entry {entry.id} is not registered")
        entry.add_class(class_id)
        _append_once(self._by_class[class_id.fqcn], entry)

    def get_entry(
        self, location_id: CodeLocationIdentifier
    ) -> CodeLocationIndexEntry | None:
        return self.entries.get(location_id)

    def find_by_class(self, fqcn: str) -> list[CodeLocationIndexEntry]:
        """Entries containing the class (O(1) index lookup)."""
        return list(self._by_class.get(fqcn, ()))

    def find_by_label(self, label: str) -> list[CodeLocationIndexEntry]:
        return list(self._by_label.get(label, ()))

    def find_by_location(
        self, path: Path
    ) -> CodeLocationIndexEntry | None:
        for entry in self.entries.values():
            if entry.location_on_disk == path:
                return entry
        return None

    def __len__(self) -> int:
        return len(self.entries)

    def _unindex(self, entry: CodeLocationIndexEntry) -> None:
        keys = {c.fqcn for c in entry.contained_classes or ()}
        _drop(self._by_class, keys, entry)
        if entry.bazel_label is not None:
            _drop(self._by_label, {entry.bazel_label}, entry)


def _append_once(
    bucket: list[CodeLocationIndexEntry], entry: CodeLocationIndexEntry
) -> None:
    # Identity, not equality: entries are mutable dataclasses
    if not any(e is entry for e in bucket):
        bucket.append(entry)


def _drop(
    lookup: dict[str, list[CodeLocationIndexEntry]],
    keys: set[str],
    entry: CodeLocationIndexEntry,
) -> None:
    for key in keys:
        bucket = lookup.get(key)
        if bucket is None:
            continue
        bucket[:] = [e for e in bucket if e is not entry]
        if not bucket:
            del lookup[key]

"""Code-location index records and their identity types.

Identifiers are frozen value objects compared by value. An index
entry is a mutable accumulator: classes are appended to it while a
scanner walks the artifact.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from aspectindex.constants import CLASS_FILE_SUFFIX


@dataclass(frozen=True, order=True)
class CodeLocationIdentifier:
    """Coordinate-like identity of a code location.

    e.g. ``org.slf4j:slf4j-api:1.7.30`` for an external jar, or the
    producing label for a jar built in the workspace.
    """

    location_identifier: str

    @classmethod
    def from_coordinates(
        cls, group: str, artifact: str, version: str
    ) -> CodeLocationIdentifier:
        return cls(f"{group}:{artifact}:{version}")

    @property
    def coordinates(self) -> tuple[str, ...]:
        return tuple(self.location_identifier.split(":"))

    def __str__(self) -> str:
        return self.location_identifier


@dataclass(frozen=True, order=True)
class ClassIdentifier:
    """Fully qualified class name, e.g. ``com.acme.Foo``."""

    fqcn: str

    @classmethod
    def from_class_file_path(cls, path: str) -> ClassIdentifier:
        """``com/acme/Foo.class`` → ``com.acme.Foo``."""
        name = path.removesuffix(CLASS_FILE_SUFFIX)
        return cls(name.replace("/", "."))

    @property
    def package_name(self) -> str:
        head, _, _ = self.fqcn.rpartition(".")
        return head

    @property
    def simple_class_name(self) -> str:
        return self.fqcn.rpartition(".")[2]

    def __str__(self) -> str:
        return self.fqcn


@dataclass
class CodeLocationIndexEntry:
    """An artifact on disk and the classes known to live inside it.

    ``contained_classes`` stays None until the first class is added;
    after that it only grows. add_class() does not deduplicate and is
    not safe to call concurrently on the same entry.
    """

    id: CodeLocationIdentifier
    location_on_disk: Path
    bazel_label: str | None = None  # set only for workspace-built artifacts
    contained_classes: list[ClassIdentifier] | None = None

    def add_class(self, class_id: ClassIdentifier) -> None:
        if self.contained_classes is None:
            self.contained_classes = []
        self.contained_classes.append(class_id)

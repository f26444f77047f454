"""Label-keyed container of decoded targets."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TypeAlias

from aspectindex.aspect.schemas import (
    GenericTargetInfo,
    JvmTargetInfo,
)

logger = logging.getLogger(__name__)

DecodedTarget: TypeAlias = GenericTargetInfo | JvmTargetInfo


@dataclass
class AspectTargetInfos:
    """Decoded targets of one workspace, keyed by label.

    Insertion order is preserved. Adding a label that is already
    present replaces the earlier record.
    """

    targets: dict[str, DecodedTarget] = field(
        default_factory=lambda: dict[str, DecodedTarget]()
    )

    def add(self, target: DecodedTarget) -> None:
        """Add or replace a target."""
        if target.label in self.targets:
            logger.warning(
                "Replacing previously decoded target %s", target.label
            )
        self.targets[target.label] = target

    def add_all(self, targets: Iterable[DecodedTarget]) -> None:
        for target in targets:
            self.add(target)

    def lookup_by_label(self, label: str) -> DecodedTarget | None:
        """Retrieve target by label."""
        return self.targets.get(label)

    def lookup_by_kind(self, *kinds: str) -> list[DecodedTarget]:
        """Find all targets whose rule kind is one of ``kinds``."""
        wanted = set(kinds)
        return [t for t in self.targets.values() if t.kind in wanted]

    def lookup_by_source_path(self, prefix: str) -> list[DecodedTarget]:
        """Find targets owning at least one source under ``prefix``."""
        return [
            t
            for t in self.targets.values()
            if any(s.startswith(prefix) for s in t.sources)
        ]

    def jvm_targets(self) -> list[JvmTargetInfo]:
        return [
            t
            for t in self.targets.values()
            if isinstance(t, JvmTargetInfo)
        ]

    @property
    def labels(self) -> list[str]:
        return list(self.targets)

    def __len__(self) -> int:
        return len(self.targets)

    def __iter__(self) -> Iterator[DecodedTarget]:
        return iter(self.targets.values())

    def __contains__(self, label: object) -> bool:
        return label in self.targets

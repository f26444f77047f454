"""Pydantic models for decoded aspect output.

Two layers live here. The ``Raw*`` models mirror one nesting level
of the aspect JSON each and only check shape; the decoder walks them
level by level. ``JarTriple`` and the ``TargetInfo`` variants are the
immutable records handed to callers.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr


# ── Raw intermediate models ──────────────────────────────


class RawSourceLocation(BaseModel):
    """One element of ``java_ide_info.sources``."""

    model_config = ConfigDict(extra="ignore")

    relative_path: StrictStr | None = None


class RawJavaIdeInfo(BaseModel):
    """The ``java_ide_info`` sub-record.

    ``jars`` and ``generated_jars`` hold serialized sub-documents;
    they stay opaque here and are parsed one element at a time.
    """

    model_config = ConfigDict(extra="ignore")

    sources: list[RawSourceLocation] | None = None
    jars: list[Any] | None = None
    generated_jars: list[Any] | None = None
    main_class: StrictStr | None = None


class RawJarTriple(BaseModel):
    """One parsed jar sub-document."""

    model_config = ConfigDict(extra="ignore")

    interface_jar: StrictStr | None = None
    jar: StrictStr | None = None
    source_jar: StrictStr | None = None


class RawTargetKey(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: StrictStr


class RawDependency(BaseModel):
    """An element of the aspect's ``deps`` array."""

    model_config = ConfigDict(extra="ignore")

    target: RawTargetKey


class RawArtifactLocation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    relative_path: StrictStr | None = None


class RawAspectRecord(BaseModel):
    """Outer per-target record; accepts both flat and keyed layouts."""

    model_config = ConfigDict(extra="allow")

    label: StrictStr | None = None
    key: RawTargetKey | None = None
    kind: StrictStr | None = None
    kind_string: StrictStr | None = None
    build_file_artifact_location: StrictStr | RawArtifactLocation | None = None
    dependencies: list[StrictStr] | None = None
    deps: list[RawDependency] | None = None


# ── Decoded records ──────────────────────────────────────


class JarTriple(BaseModel):
    """Interface, primary and source jar of one compilation unit."""

    model_config = ConfigDict(frozen=True)

    interface_jar: str | None = None
    jar: str | None = None
    source_jar: str | None = None

    def render(self) -> str:
        return (
            f"JarTriple(interface_jar={self.interface_jar}, "
            f"jar={self.jar}, source_jar={self.source_jar})"
        )

    def __str__(self) -> str:
        return self.render()


def _join(items: tuple[object, ...]) -> str:
    return ", ".join(str(i) for i in items)


class TargetInfo(BaseModel):
    """Fields shared by every decoded build target."""

    model_config = ConfigDict(frozen=True)

    label: str
    kind: str
    workspace_relative_path: str
    deps: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()

    def _render_lines(self) -> list[str]:
        return [
            f"  label = {self.label},",
            "  build_file_artifact_location = "
            f"{self.workspace_relative_path},",
            f"  kind = {self.kind},",
        ]

    def render(self) -> str:
        """Multi-line diagnostic text; not meant to be parsed back."""
        lines = ["AspectTargetInfo(", *self._render_lines(), ")"]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


class GenericTargetInfo(TargetInfo):
    """A target whose rule kind carries no language-specific metadata."""

    variant: Literal["generic"] = "generic"

    def _render_lines(self) -> list[str]:
        return [
            *super()._render_lines(),
            f"  dependencies = [{_join(self.deps)}],",
            f"  sources = [{_join(self.sources)}],",
        ]


class JvmTargetInfo(TargetInfo):
    """A JVM rule target: entry point plus compiled jar triples."""

    variant: Literal["jvm"] = "jvm"
    main_class: str | None = None
    jars: tuple[JarTriple, ...] = ()
    generated_jars: tuple[JarTriple, ...] = ()

    def _render_lines(self) -> list[str]:
        return [
            *super()._render_lines(),
            f"  jars = [{_join(self.jars)}],",
            f"  generated_jars = [{_join(self.generated_jars)}],",
            f"  dependencies = [{_join(self.deps)}],",
            f"  sources = [{_join(self.sources)}],",
            f"  main_class = {self.main_class},",
        ]


AnyTargetInfo = Annotated[
    GenericTargetInfo | JvmTargetInfo,
    Field(discriminator="variant"),
]

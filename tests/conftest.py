"""Shared test fixtures: sample aspect records and jar archives."""

import json
import os
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Keep a developer's shell environment out of Settings() in tests.
for _var in ("LOG_LEVEL", "DEBUG_MODE", "JVM_RULE_KINDS", "DECODE_MAX_CONCURRENCY"):
    os.environ.pop(_var, None)


def jar_doc(**fields: str) -> str:
    """Serialize a jar sub-document the way the aspect writes it."""
    return json.dumps(fields)


@pytest.fixture
def java_library_record() -> dict[str, Any]:
    """Flat-layout record for a java_library with one jar triple."""
    return {
        "build_file_artifact_location": "helloworld/BUILD",
        "dependencies": [
            "//proto:helloworld_java_proto",
            "@maven//:com_google_guava_guava",
        ],
        "kind": "java_library",
        "label": "//helloworld:helloworld",
        "java_ide_info": {
            "sources": [
                {"relative_path": "helloworld/src/main/java/helloworld/HelloWorld.java"},
                {"relative_path": "helloworld/src/main/java/helloworld/Greeter.java"},
            ],
            "jars": [
                jar_doc(
                    interface_jar="bazel-out/bin/helloworld/libhelloworld-hjar.jar",
                    jar="bazel-out/bin/helloworld/libhelloworld.jar",
                    source_jar="bazel-out/bin/helloworld/libhelloworld-src.jar",
                )
            ],
            "generated_jars": [],
            "main_class": "helloworld.HelloWorld",
        },
    }


@pytest.fixture
def make_jar(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a jar with the given member names."""

    def _make(name: str, members: list[str]) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as zf:
            for member in members:
                zf.writestr(member, b"\xca\xfe\xba\xbe")
        return path

    return _make

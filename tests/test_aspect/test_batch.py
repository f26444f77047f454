"""Tests for batch decoding with per-target failure isolation."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

from aspectindex.aspect.batch import (
    decode_aspect_documents,
    decode_aspect_documents_async,
    find_aspect_files,
    load_aspect_files,
)
from aspectindex.aspect.schemas import JvmTargetInfo
from aspectindex.config import Settings
from aspectindex.resilience.errors import ErrorClass

_MALFORMED = {
    "label": "//bad:bad",
    "kind": "java_library",
    "java_ide_info": {"jars": "not-an-array"},
}


_DEEP = "[" * 100_000


def _with_jars(label: str, jars: list[Any]) -> dict[str, Any]:
    return {
        "label": label,
        "kind": "java_library",
        "java_ide_info": {"jars": jars},
    }


def _documents(good: dict[str, Any]) -> list[tuple[str, Any]]:
    return [
        ("good.json", json.dumps(good)),
        ("bad.json", _MALFORMED),
        ("generic.json", {"label": "//cc:lib", "kind": "cc_library"}),
        ("broken.json", "{"),
    ]


class TestDecodeAspectDocuments:
    def test_malformed_target_does_not_block_siblings(
        self, java_library_record: dict[str, Any]
    ) -> None:
        report = decode_aspect_documents(_documents(java_library_record))
        assert report.targets.labels == [
            "//helloworld:helloworld",
            "//cc:lib",
        ]
        assert [f.source for f in report.failures] == [
            "bad.json",
            "broken.json",
        ]
        assert not report.ok

    def test_failure_details(
        self, java_library_record: dict[str, Any]
    ) -> None:
        report = decode_aspect_documents(_documents(java_library_record))
        bad, broken = report.failures
        assert bad.label == "//bad:bad"
        assert bad.error_class is ErrorClass.MALFORMED
        assert "jars" in bad.error
        assert broken.label is None
        assert "invalid JSON" in broken.error

    def test_all_good_is_ok(
        self, java_library_record: dict[str, Any]
    ) -> None:
        report = decode_aspect_documents([("one", java_library_record)])
        assert report.ok
        assert isinstance(
            report.targets.lookup_by_label("//helloworld:helloworld"),
            JvmTargetInfo,
        )

    def test_deeply_nested_json_fails_one_target(
        self, java_library_record: dict[str, Any]
    ) -> None:
        docs: list[tuple[str, Any]] = [
            ("deep_jar.json", _with_jars("//deep:jar", [_DEEP])),
            ("deep_record.json", _DEEP),
            ("good.json", java_library_record),
        ]
        report = decode_aspect_documents(docs)
        assert report.targets.labels == ["//helloworld:helloworld"]
        deep_jar, deep_record = report.failures
        assert deep_jar.label == "//deep:jar"
        assert "jars[0] is not a JSON document" in deep_jar.error
        assert deep_record.label is None
        assert "invalid JSON" in deep_record.error
        assert {f.error_class for f in report.failures} == {
            ErrorClass.MALFORMED
        }

    def test_unserializable_jar_element_fails_one_target(
        self, java_library_record: dict[str, Any]
    ) -> None:
        bad = _with_jars("//b:b", [{"jar": Path("out/b.jar")}])
        report = decode_aspect_documents(
            [("bad", bad), ("good", java_library_record)]
        )
        assert report.targets.labels == ["//helloworld:helloworld"]
        (failure,) = report.failures
        assert failure.label == "//b:b"
        assert "jars[0] is not JSON serializable" in failure.error
        assert failure.error_class is ErrorClass.MALFORMED


class TestDecodeAspectDocumentsAsync:
    async def test_matches_sync_result(
        self, java_library_record: dict[str, Any]
    ) -> None:
        docs = _documents(java_library_record)
        sync_report = decode_aspect_documents(docs)
        async_report = await decode_aspect_documents_async(
            docs, Settings(decode_max_concurrency=2)
        )
        assert async_report.targets.labels == sync_report.targets.labels
        assert list(async_report.targets) == list(sync_report.targets)
        assert async_report.failures == sync_report.failures

    async def test_deeply_nested_jar_does_not_abort_gather(
        self, java_library_record: dict[str, Any]
    ) -> None:
        docs: list[tuple[str, Any]] = [
            ("deep", _with_jars("//deep:jar", [_DEEP])),
            ("good", java_library_record),
        ]
        report = await decode_aspect_documents_async(docs)
        assert report.targets.labels == ["//helloworld:helloworld"]
        assert [f.label for f in report.failures] == ["//deep:jar"]

    async def test_uses_configured_jvm_kinds(self) -> None:
        docs = [("x", {"label": "//x:x", "kind": "groovy_library"})]
        report = await decode_aspect_documents_async(
            docs, Settings(jvm_rule_kinds=["groovy_library"])
        )
        assert isinstance(report.targets.lookup_by_label("//x:x"), JvmTargetInfo)

    async def test_runs_on_worker_threads(
        self, java_library_record: dict[str, Any]
    ) -> None:
        with patch(
            "aspectindex.aspect.batch.asyncio.to_thread",
            wraps=asyncio.to_thread,
        ) as to_thread:
            await decode_aspect_documents_async(
                [("a", java_library_record), ("b", _MALFORMED)],
                Settings(),
            )
        assert to_thread.call_count == 2


class TestLoadAspectFiles:
    def test_reads_and_decodes(
        self, tmp_path: Path, java_library_record: dict[str, Any]
    ) -> None:
        good = tmp_path / "hello.bzljavasdk-data.json"
        good.write_text(json.dumps(java_library_record), encoding="utf-8")
        bad = tmp_path / "bad.bzljavasdk-data.json"
        bad.write_text(json.dumps(_MALFORMED), encoding="utf-8")

        report = load_aspect_files([good, bad])
        assert report.targets.labels == ["//helloworld:helloworld"]
        assert [f.source for f in report.failures] == [str(bad)]

    def test_unreadable_file_is_io_failure(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.bzljavasdk-data.json"
        report = load_aspect_files([missing])
        assert len(report.targets) == 0
        assert report.failures[0].source == str(missing)
        assert report.failures[0].error_class is ErrorClass.IO


class TestFindAspectFiles:
    def test_finds_suffix_recursively_sorted(self, tmp_path: Path) -> None:
        suffix = ".bzljavasdk-data.json"
        (tmp_path / "b").mkdir()
        (tmp_path / "a" / "deep").mkdir(parents=True)
        for rel in ("b/two" + suffix, "a/deep/one" + suffix, "a/other.json"):
            (tmp_path / rel).write_text("{}", encoding="utf-8")

        found = find_aspect_files(tmp_path, suffix)
        assert [p.relative_to(tmp_path).as_posix() for p in found] == [
            "a/deep/one" + suffix,
            "b/two" + suffix,
        ]

    def test_file_path_returned_as_is(self, tmp_path: Path) -> None:
        f = tmp_path / "single.json"
        f.write_text("{}", encoding="utf-8")
        assert find_aspect_files(f, ".bzljavasdk-data.json") == [f]

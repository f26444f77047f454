"""Tests for Settings validators."""

from __future__ import annotations

import logging

import pytest

from aspectindex.config import Settings
from aspectindex.constants import DEFAULT_ASPECT_FILE_SUFFIX, DEFAULT_JVM_RULE_KINDS


class TestDefaults:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.log_level == "INFO"
        assert s.decode_max_concurrency == 5
        assert s.aspect_file_suffix == DEFAULT_ASPECT_FILE_SUFFIX
        assert s.jvm_rule_kinds == list(DEFAULT_JVM_RULE_KINDS)
        assert s.include_inner_classes is False

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DECODE_MAX_CONCURRENCY", "9")
        monkeypatch.setenv("JVM_RULE_KINDS", "java_library,groovy_library")
        s = Settings()
        assert s.decode_max_concurrency == 9
        assert s.jvm_rule_kinds == ["java_library", "groovy_library"]


class TestJvmKindParsing:
    def test_comma_separated_string_parsed_to_list(self) -> None:
        s = Settings(jvm_rule_kinds="java_library , kt_jvm_library")  # type: ignore[arg-type]
        assert s.jvm_rule_kinds == ["java_library", "kt_jvm_library"]

    def test_list_passthrough(self) -> None:
        s = Settings(jvm_rule_kinds=["java_library"])
        assert s.jvm_kind_set == frozenset({"java_library"})


class TestValidation:
    def test_empty_kinds_raises(self) -> None:
        with pytest.raises(ValueError, match="at least one rule kind"):
            Settings(jvm_rule_kinds="")  # type: ignore[arg-type]

    def test_duplicate_kinds_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="aspectindex.config"):
            s = Settings(jvm_rule_kinds=["java_test", "java_test"])
        assert "Duplicate rule kinds in JVM_RULE_KINDS" in caplog.text
        # Kept as-is (no dedup)
        assert s.jvm_rule_kinds == ["java_test", "java_test"]

    def test_concurrency_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            Settings(decode_max_concurrency=0)

    def test_blank_suffix_raises(self) -> None:
        with pytest.raises(ValueError, match="aspect_file_suffix"):
            Settings(aspect_file_suffix="  ")

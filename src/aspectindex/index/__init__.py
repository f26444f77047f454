"""Code-location index: which classes live in which artifact."""

from aspectindex.index.code_index import CodeIndex
from aspectindex.index.model import (
    ClassIdentifier,
    CodeLocationIdentifier,
    CodeLocationIndexEntry,
)
from aspectindex.index.scanner import index_target_jars, scan_jar

__all__ = [
    "ClassIdentifier",
    "CodeIndex",
    "CodeLocationIdentifier",
    "CodeLocationIndexEntry",
    "index_target_jars",
    "scan_jar",
]

"""Dependency scanner engine — identify installed packages from manifests."""

from gemtrace.engines.dependency_scanner.models import Dependency, Evidence, ScanResult
from gemtrace.engines.dependency_scanner.scanner import scan

__all__ = ["Dependency", "Evidence", "ScanResult", "scan"]

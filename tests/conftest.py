"""Shared pytest fixtures for gemtrace tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import structlog

STUB_TEMPLATE = """\
# -*- encoding: utf-8 -*-
# stub: {name} {version} ruby lib

Gem::Specification.new do |s|
  s.name = "{name}".freeze
  s.version = "{version}"

  s.require_paths = ["lib".freeze]
  s.authors = ["Jane Doe".freeze, "John Roe".freeze]
  s.email = "maintainers@example.org".freeze
  s.homepage = "https://example.org/{name}".freeze
  s.licenses = ["MIT".freeze]
  s.summary = "The {name} library".freeze
end
"""


def _stub_gemspec(name: str, version: str) -> str:
    return STUB_TEMPLATE.format(name=name, version=version)


@pytest.fixture
def bundle_root(tmp_path: Path) -> Path:
    """An empty Bundler deployment root with specifications/ and gems/."""
    root = tmp_path / "vendor" / "bundle" / "ruby" / "3.2.0"
    (root / "specifications").mkdir(parents=True)
    (root / "gems").mkdir()
    return root


@pytest.fixture
def install_gem(bundle_root: Path):
    """Install a fake gem: a stub in specifications/ plus its gems/ directory.

    Returns the stub path. Pass ``with_gem_dir=False`` to leave gems/ empty.
    """

    def _install(name: str, version: str, *, with_gem_dir: bool = True) -> Path:
        full = f"{name}-{version}"
        stub = bundle_root / "specifications" / f"{full}.gemspec"
        stub.write_text(_stub_gemspec(name, version))
        if with_gem_dir:
            (bundle_root / "gems" / full / "lib").mkdir(parents=True)
        return stub

    return _install


@pytest.fixture
def stub_gemspec():
    """Render the gemspec stub Bundler writes for ``name``/``version``."""
    return _stub_gemspec


@pytest.fixture
def isolated_logging():
    """Undo ``setup_logging`` after the test: drop handlers, reset structlog."""
    yield logging.getLogger("gemtrace")
    logger = logging.getLogger("gemtrace")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    structlog.reset_defaults()

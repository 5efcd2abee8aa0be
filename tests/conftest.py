"""Pytest configuration for clangengine test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: GitHub Actions with 50 examples (fast CI feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile (GitHub Actions sets this)
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

libclang Test Separation:
Tests marked with @pytest.mark.libclang load the native library. They are
skipped (not failed) when no libclang can be located, so the pure-Python
layers (decoder, marshal, lifetime, errors) stay testable everywhere.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from clangengine import EngineToken, Index, TranslationUnit, is_libclang_available

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

# CI profile: fast feedback for GitHub Actions (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var (GitHub Actions auto-detection)
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# LIBCLANG TEST SEPARATION
# =============================================================================


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip libclang-marked tests when the shared library cannot be loaded."""
    if is_libclang_available():
        return
    skip_native = pytest.mark.skip(
        reason="libclang not found - install the 'libclang' package or set CLANGENGINE_LIBCLANG_PATH"
    )
    for item in items:
        if "libclang" in item.keywords:
            item.add_marker(skip_native)


# =============================================================================
# FIXTURES
# =============================================================================

SAMPLE_SOURCE = """\
struct point {
    int x;
    int y;
};

int add(int a, int b) {
    return a + b;
}

int scale(struct point *p, int factor) {
    return add(p->x, p->y) * factor;
}
"""


@pytest.fixture
def token() -> Iterator[EngineToken]:
    """A live engine token, closed (with everything below it) after the test."""
    engine = EngineToken.acquire()
    try:
        yield engine
    finally:
        engine.close()


@pytest.fixture
def index(token: EngineToken) -> Iterator[Index]:
    """A live index borrowing from the token fixture."""
    with Index(token) as idx:
        yield idx


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing a source file into the test's temporary directory."""

    def write(contents: str, name: str = "sample.c") -> Path:
        path = tmp_path / name
        path.write_text(contents, encoding="utf-8")
        return path

    return write


@pytest.fixture
def sample_tu(index: Index, write_source: Callable[[str, str], Path]) -> TranslationUnit:
    """SAMPLE_SOURCE parsed as C11."""
    path = write_source(SAMPLE_SOURCE, "sample.c")
    return TranslationUnit.from_source(index, path, ["-std=c11"])

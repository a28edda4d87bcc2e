"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from codelight.config import Settings

# Rouge-style rendering of a three-line snippet followed by its directive.
ROUGE_BLOCK = (
    '<div class="highlight"><pre class="highlight"><code>'
    '<span class="n">a</span> = 1\n'
    '<span class="n">b</span> = 2\n'
    '<span class="n">c</span> = 3'
    "</code></pre></div>"
)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any .env file or environment overrides."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def rouge_block() -> str:
    return ROUGE_BLOCK

"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from filedeck.filesystem.retry import RetryPolicy


@pytest.fixture(autouse=True)
def isolated_config_home(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory so no user config leaks in."""
    config_home = tmp_path_factory.mktemp("xdg_config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small directory tree for listing, search and copy tests.

    Layout::

        root/
            Docs/
                notes.txt        "notes"
                report.md        "# report"
                deep/
                    readme.txt   "deep"
            .hidden_dir/
                secret.txt       "s"
            alpha.txt            "alpha"
            Beta.log             "beta!"
            .env                 "X=1"
    """
    root = tmp_path / "root"
    docs = root / "Docs"
    deep = docs / "deep"
    hidden_dir = root / ".hidden_dir"
    deep.mkdir(parents=True)
    hidden_dir.mkdir()

    (docs / "notes.txt").write_text("notes")
    (docs / "report.md").write_text("# report")
    (deep / "readme.txt").write_text("deep")
    (hidden_dir / "secret.txt").write_text("s")
    (root / "alpha.txt").write_text("alpha")
    (root / "Beta.log").write_text("beta!")
    (root / ".env").write_text("X=1")
    return root


@pytest.fixture
def sleeps() -> list[float]:
    """Record of delays requested by a RetryPolicy built with fast_retry."""
    return []


@pytest.fixture
def fast_retry(sleeps: list[float]) -> RetryPolicy:
    """RetryPolicy with the default budget that records sleeps instead of waiting."""
    return RetryPolicy(max_attempts=3, delay=0.1, sleep=sleeps.append)

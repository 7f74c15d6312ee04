# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for fragtrain tests.

Fixtures here are available to every test file automatically.
We keep them minimal, just the stuff that multiple test modules need.
"""

import textwrap
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture()
def challenge_file(tmp_path: Path) -> Path:
    """A real, readable challenge text file."""
    path = tmp_path / "example_text.txt"
    path.write_text("The quick brown fox jumps over the lazy dog.\n", encoding="utf-8")
    return path


@pytest.fixture()
def valid_raw(challenge_file: Path) -> dict[str, Any]:
    """The smallest raw mapping that passes validation, optional settings left out."""
    return {
        "winProbability": 0.5,
        "fragmentLength": 80,
        "challengeFile": str(challenge_file),
    }


@pytest.fixture()
def state_file(tmp_path: Path, challenge_file: Path) -> Path:
    """A valid YAML state file pointing at the challenge file fixture."""
    content = textwrap.dedent(f"""\
        winProbability: 0.5
        fragmentLength: 80
        challengeFile: "{challenge_file}"
    """)
    path = tmp_path / "state.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def invalid_state_file(tmp_path: Path) -> Path:
    """Valid YAML, but every required setting is broken in its own way."""
    content = textwrap.dedent(f"""\
        winProbability: 1.5
        fragmentLength: -3
        challengeFile: "{tmp_path / 'missing.txt'}"
    """)
    path = tmp_path / "invalid_state.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    path = tmp_path / "broken.yaml"
    path.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return path

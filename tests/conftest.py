"""Shared fixtures for package-list-validator tests."""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Config


def python_command(source: str) -> list[str]:
    """A dump command that runs a Python snippet in the workspace."""
    return [sys.executable, "-c", source]


# Prints the workspace's Package.swift, which tests fill with a JSON dump
ECHO_MANIFEST = python_command("import sys; sys.stdout.write(open('Package.swift').read())")


@pytest.fixture
def package_dump():
    """A package dump as produced by `swift package dump-package`."""
    return {
        "name": "Lib",
        "toolsVersion": {"_version": "5.3.0"},
        "platforms": [{"platformName": "macos", "version": "10.15", "options": []}],
        "products": [
            {"name": "Lib", "type": {"library": ["automatic"]}, "targets": ["Lib"]},
            {"name": "lib-cli", "type": {"executable": None}, "targets": ["CLI"]},
        ],
        "targets": [
            {"name": "Lib", "type": "regular", "dependencies": []},
            {"name": "CLI", "type": "regular", "dependencies": []},
        ],
        "dependencies": [],
    }


@pytest.fixture
def package_dump_bytes(package_dump):
    return json.dumps(package_dump).encode()


@pytest.fixture
def sample_config(tmp_path):
    """Pre-configured Config instance for testing."""
    workspace_root = tmp_path / "workspaces"
    workspace_root.mkdir()
    return Config(
        raw_host_base="https://raw.example.com",
        master_list_url="https://raw.example.com/master/packages.json",
        branch_name="master",
        manifest_file_name="Package.swift",
        dump_command=ECHO_MANIFEST,
        dump_concurrency=3,
        dump_timeout=5.0,
        request_timeout=5.0,
        max_connections_per_host=10,
        workspace_root=workspace_root,
    )


@pytest.fixture
def config_toml_content():
    """Sample config.toml content."""
    return """
raw_host_base = "https://raw.custom.example.com/"
branch_name = "main"
dump_command = ["/usr/bin/swift", "package", "dump-package"]
dump_concurrency = 6
dump_timeout = 30
"""

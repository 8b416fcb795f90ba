"""Configuration loading and validation for package-list-validator."""

import tempfile
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dumper import DEFAULT_TIMEOUT_EXIT_CODES


DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULTS = {
    "raw_host_base": "https://raw.githubusercontent.com",
    "master_list_url": "https://raw.githubusercontent.com/daveverwer/SwiftPMLibrary/master/packages.json",
    "branch_name": "master",
    "fallback_branches": [],
    "query_default_branch": False,
    "manifest_file_name": "Package.swift",
    "dump_command": ["swift", "package", "dump-package"],
    "dump_concurrency": 3,
    "dump_timeout": 10.0,
    "timeout_exit_codes": sorted(DEFAULT_TIMEOUT_EXIT_CODES),
    "request_timeout": 60.0,
    "max_connections_per_host": 10,
    "keep_failed_workspaces": False,
    "workspace_root": None,
}


@dataclass
class Config:
    raw_host_base: str
    master_list_url: str
    branch_name: str
    manifest_file_name: str
    dump_command: list[str]
    dump_concurrency: int
    dump_timeout: float
    request_timeout: float
    max_connections_per_host: int
    workspace_root: Path
    fallback_branches: list[str] = field(default_factory=list)
    query_default_branch: bool = False
    timeout_exit_codes: frozenset[int] = DEFAULT_TIMEOUT_EXIT_CODES
    keep_failed_workspaces: bool = False

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        branch_override: str | None = None,
        dump_concurrency_override: int | None = None,
        dump_timeout_override: float | None = None,
        keep_failed_workspaces_override: bool | None = None,
    ) -> "Config":
        """Load configuration from TOML file with defaults."""
        config_data = dict(DEFAULTS)

        path = config_path or DEFAULT_CONFIG_PATH
        if path.exists():
            with open(path, "rb") as f:
                file_config = tomllib.load(f)
                config_data.update(file_config)

        if branch_override:
            config_data["branch_name"] = branch_override
        if dump_concurrency_override is not None:
            config_data["dump_concurrency"] = dump_concurrency_override
        if dump_timeout_override is not None:
            config_data["dump_timeout"] = dump_timeout_override
        if keep_failed_workspaces_override is not None:
            config_data["keep_failed_workspaces"] = keep_failed_workspaces_override

        dump_concurrency = int(config_data["dump_concurrency"])
        if dump_concurrency < 1:
            raise ValueError("dump_concurrency must be at least 1")

        dump_command = config_data["dump_command"]
        if isinstance(dump_command, str):
            dump_command = dump_command.split()
        if not dump_command:
            raise ValueError("dump_command must not be empty")

        workspace_root = config_data["workspace_root"] or tempfile.gettempdir()

        return cls(
            raw_host_base=config_data["raw_host_base"].rstrip("/"),
            master_list_url=config_data["master_list_url"],
            branch_name=config_data["branch_name"],
            manifest_file_name=config_data["manifest_file_name"],
            dump_command=list(dump_command),
            dump_concurrency=dump_concurrency,
            dump_timeout=float(config_data["dump_timeout"]),
            request_timeout=float(config_data["request_timeout"]),
            max_connections_per_host=int(config_data["max_connections_per_host"]),
            workspace_root=Path(workspace_root).expanduser().resolve(),
            fallback_branches=list(config_data["fallback_branches"]),
            query_default_branch=bool(config_data["query_default_branch"]),
            timeout_exit_codes=frozenset(int(c) for c in config_data["timeout_exit_codes"]),
            keep_failed_workspaces=bool(config_data["keep_failed_workspaces"]),
        )

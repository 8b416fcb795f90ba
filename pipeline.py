"""Per-URL validation pipeline and batch aggregation."""

import asyncio
import shutil
from collections.abc import Callable
from pathlib import Path

import httpx

from branches import BranchResolver, build_branch_resolver
from config import Config
from dumper import ManifestDumpRunner
from errors import PackageError
from fetcher import ManifestFetcher
from logging_setup import get_logger
from models import RepoDetail, RepoSpecification, ValidationOutcome
from urls import RawUrlBuilder, parse_repository_url


class ValidationPipeline:
    """Validates one repository URL at a time; safe to run concurrently."""

    def __init__(
        self,
        branch_resolver: BranchResolver,
        url_builder: RawUrlBuilder,
        fetcher: ManifestFetcher,
        dump_runner: ManifestDumpRunner,
        manifest_file_name: str = "Package.swift",
        keep_failed_workspaces: bool = False,
    ):
        self.branch_resolver = branch_resolver
        self.url_builder = url_builder
        self.fetcher = fetcher
        self.dump_runner = dump_runner
        self.manifest_file_name = manifest_file_name
        self.keep_failed_workspaces = keep_failed_workspaces

    async def validate(self, url: str) -> ValidationOutcome:
        """Validate url. PackageErrors become a failed outcome, never an exception."""
        logger = get_logger()
        try:
            detail = await self._validate(url)
        except PackageError as e:
            logger.debug("Failed %s: %s", url, e.reason)
            return ValidationOutcome(url=url, result=e)

        logger.debug("Verified %s", url)
        return ValidationOutcome(url=url, result=detail)

    async def _validate(self, url: str) -> RepoDetail:
        owner, repository_name = parse_repository_url(url)
        branch = await self.branch_resolver.resolve(repository_name, owner)
        spec = RepoSpecification(repository_name=repository_name, user_name=owner, branch_name=branch)
        manifest_url = self.url_builder.url(spec, self.manifest_file_name)

        workspace = await self.fetcher.fetch(manifest_url)
        succeeded = False
        try:
            package = await self.dump_runner.dump(workspace)
            detail = RepoDetail.from_package(package)
            succeeded = True
        finally:
            await self._release_workspace(workspace, succeeded)
        return detail

    async def validate_directory(self, directory: Path) -> ValidationOutcome:
        """Validate a package that is already on disk."""
        try:
            package = await self.dump_runner.dump(directory)
            detail = RepoDetail.from_package(package)
        except PackageError as e:
            return ValidationOutcome(url=str(directory), result=e)
        return ValidationOutcome(url=str(directory), result=detail)

    async def _release_workspace(self, workspace: Path, succeeded: bool) -> None:
        if not succeeded and self.keep_failed_workspaces:
            get_logger().info("Keeping workspace for inspection: %s", workspace)
            return
        await asyncio.to_thread(shutil.rmtree, workspace, True)


async def run_all(
    pipeline: ValidationPipeline,
    urls: list[str],
    on_outcome: Callable[[ValidationOutcome], None] | None = None,
) -> list[ValidationOutcome]:
    """Validate every URL concurrently.

    Returns one outcome per input URL, in input order. on_outcome is called
    as each validation completes, in completion order. Each task is named
    after its URL so log records carry it as taskName.
    """

    async def validate_one(url: str) -> ValidationOutcome:
        outcome = await pipeline.validate(url)
        if on_outcome:
            on_outcome(outcome)
        return outcome

    tasks = [asyncio.create_task(validate_one(url), name=url) for url in urls]
    return list(await asyncio.gather(*tasks))


def build_pipeline(config: Config, client: httpx.AsyncClient) -> ValidationPipeline:
    """Wire a pipeline from configuration. The dump limiter is created here, per run."""
    url_builder = RawUrlBuilder(config.raw_host_base)
    dump_runner = ManifestDumpRunner(
        asyncio.Semaphore(config.dump_concurrency),
        command=config.dump_command,
        timeout=config.dump_timeout,
        timeout_exit_codes=config.timeout_exit_codes,
    )
    return ValidationPipeline(
        branch_resolver=build_branch_resolver(config, client, url_builder),
        url_builder=url_builder,
        fetcher=ManifestFetcher(client, config.manifest_file_name, config.workspace_root),
        dump_runner=dump_runner,
        manifest_file_name=config.manifest_file_name,
        keep_failed_workspaces=config.keep_failed_workspaces,
    )

"""Error taxonomy for package-list-validator.

Every per-URL failure is one of the PackageError subclasses below. They are
recovered inside the validation pipeline and reported as data; anything else
(ConfigurationError included) is a bug or a fatal setup problem and is allowed
to propagate.
"""


class PackageError(Exception):
    """Base class for failures that are isolated to a single repository URL."""

    tag = "package_error"

    @property
    def reason(self) -> str:
        return str(self) or self.tag


class InvalidURL(PackageError):
    tag = "invalid_url"

    def __init__(self, url: str):
        super().__init__(f"Invalid repository URL: {url}")
        self.url = url


class UnsupportedHost(PackageError):
    tag = "unsupported_host"

    def __init__(self, host: str):
        super().__init__(f"Unsupported host: {host}")
        self.host = host


class NoResult(PackageError):
    tag = "no_result"

    def __init__(self, reason: str = "No result"):
        super().__init__(reason)


class MissingProducts(PackageError):
    tag = "missing_products"

    def __init__(self):
        super().__init__("Package declares no products")


class DumpTimeout(PackageError):
    tag = "dump_timeout"

    def __init__(self):
        super().__init__("Package dump timed out")


class BadDump(PackageError):
    tag = "bad_dump"

    def __init__(self, stderr: str | None = None):
        message = "Package dump failed"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.stderr = stderr


class DecodingError(PackageError):
    tag = "decoding_error"

    def __init__(self, cause: Exception):
        super().__init__(f"Unable to decode package dump: {cause}")
        self.cause = cause


class ConfigurationError(Exception):
    """Raised for malformed configuration, e.g. an unbuildable raw URL."""


class ListCheckError(Exception):
    """A structural problem with the package list itself."""

    def __init__(self, check: str, urls: list[str]):
        preview = ", ".join(urls[:5])
        if len(urls) > 5:
            preview += f", ... ({len(urls) - 5} more)"
        super().__init__(f"{check}: {preview}")
        self.check = check
        self.urls = urls

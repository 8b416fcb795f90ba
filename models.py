"""Data model for package-list-validator."""

import json
from dataclasses import dataclass
from typing import Any

from errors import MissingProducts, PackageError


@dataclass(frozen=True)
class RepoSpecification:
    repository_name: str
    user_name: str
    branch_name: str


@dataclass(frozen=True)
class Product:
    name: str
    type: str | None = None
    targets: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Build a product from one entry of the dump's "products" array.

        The dump encodes the product type as a single-key object, e.g.
        {"library": ["automatic"]} or {"executable": null}.
        """
        _require_object(data, "product")
        product_type = data.get("type")
        if isinstance(product_type, dict):
            product_type = next(iter(product_type), None)
        return cls(
            name=_require_str(data, "name"),
            type=product_type,
            targets=tuple(data.get("targets") or ()),
        )


@dataclass(frozen=True)
class Package:
    """Decoded output of the manifest dump command."""

    name: str
    products: tuple[Product, ...] = ()
    targets: tuple[str, ...] = ()
    dependencies: tuple[dict[str, Any], ...] = ()
    platforms: tuple[dict[str, Any], ...] = ()
    tools_version: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Package":
        _require_object(data, "package")

        products = data.get("products") or []
        if not isinstance(products, list):
            raise TypeError("'products' must be a list")

        tools_version = data.get("toolsVersion")
        if isinstance(tools_version, dict):
            tools_version = tools_version.get("_version")

        return cls(
            name=_require_str(data, "name"),
            products=tuple(Product.from_dict(p) for p in products),
            targets=tuple(_require_object(t, "target")["name"] for t in data.get("targets") or ()),
            dependencies=tuple(data.get("dependencies") or ()),
            platforms=tuple(data.get("platforms") or ()),
            tools_version=tools_version,
        )

    @classmethod
    def from_json(cls, raw: bytes | str) -> "Package":
        """Decode a package dump.

        Raises ValueError, KeyError or TypeError on malformed input.
        """
        return cls.from_dict(json.loads(raw))


def _require_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"Expected {what} to be a JSON object, got {type(value).__name__}")
    return value


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string")
    return value


@dataclass(frozen=True)
class RepoDetail:
    first_product: Product
    package: Package

    @classmethod
    def from_package(cls, package: Package) -> "RepoDetail":
        if not package.products:
            raise MissingProducts()
        return cls(first_product=package.products[0], package=package)


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one repository URL."""

    url: str
    result: RepoDetail | PackageError

    @property
    def succeeded(self) -> bool:
        return isinstance(self.result, RepoDetail)

    @property
    def detail(self) -> RepoDetail | None:
        return self.result if isinstance(self.result, RepoDetail) else None

    @property
    def error(self) -> PackageError | None:
        return self.result if isinstance(self.result, PackageError) else None

"""Configuration and data models for the examples sync system."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


DEFAULT_GITHUB_ORG = "tiagosiebler"
DEFAULT_CONFIG_FILENAME = "sync-examples.yaml"


class UnknownExchangeError(ValueError):
    """Raised when an exchange key is not in the registry."""

    def __init__(self, exchange: str, available: list[str]) -> None:
        super().__init__(
            f"Unknown exchange: {exchange}. Available exchanges: {', '.join(available)}"
        )
        self.exchange = exchange
        self.available = available


@dataclass(frozen=True)
class ExchangeConfig:
    """Where an exchange SDK lives and where its examples are mirrored to."""

    repo_name: str  # GitHub repo name (e.g. "bitget-api")
    package_name: str  # npm package examples import from (e.g. "@siebly/kraken-api")
    dest_folder: str  # Folder under examples/ (case-sensitive, e.g. "OKX")
    exclude_folders: tuple[str, ...] = ("apidoc",)
    repo_url: str | None = None  # Overrides the default GitHub URL

    def get_repo_url(self, github_org: str = DEFAULT_GITHUB_ORG) -> str:
        """Get the clone URL for the SDK repository."""
        if self.repo_url:
            return self.repo_url
        return f"https://github.com/{github_org}/{self.repo_name}.git"

    def matches_folder(self, name: str) -> bool:
        """Check if a directory name is a case variant of the destination folder."""
        return name.lower() == self.dest_folder.lower()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        result: dict[str, Any] = {
            "repo_name": self.repo_name,
            "package_name": self.package_name,
            "dest_folder": self.dest_folder,
            "exclude_folders": list(self.exclude_folders),
        }
        if self.repo_url:
            result["repo_url"] = self.repo_url
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExchangeConfig":
        """Create from dictionary."""
        return cls(
            repo_name=data["repo_name"],
            package_name=data.get("package_name", data["repo_name"]),
            dest_folder=data["dest_folder"],
            exclude_folders=tuple(data.get("exclude_folders", ["apidoc"])),
            repo_url=data.get("repo_url"),
        )


EXCHANGE_CONFIGS: dict[str, ExchangeConfig] = {
    "binance": ExchangeConfig(
        repo_name="binance",
        package_name="binance",
        dest_folder="Binance",
    ),
    "bitget": ExchangeConfig(
        repo_name="bitget-api",
        package_name="bitget-api",
        dest_folder="Bitget",
    ),
    "bitmart": ExchangeConfig(
        repo_name="bitmart-api",
        package_name="bitmart-api",
        dest_folder="Bitmart",
    ),
    "bybit": ExchangeConfig(
        repo_name="bybit-api",
        package_name="bybit-api",
        dest_folder="Bybit",
    ),
    "coinbase": ExchangeConfig(
        repo_name="coinbase-api",
        package_name="coinbase-api",
        dest_folder="Coinbase",
    ),
    "gate": ExchangeConfig(
        repo_name="gateio-api",
        package_name="gateio-api",
        dest_folder="Gate",
    ),
    "kraken": ExchangeConfig(
        repo_name="kraken-api",
        package_name="@siebly/kraken-api",
        dest_folder="Kraken",
    ),
    "kucoin": ExchangeConfig(
        repo_name="kucoin-api",
        package_name="kucoin-api",
        dest_folder="Kucoin",
    ),
    "okx": ExchangeConfig(
        repo_name="okx-api",
        package_name="okx-api",
        dest_folder="OKX",
    ),
}


def get_exchange_config(
    exchange: str,
    registry: dict[str, ExchangeConfig] | None = None,
) -> ExchangeConfig:
    """Look up an exchange by key, ignoring case.

    Raises:
        UnknownExchangeError: If the key is not registered
    """
    registry = EXCHANGE_CONFIGS if registry is None else registry
    config = registry.get(exchange.lower())
    if config is None:
        raise UnknownExchangeError(exchange, list(registry))
    return config


@dataclass
class SyncPaths:
    """Directories a sync run reads from and writes to.

    Every operation receives these explicitly instead of relying on the
    current working directory.
    """

    repo_root: Path  # The examples repository (git working tree)
    sdk_root: Path  # Parent directory holding SDK checkouts
    examples_root: Path
    public_dir: Path

    @classmethod
    def from_repo_root(cls, repo_root: Path, sdk_root: Path | None = None) -> "SyncPaths":
        """Build the default layout: SDK checkouts are siblings of the repo."""
        repo_root = Path(repo_root).resolve()
        return cls(
            repo_root=repo_root,
            sdk_root=Path(sdk_root).resolve() if sdk_root else repo_root.parent,
            examples_root=repo_root / "examples",
            public_dir=repo_root / "public",
        )

    def sdk_repo_dir(self, config: ExchangeConfig) -> Path:
        return self.sdk_root / config.repo_name

    def source_dir(self, config: ExchangeConfig) -> Path:
        return self.sdk_repo_dir(config) / "examples"

    def dest_dir(self, config: ExchangeConfig) -> Path:
        return self.examples_root / config.dest_folder

    def relative(self, path: Path) -> str:
        """Path relative to the repo root, POSIX style, for git arguments."""
        return path.relative_to(self.repo_root).as_posix()


@dataclass
class SyncSettings:
    """Sync operation settings."""

    github_org: str = DEFAULT_GITHUB_ORG
    base_branch: str = "main"
    # Remote branches tried in order when updating an existing SDK checkout
    fallback_branches: list[str] = field(default_factory=lambda: ["main", "master"])
    transform_extensions: list[str] = field(default_factory=lambda: [".ts", ".js", ".tsx", ".jsx"])
    lint_commands: list[str] = field(
        default_factory=lambda: ["npm run lint:fix", "npm run format", "npm run lint"]
    )
    build_commands: list[str] = field(default_factory=lambda: ["npm run buildfast"])
    verbose: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        return {
            "github_org": self.github_org,
            "base_branch": self.base_branch,
            "fallback_branches": self.fallback_branches,
            "transform_extensions": self.transform_extensions,
            "lint_commands": self.lint_commands,
            "build_commands": self.build_commands,
            "verbose": self.verbose,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncSettings":
        """Create from dictionary, keeping defaults for missing keys."""
        defaults = cls()
        return cls(
            github_org=data.get("github_org", defaults.github_org),
            base_branch=data.get("base_branch", defaults.base_branch),
            fallback_branches=data.get("fallback_branches", defaults.fallback_branches),
            transform_extensions=data.get("transform_extensions", defaults.transform_extensions),
            lint_commands=data.get("lint_commands", defaults.lint_commands),
            build_commands=data.get("build_commands", defaults.build_commands),
            verbose=data.get("verbose", defaults.verbose),
        )


@dataclass
class SyncConfig:
    """Main configuration: the exchange registry plus sync settings.

    The built-in registry can be overridden or extended from YAML:

        exchanges:
          okx:
            repo_name: okx-api
            dest_folder: OKX
            repo_url: git@github.com:me/okx-api.git
        settings:
          build_commands: []
    """

    exchanges: dict[str, ExchangeConfig] = field(default_factory=lambda: dict(EXCHANGE_CONFIGS))
    settings: SyncSettings = field(default_factory=SyncSettings)

    def get_exchange(self, exchange: str) -> ExchangeConfig:
        return get_exchange_config(exchange, self.exchanges)

    @classmethod
    def load(cls, config_path: Path | None) -> "SyncConfig":
        """Load configuration from a YAML file, or defaults if it doesn't exist."""
        if config_path is None or not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        exchanges = dict(EXCHANGE_CONFIGS)
        for key, exchange_data in (data.get("exchanges") or {}).items():
            exchanges[key.lower()] = ExchangeConfig.from_dict(exchange_data)

        settings = SyncSettings.from_dict(data.get("settings") or {})

        return cls(exchanges=exchanges, settings=settings)

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        data: dict[str, Any] = {
            "exchanges": {key: cfg.to_dict() for key, cfg in self.exchanges.items()},
            "settings": self.settings.to_dict(),
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

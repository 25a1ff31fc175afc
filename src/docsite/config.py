"""Configuration management for Docsite.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "docsite.toml"


@dataclass
class SiteConfig:
    """Site build configuration."""

    source_dir: Path = field(default_factory=lambda: Path("."))
    output_dir: Path = field(default_factory=lambda: Path("build"))
    manifest: str = "docs.json"
    asset_dirs: list[str] = field(default_factory=lambda: ["images", "logo"])
    asset_files: list[str] = field(default_factory=lambda: ["favicon.svg"])
    lang: str = "en"

    @property
    def manifest_path(self) -> Path:
        """Manifest location resolved against the source directory."""
        return self.source_dir / self.manifest


@dataclass
class ServerConfig:
    """Preview server configuration."""

    host: str = "127.0.0.1"
    port: int = 9018


@dataclass
class PlaygroundConfig:
    """Request playground configuration."""

    base_url: str = "https://api.example.com"
    timeout: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass
class CliSettings:
    """CLI settings that override configuration file values."""

    source_dir: Path | None = None
    output_dir: Path | None = None
    manifest: str | None = None
    host: str | None = None
    port: int | None = None
    live_reload_enabled: bool | None = None


@dataclass
class Config:
    """Complete Docsite configuration: file values, defaults and CLI overrides."""

    site: SiteConfig
    server: ServerConfig
    playground: PlaygroundConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        cli_settings: CliSettings | None = None,
    ) -> "Config":
        """Read docsite.toml and apply command-line overrides.

        Without an explicit path the nearest docsite.toml in the working
        directory or one of its ancestors is used; with none found every
        section takes its defaults.

        Args:
            config_path: Explicit configuration file
            cli_settings: Overrides taking precedence over the file

        Returns:
            Resolved configuration

        Raises:
            FileNotFoundError: If config_path is given but missing
            ValueError: If the file is not valid TOML or a value has the wrong type
        """
        if config_path is None:
            config_path = cls._discover_config()
        elif not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        config = cls._default() if config_path is None else cls._load_from_file(config_path)
        return config if cli_settings is None else config.with_overrides(cli_settings)

    def with_overrides(self, settings: CliSettings) -> "Config":
        """Return a copy of this config with CLI overrides applied.

        Args:
            settings: Values given on the command line (None means not set)

        Returns:
            New Config instance
        """
        site_changes = _given(
            source_dir=settings.source_dir,
            output_dir=settings.output_dir,
            manifest=settings.manifest,
        )
        server_changes = _given(host=settings.host, port=settings.port)
        reload_changes = _given(enabled=settings.live_reload_enabled)

        return replace(
            self,
            site=replace(self.site, **site_changes),
            server=replace(self.server, **server_changes),
            live_reload=replace(self.live_reload, **reload_changes),
        )

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Nearest docsite.toml walking up from the working directory."""
        cwd = Path.cwd()
        for directory in (cwd, *cwd.parents):
            if (directory / CONFIG_FILENAME).exists():
                return directory / CONFIG_FILENAME
        return None

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            site=SiteConfig(),
            server=ServerConfig(),
            playground=PlaygroundConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Parse a configuration file.

        Relative directories in the [site] section are resolved against the
        directory holding the file.
        """
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

        base_dir = path.parent
        return cls(
            site=cls._parse_site(_Section.of(data, "site"), base_dir),
            server=cls._parse_server(_Section.of(data, "server")),
            playground=cls._parse_playground(_Section.of(data, "playground")),
            live_reload=cls._parse_live_reload(_Section.of(data, "live_reload")),
            config_path=path,
        )

    @staticmethod
    def _parse_site(section: "_Section", base_dir: Path) -> SiteConfig:
        defaults = SiteConfig()
        return SiteConfig(
            source_dir=base_dir / section.string("source_dir", "."),
            output_dir=base_dir / section.string("output_dir", "build"),
            manifest=section.string("manifest", defaults.manifest),
            asset_dirs=section.strings("asset_dirs", defaults.asset_dirs),
            asset_files=section.strings("asset_files", defaults.asset_files),
            lang=section.string("lang", defaults.lang),
        )

    @staticmethod
    def _parse_server(section: "_Section") -> ServerConfig:
        defaults = ServerConfig()
        return ServerConfig(
            host=section.string("host", defaults.host),
            port=section.integer("port", defaults.port),
        )

    @staticmethod
    def _parse_playground(section: "_Section") -> PlaygroundConfig:
        defaults = PlaygroundConfig()
        return PlaygroundConfig(
            base_url=section.string("base_url", defaults.base_url).rstrip("/"),
            timeout=section.number("timeout", defaults.timeout),
            headers=section.string_table("headers"),
        )

    @staticmethod
    def _parse_live_reload(section: "_Section") -> LiveReloadConfig:
        patterns = section.strings("watch_patterns", []) if "watch_patterns" in section else None
        return LiveReloadConfig(
            enabled=section.boolean("enabled", True),
            watch_patterns=patterns,
        )


def _given(**values: object) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass
class _Section:
    """Typed access to one TOML table; errors name the offending key."""

    name: str
    values: dict[str, object]

    @classmethod
    def of(cls, data: dict[str, object], name: str) -> "_Section":
        table = data.get(name, {})
        if not isinstance(table, dict):
            raise ValueError(f"{name} section must be a dictionary")
        return cls(name, table)

    def __contains__(self, key: str) -> bool:
        return key in self.values

    def _invalid(self, key: str, expected: str) -> ValueError:
        return ValueError(f"{self.name}.{key} must be {expected}")

    def string(self, key: str, default: str) -> str:
        value = self.values.get(key, default)
        if not isinstance(value, str):
            raise self._invalid(key, "a string")
        return value

    def boolean(self, key: str, default: bool) -> bool:
        value = self.values.get(key, default)
        if not isinstance(value, bool):
            raise self._invalid(key, "a boolean")
        return value

    def integer(self, key: str, default: int) -> int:
        value = self.values.get(key, default)
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._invalid(key, "an integer")
        return value

    def number(self, key: str, default: float) -> float:
        value = self.values.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise self._invalid(key, "a number")
        return float(value)

    def strings(self, key: str, default: list[str]) -> list[str]:
        value = self.values.get(key, default)
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise self._invalid(key, "a list of strings")
        return list(value)

    def string_table(self, key: str) -> dict[str, str]:
        value = self.values.get(key, {})
        if not isinstance(value, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        ):
            raise self._invalid(key, "a table of strings")
        return dict(value)

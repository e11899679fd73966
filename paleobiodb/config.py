"""
Configuration management for the PBDB client.

Saved queries (resource, filters, output settings and API settings) are
stored as YAML files and can be kept as named presets.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from paleobiodb.api import DEFAULT_TIMEOUT, ENDPOINTS, PBDB_API_BASE, PBDBClient
from paleobiodb.utils import get_logger

OUTPUT_FORMATS = ("csv", "excel", "geojson")


class Config:
    """
    A saved PBDB query.

    Example:
        # Load from file
        config = Config.load("canidae.yaml")
        with config.client() as client:
            df = client.call(config.resource, id=config.record_id, query=config.params)

        # Save to file
        config = Config(resource="occurrences", params={"base_name": "Canidae"})
        config.save("canidae.yaml")
    """

    def __init__(
        self,
        resource: str = "occurrences",
        params: dict[str, Any] | None = None,
        record_id: Any = None,
        output_format: str = "csv",
        output_path: str | None = None,
        base_url: str = PBDB_API_BASE,
        timeout: float | None = DEFAULT_TIMEOUT,
    ):
        """
        Initialize configuration.

        Args:
            resource: Resource name (e.g. "occurrences", "taxon")
            params: Query parameters; list values become comma lists
            record_id: Identifier for single-record resources
            output_format: Output format (csv, excel, geojson)
            output_path: Default output file path
            base_url: API base address
            timeout: Request timeout in seconds

        Raises:
            ValueError: If the resource or output format is unknown
        """
        if resource not in ENDPOINTS:
            supported = ", ".join(sorted(ENDPOINTS))
            raise ValueError(f"Unknown resource: {resource}. Supported: {supported}")

        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported format: {output_format}. "
                f"Supported formats: {', '.join(OUTPUT_FORMATS)}"
            )

        self.resource = resource
        self.params = dict(params or {})
        self.record_id = record_id
        self.output_format = output_format
        self.output_path = output_path
        self.base_url = base_url
        self.timeout = timeout
        self.logger = get_logger()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """
        Create Config from a dictionary (e.g., from YAML config).

        Args:
            data: Dictionary with ``api``, ``query`` and ``output`` sections

        Returns:
            Config instance
        """
        api = data.get("api") or {}
        query = data.get("query") or {}
        output = data.get("output") or {}

        return cls(
            resource=query.get("resource", "occurrences"),
            params=query.get("params") or {},
            record_id=query.get("id"),
            output_format=output.get("format", "csv"),
            output_path=output.get("filename"),
            base_url=api.get("base_url", PBDB_API_BASE),
            timeout=api.get("timeout", DEFAULT_TIMEOUT),
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file is empty or names an unknown resource
            yaml.YAMLError: If file is invalid YAML
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not data:
            raise ValueError(f"Empty config file: {path}")

        return cls.from_dict(data)

    def save(self, path: str | Path) -> None:
        """
        Save configuration to a YAML file.

        Args:
            path: Path to save to
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        self.logger.info(f"Configuration saved to: {path}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        query: dict[str, Any] = {"resource": self.resource}
        if self.record_id is not None:
            query["id"] = self.record_id
        query["params"] = dict(self.params)

        result: dict[str, Any] = {
            "api": {"base_url": self.base_url},
            "query": query,
            "output": {"format": self.output_format},
        }

        if self.timeout is not None:
            result["api"]["timeout"] = self.timeout

        if self.output_path:
            result["output"]["filename"] = self.output_path

        return result

    def client(self) -> PBDBClient:
        """Create a client using this configuration's API settings."""
        return PBDBClient(base_url=self.base_url, timeout=self.timeout)


# Default config directory
DEFAULT_CONFIG_DIR = Path.home() / ".paleobiodb"


def get_config_dir() -> Path:
    """
    Get the configuration directory, creating it if needed.

    Returns:
        Path to config directory
    """
    DEFAULT_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return DEFAULT_CONFIG_DIR


def list_presets() -> list[str]:
    """
    List available preset configurations.

    Returns:
        List of preset names (without .yaml extension)
    """
    return sorted(path.stem for path in get_config_dir().glob("*.yaml"))


def load_preset(name: str) -> Config:
    """
    Load a preset configuration by name.

    Raises:
        FileNotFoundError: If preset doesn't exist
    """
    return Config.load(get_config_dir() / f"{name}.yaml")


def save_preset(name: str, config: Config) -> Path:
    """
    Save a configuration as a preset.

    Returns:
        Path to saved file
    """
    path = get_config_dir() / f"{name}.yaml"
    config.save(path)
    return path


def delete_preset(name: str) -> bool:
    """
    Delete a preset configuration.

    Returns:
        True if deleted, False if not found
    """
    path = get_config_dir() / f"{name}.yaml"

    if path.exists():
        path.unlink()
        return True

    return False


# Example configuration template
EXAMPLE_CONFIG = """# PBDB query configuration
# Save this file and use with: pbdb run my_query.yaml

api:
  base_url: https://paleobiodb.org/data1.2/
  # timeout: 60

query:
  # Any resource listed by: pbdb endpoints
  resource: occurrences
  # Single-record resources (occurrence, collection, ...) need an id:
  # id: 1001
  params:
    base_name: Canidae
    interval: Miocene
    show:
      - coords
      - phylo
      - ident
    vocab: pbdb
    limit: all

output:
  format: csv  # csv, excel, or geojson
  filename: canidae_miocene.csv
"""


def create_example_config(path: str | Path | None = None) -> Path:
    """
    Create an example configuration file.

    Args:
        path: Where to save (default: config_dir/example.yaml)

    Returns:
        Path to created file
    """
    if path is None:
        path = get_config_dir() / "example.yaml"
    else:
        path = Path(path)

    with open(path, "w", encoding="utf-8") as f:
        f.write(EXAMPLE_CONFIG)

    return path

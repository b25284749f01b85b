import os
import yaml
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class NetworkConfig:
    host: str = "arweave.net"
    port: int = 443
    protocol: str = "https"
    timeout_sec: float = 20.0

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"

    def link_for(self, item_id: str) -> str:
        """Canonical retrieval link for a signed record."""
        return f"{self.protocol}://{self.host}/{item_id}"


@dataclass
class BundleConfig:
    # Cumulated size limit for the file pairs of a single bundle. Kept well
    # under the 250MB bundle ceiling so that a failed bundle costs less.
    size_byte_limit: int = 200 * 1000 * 1000
    app_name: str = "Metaplex Candy Machine"
    image_extension: str = ".png"
    image_content_type: str = "image/png"
    manifest_content_type: str = "application/json"

    @property
    def base_tags(self) -> List[Dict[str, str]]:
        return [{"name": "App-Name", "value": self.app_name}]

    @property
    def image_tags(self) -> List[Dict[str, str]]:
        return self.base_tags + [
            {"name": "Content-Type", "value": self.image_content_type}
        ]

    @property
    def manifest_tags(self) -> List[Dict[str, str]]:
        return self.base_tags + [
            {"name": "Content-Type", "value": self.manifest_content_type}
        ]


@dataclass
class CacheConfig:
    db_path: Optional[str] = None


@dataclass
class ArbatchConfig:
    network: NetworkConfig = field(default_factory=NetworkConfig)
    bundle: BundleConfig = field(default_factory=BundleConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


def load_config(config_path: Optional[str] = None) -> ArbatchConfig:
    """Load configuration from file or use defaults."""
    if config_path and os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        network_config = NetworkConfig(**config_data.get('network', {}))
        bundle_config = BundleConfig(**config_data.get('bundle', {}))
        cache_config = CacheConfig(**config_data.get('cache', {}))
    else:
        network_config = NetworkConfig()
        bundle_config = BundleConfig()
        cache_config = CacheConfig()

    if cache_config.db_path is None:
        cache_config.db_path = "arbatch_cache.db"

    return ArbatchConfig(
        network=network_config,
        bundle=bundle_config,
        cache=cache_config,
    )

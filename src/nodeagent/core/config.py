# src/nodeagent/core/config.py

import logging
import os
from datetime import timedelta
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..utils.date_utils import parse_duration
from .exceptions import ConfigurationError

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

logger = logging.getLogger(__name__)

NODE_POOL_LABEL_KEY = "kubernetes.civo.com/civo-node-pool"

DEFAULT_API_URL = "https://api.civo.com"
DEFAULT_DESIRED_GPU_COUNT = 0
DEFAULT_REBOOT_COOLDOWN = timedelta(minutes=40)
DEFAULT_TICK_INTERVAL = timedelta(seconds=10)


def parse_desired_gpu_count(value: Any) -> int:
    """
    Parses the desired GPU count. Unparsable or negative values fall back to
    the default (0, which disables the GPU check).
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_DESIRED_GPU_COUNT
    try:
        count = int(str(value).strip())
    except ValueError:
        logger.warning("Invalid desired GPU count %r, using default %d", value, DEFAULT_DESIRED_GPU_COUNT)
        return DEFAULT_DESIRED_GPU_COUNT
    if count < 0:
        logger.warning("Desired GPU count must not be negative (got %d), using default %d", count, DEFAULT_DESIRED_GPU_COUNT)
        return DEFAULT_DESIRED_GPU_COUNT
    return count


def parse_reboot_cooldown(value: Any) -> timedelta:
    """
    Parses the reboot cooldown window. Plain integers are minutes; duration
    strings like '90s' or '1h' are accepted too. Unparsable or non-positive
    values fall back to 40 minutes.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_REBOOT_COOLDOWN

    if isinstance(value, timedelta):
        cooldown = value
    else:
        raw = str(value).strip()
        try:
            cooldown = timedelta(minutes=int(raw)) if raw.lstrip("-").isdigit() else parse_duration(raw)
        except ValueError:
            logger.warning("Invalid reboot time window %r, using default %s", value, DEFAULT_REBOOT_COOLDOWN)
            return DEFAULT_REBOOT_COOLDOWN

    if cooldown <= timedelta(0):
        logger.warning("Reboot time window must be positive (got %s), using default %s", cooldown, DEFAULT_REBOOT_COOLDOWN)
        return DEFAULT_REBOOT_COOLDOWN
    return cooldown


class WatcherConfig(BaseModel):
    """
    Immutable configuration of the reconciliation engine, resolved once at startup.

    Attributes:
        cluster_id: ID of the managed cluster on the compute provider
        node_pool_id: Node pool to watch, matched against the pool label
        region: Provider region of the cluster
        api_url: Provider API base URL
        api_key: Provider API key; only needed when the agent builds its own client
        desired_gpu_count: Exact allocatable GPU count a healthy node must report, 0 disables the check
        reboot_cooldown: Minimum age of the last Ready transition before a reboot is allowed
        tick_interval: Time between two reconciliation ticks
        kubeconfig: Explicit kubeconfig path; in-cluster config is used when unset
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    cluster_id: str = Field(..., min_length=1, description="Cluster ID")
    node_pool_id: str = Field(..., min_length=1, description="Node pool ID")
    region: str = Field(default="", description="Provider region")
    api_url: str = Field(default=DEFAULT_API_URL, description="Provider API URL")
    api_key: Optional[str] = Field(default=None, repr=False, description="Provider API key")
    desired_gpu_count: int = Field(default=DEFAULT_DESIRED_GPU_COUNT, description="Desired allocatable GPU count")
    reboot_cooldown: timedelta = Field(default=DEFAULT_REBOOT_COOLDOWN, description="Reboot cooldown window")
    tick_interval: timedelta = Field(default=DEFAULT_TICK_INTERVAL, description="Tick interval")
    kubeconfig: Optional[str] = Field(default=None, description="Kubeconfig path")

    @field_validator("desired_gpu_count", mode="before")
    @classmethod
    def _lenient_gpu_count(cls, value):
        return parse_desired_gpu_count(value)

    @field_validator("reboot_cooldown", mode="before")
    @classmethod
    def _lenient_cooldown(cls, value):
        return parse_reboot_cooldown(value)

    @field_validator("tick_interval", mode="before")
    @classmethod
    def _parse_tick_interval(cls, value):
        if isinstance(value, str):
            value = parse_duration(value)
        return value

    @field_validator("tick_interval")
    @classmethod
    def _positive_tick_interval(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("tick interval must be positive")
        return value

    @property
    def node_selector(self) -> Dict[str, str]:
        return {NODE_POOL_LABEL_KEY: self.node_pool_id}

    @property
    def label_selector(self) -> str:
        """The node selector rendered as a Kubernetes label selector string."""
        return ",".join(f"{key}={value}" for key, value in self.node_selector.items())

    @classmethod
    def create(cls, cluster_id: Optional[str], node_pool_id: Optional[str], **kwargs) -> "WatcherConfig":
        """
        Validates and builds the configuration.

        Raises:
            ConfigurationError: If the cluster ID or node pool ID is missing, or a
                strictly validated field (tick interval) is invalid.
        """
        cluster_id = (cluster_id or "").strip()
        node_pool_id = (node_pool_id or "").strip()
        if not cluster_id:
            raise ConfigurationError("CIVO_CLUSTER_ID not set")
        if not node_pool_id:
            raise ConfigurationError("CIVO_NODE_POOL_ID not set")

        kwargs = {key: value for key, value in kwargs.items() if value is not None}
        try:
            return cls(cluster_id=cluster_id, node_pool_id=node_pool_id, **kwargs)
        except (ValidationError, ValueError) as e:
            raise ConfigurationError(f"Invalid node-agent configuration: {e}") from e


class Config:
    """
    Handles the process configuration by loading values from environment variables.
    """

    def __init__(self):
        self.CIVO_API_KEY = self._get_secret("CIVO_API_KEY")

    @staticmethod
    def _get_secret(key: str, default: str = None) -> str:
        """
        Retrieves a secret from a file (mounted Kubernetes secret) or falls back to environment variable.

        Raises:
            PermissionError: If the secret file exists but cannot be read due to permissions.
            IOError: If the secret file exists but cannot be read due to I/O errors.
        """
        secret_file = f"/etc/node-agent/secrets/{key}"
        if os.path.exists(secret_file):
            try:
                with open(secret_file, "r") as f:
                    value = f.read().strip()
                    logger.debug(f"Loaded secret '{key}' from {secret_file}")
                    return value
            except PermissionError as e:
                raise PermissionError(
                    f"Secret file '{secret_file}' exists but cannot be read due to permission denied. "
                    f"Please check file permissions or run with appropriate privileges."
                ) from e
            except (IOError, OSError) as e:
                raise IOError(
                    f"Secret file '{secret_file}' exists but cannot be read: {e}. "
                    f"Please check the file integrity and system resources."
                ) from e
        return os.getenv(key, default)

    # Civo variables are properties so they are resolved at access time and
    # pick up environment changes made after import.
    @property
    def CIVO_API_URL(self) -> str:
        return os.getenv("CIVO_API_URL", "").strip() or DEFAULT_API_URL

    @property
    def CIVO_REGION(self) -> str:
        return os.getenv("CIVO_REGION", "").strip()

    @property
    def CIVO_CLUSTER_ID(self) -> str:
        return os.getenv("CIVO_CLUSTER_ID", "").strip()

    @property
    def CIVO_NODE_POOL_ID(self) -> str:
        return os.getenv("CIVO_NODE_POOL_ID", "").strip()

    @property
    def CIVO_NODE_DESIRED_GPU_COUNT(self) -> Optional[str]:
        return os.getenv("CIVO_NODE_DESIRED_GPU_COUNT")

    @property
    def CIVO_NODE_REBOOT_TIME_WINDOW_MINUTES(self) -> Optional[str]:
        return os.getenv("CIVO_NODE_REBOOT_TIME_WINDOW_MINUTES")

    @property
    def TICK_INTERVAL(self) -> str:
        return os.getenv("NODE_AGENT_TICK_INTERVAL", "10s")

    @property
    def KUBECONFIG(self) -> Optional[str]:
        return os.getenv("KUBECONFIG") or None

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- Status endpoint variables ---
    HEALTH_HOST = os.getenv("HEALTH_HOST", "0.0.0.0")
    HEALTH_PORT = int(os.getenv("HEALTH_PORT", "0"))

    def watcher_config(self, **overrides) -> WatcherConfig:
        """
        Builds the engine configuration from the environment. Keyword
        overrides (e.g. from CLI options) win over the environment when not None.

        Raises:
            ConfigurationError: If required values are missing or invalid.
        """
        values = {
            "cluster_id": self.CIVO_CLUSTER_ID,
            "node_pool_id": self.CIVO_NODE_POOL_ID,
            "region": self.CIVO_REGION,
            "api_url": self.CIVO_API_URL,
            "api_key": self.CIVO_API_KEY,
            "desired_gpu_count": self.CIVO_NODE_DESIRED_GPU_COUNT,
            "reboot_cooldown": self.CIVO_NODE_REBOOT_TIME_WINDOW_MINUTES,
            "tick_interval": self.TICK_INTERVAL,
            "kubeconfig": self.KUBECONFIG,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return WatcherConfig.create(**values)


# Instantiate the config to be imported by other modules
config = Config()

import asyncio
import logging
import typing

from kubernetes_asyncio import client, config

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Global lock to prevent race conditions during config loading
_CONFIG_LOCK = asyncio.Lock()
_CONFIG_LOADED = False


async def ensure_k8s_config(kubeconfig: typing.Optional[str] = None) -> bool:
    """
    Ensures that the Kubernetes configuration is loaded exactly once.

    An explicit kubeconfig path wins; otherwise the in-cluster service account
    is tried first, then the default kubeconfig file.

    Returns:
        bool: True if config was loaded successfully (or was already loaded), False otherwise.

    Raises:
        ConfigurationError: If an explicit kubeconfig path cannot be loaded.
    """
    global _CONFIG_LOADED

    if _CONFIG_LOADED:
        return True

    async with _CONFIG_LOCK:
        # Double-check locking pattern
        if _CONFIG_LOADED:
            return True

        if kubeconfig:
            try:
                logger.debug("Loading kubeconfig from %s...", kubeconfig)
                await config.load_kube_config(config_file=kubeconfig)
            except Exception as e:
                # Unreadable files, YAML errors and missing credentials all surface here.
                logger.error("Failed to build kubeconfig from path %r: %s", kubeconfig, e)
                raise ConfigurationError(f"failed to load kubeconfig from {kubeconfig}: {e}") from e
            logger.info("Loaded Kubernetes configuration from %s.", kubeconfig)
            _CONFIG_LOADED = True
            return True

        try:
            logger.debug("Attempting to load in-cluster Kubernetes config...")
            config.load_incluster_config()
            logger.info("Loaded in-cluster Kubernetes configuration.")
            _CONFIG_LOADED = True
            return True
        except config.ConfigException:
            logger.debug("In-cluster config not found.")

        try:
            logger.debug("Attempting to load local kubeconfig...")
            await config.load_kube_config()
            logger.info("Loaded Kubernetes configuration from kubeconfig file.")
            _CONFIG_LOADED = True
            return True
        except config.ConfigException:
            logger.warning("Could not find kubeconfig file.")

    logger.warning("Failed to load any Kubernetes configuration.")
    return False


async def get_core_v1_api(kubeconfig: typing.Optional[str] = None) -> typing.Optional[client.CoreV1Api]:
    """
    Returns a configured CoreV1Api instance.
    Safe to call concurrently.
    """
    if await ensure_k8s_config(kubeconfig):
        return client.CoreV1Api()
    return None

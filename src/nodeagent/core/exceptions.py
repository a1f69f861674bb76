class NodeAgentError(Exception):
    """Base exception for node-agent."""

    pass


class ConfigurationError(NodeAgentError):
    """Raised at startup when required configuration is missing or invalid."""

    pass


class RetrievalError(NodeAgentError):
    """Raised when the nodes of the pool could not be listed."""

    def __init__(self, message: str, selector: str = None):
        super().__init__(message)
        self.selector = selector


class RemediationFailure(NodeAgentError):
    """
    Base exception for failures while remediating a single node.

    `outcomes` holds what the tick had already done to earlier nodes when it
    was aborted.
    """

    def __init__(self, message: str, cluster_id: str = None, node_name: str = None, instance_id: str = None):
        super().__init__(message)
        self.cluster_id = cluster_id
        self.node_name = node_name
        self.instance_id = instance_id
        self.outcomes = []


class InstanceLookupError(RemediationFailure):
    """Raised when the compute instance backing a node could not be found."""

    pass


class RemediationError(RemediationFailure):
    """Raised when the reboot call for a located instance failed."""

    pass


class ProviderError(NodeAgentError):
    """Base exception for compute provider API errors."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ZeroMatchesError(ProviderError):
    """Raised when an instance search matched nothing."""

    pass


class MultipleMatchesError(ProviderError):
    """Raised when an instance search matched more than one instance."""

    pass

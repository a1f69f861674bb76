# src/nodeagent/__init__.py
"""
node-agent: keeps the nodes of a managed Kubernetes node pool healthy by
hard-rebooting the compute instances behind nodes that stay unhealthy.
"""

__version__ = "0.1.0"

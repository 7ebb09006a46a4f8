"""Cluster Status Operator: projects ClusterDeployment install status onto ClusterInstance."""

__version__ = "0.1.0"

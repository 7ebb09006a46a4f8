"""Handler modules for watched resources."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import cluster_deployment  # noqa: F401
from . import cluster_instance  # noqa: F401

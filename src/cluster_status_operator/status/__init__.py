"""ClusterInstance status projection from ClusterDeployment."""

from .deployment_conditions import update_deployment_conditions
from .provisioned import (
    ProvisionedOutcome,
    initialize_provisioned_condition,
    update_provisioned_status,
)

__all__ = [
    "ProvisionedOutcome",
    "initialize_provisioned_condition",
    "update_deployment_conditions",
    "update_provisioned_status",
]

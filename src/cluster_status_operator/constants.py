"""Constants for the Cluster Status Operator."""

# API Groups
CI_API_GROUP = "siteconfig.open-cluster-management.io"
CI_API_VERSION = "v1alpha1"
CI_API_GROUP_VERSION = f"{CI_API_GROUP}/{CI_API_VERSION}"

CD_API_GROUP = "hive.openshift.io"
CD_API_VERSION = "v1"
CD_API_GROUP_VERSION = f"{CD_API_GROUP}/{CD_API_VERSION}"

# Resource Kinds
KIND_CLUSTER_INSTANCE = "ClusterInstance"
KIND_CLUSTER_DEPLOYMENT = "ClusterDeployment"

# Plurals
PLURAL_CLUSTER_INSTANCES = "clusterinstances"
PLURAL_CLUSTER_DEPLOYMENTS = "clusterdeployments"

# Field Manager
FIELD_MANAGER = "cluster-status-operator"
CONTROLLER_NAME = "clusterDeploymentReconciler"

# Condition Statuses
STATUS_TRUE = "True"
STATUS_FALSE = "False"
STATUS_UNKNOWN = "Unknown"

# ClusterDeployment install condition types
COND_REQUIREMENTS_MET = "RequirementsMet"
COND_COMPLETED = "Completed"
COND_FAILED = "Failed"
COND_STOPPED = "Stopped"

CLUSTER_INSTALL_CONDITION_TYPES = (
    COND_REQUIREMENTS_MET,
    COND_COMPLETED,
    COND_FAILED,
    COND_STOPPED,
)

# ClusterInstance condition types
COND_PROVISIONED = "Provisioned"

# Provisioned condition reasons
REASON_UNKNOWN = "Unknown"
REASON_COMPLETED = "Completed"
REASON_STALE_CONDITIONS = "StaleConditions"
REASON_FAILED = "Failed"
REASON_IN_PROGRESS = "InProgress"

# Provisioned condition messages
MSG_WAITING = "Waiting for provisioning to start"
MSG_COMPLETED = "Provisioning completed"
MSG_STALE = "ClusterDeployment Spec.Installed=true, but Status.Conditions are not updated"
MSG_FAILED = "Provisioning failed"
MSG_IN_PROGRESS = "Provisioning cluster"

# Event Reasons
EVENT_REASON_PROVISIONING_COMPLETED = "ProvisioningCompleted"
EVENT_REASON_PROVISIONING_FAILED = "ProvisioningFailed"
EVENT_REASON_PROVISIONING_IN_PROGRESS = "ProvisioningInProgress"
EVENT_REASON_PROVISIONING_STALE = "ProvisioningStale"

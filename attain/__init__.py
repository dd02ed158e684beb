"""
The main attain module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the package's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from attain._cogs.clients.auth import (
    connected,
)
from attain._cogs.clients.errors import (
    APIError,
    APIClientError,
    APIServerError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
)
from attain._cogs.configs.configuration import (
    AttainSettings,
    PollingSettings,
    ScalingSettings,
    NetworkingSettings,
)
from attain._cogs.helpers.typedefs import (
    Logger,
)
from attain._cogs.helpers.versions import (
    version as __version__,
)
from attain._cogs.structs.conditions import (
    Condition,
    ConditionTriple,
    MalformedConditionsError,
    extract_conditions,
)
from attain._cogs.structs.credentials import (
    ConnectionInfo,
)
from attain._cogs.structs.references import (
    Resource,
    Locator,
    NamespaceName,
    DEPLOYMENTS,
    STATEFULSETS,
    parse_resource,
)
from attain._core.actions.errors import (
    ConvergenceError,
    ReadFailure,
    DecodeFailure,
    ConditionMismatch,
    ReplicaMismatch,
    WriteFailure,
    PollingAborted,
    DeadlineExceeded,
    PollingStopped,
)
from attain._core.actions.loggers import (
    LogFormat,
    ObjectLogger,
    configure,
)
from attain._core.engines.polling import (
    Done,
    Retryable,
    Fatal,
    PollOutcome,
    poll,
)
from attain._core.engines.conditions import (
    ConditionQuery,
    wait_for_condition,
)
from attain._core.engines.scaling import (
    ScalingPhase,
    scale_and_converge,
    scale_deployment,
    scale_resource_manager,
    wait_for_replicas,
)
from attain._core.intents.accessors import (
    ResourceReader,
    ConditionExtractor,
    ReplicaAccessor,
    APIAccessor,
)

__all__ = [
    'connected',
    'APIError', 'APIClientError', 'APIServerError',
    'APIUnauthorizedError', 'APIForbiddenError', 'APINotFoundError', 'APIConflictError',
    'AttainSettings', 'PollingSettings', 'ScalingSettings', 'NetworkingSettings',
    'Logger',
    'Condition', 'ConditionTriple', 'MalformedConditionsError', 'extract_conditions',
    'ConnectionInfo',
    'Resource', 'Locator', 'NamespaceName', 'DEPLOYMENTS', 'STATEFULSETS', 'parse_resource',
    'ConvergenceError', 'ReadFailure', 'DecodeFailure', 'ConditionMismatch',
    'ReplicaMismatch', 'WriteFailure', 'PollingAborted', 'DeadlineExceeded', 'PollingStopped',
    'LogFormat', 'ObjectLogger', 'configure',
    'Done', 'Retryable', 'Fatal', 'PollOutcome', 'poll',
    'ConditionQuery', 'wait_for_condition',
    'ScalingPhase', 'scale_and_converge', 'scale_deployment', 'scale_resource_manager',
    'wait_for_replicas',
    'ResourceReader', 'ConditionExtractor', 'ReplicaAccessor', 'APIAccessor',
]

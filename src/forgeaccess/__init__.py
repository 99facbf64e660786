from .config import ForgeConfig, LogLevel, load_config_from_env
from .exceptions import (
    ConfigurationError,
    ForgeAccessError,
    HierarchyCycleError,
    HierarchyError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    get_http_status,
)
from .logging import (
    ForgeFormatter,
    ForgeLoggerAdapter,
    get_forge_logger,
    safe_preview,
    setup_logging,
)
from .permissions import (
    AccessLevel,
    EffectivePermissions,
    EffectiveUserPermission,
    Grant,
    GrantCollection,
    GroupTarget,
    UserTarget,
    Visibility,
    can_contribute,
    can_delete,
    can_edit,
    can_view,
    is_member,
    is_owner,
    require,
    resolve,
)
from .hierarchy import Group, Hierarchy, Project, User, slugify
from .fork import fork_project
from .merge_requests import MergeRequest, open_merge_request
from .repository import Commit, Repository
from .runners import Runner, RunnerRef, register_runner
from .transport import ClientNamespace, ClientProject, to_client_project

__all__ = [
    'ForgeConfig',
    'LogLevel',
    'load_config_from_env',
    'ConfigurationError',
    'ForgeAccessError',
    'HierarchyCycleError',
    'HierarchyError',
    'InvalidArgumentError',
    'NotFoundError',
    'PermissionDeniedError',
    'get_http_status',
    'ForgeFormatter',
    'ForgeLoggerAdapter',
    'get_forge_logger',
    'safe_preview',
    'setup_logging',
    'AccessLevel',
    'EffectivePermissions',
    'EffectiveUserPermission',
    'Grant',
    'GrantCollection',
    'GroupTarget',
    'UserTarget',
    'Visibility',
    'can_contribute',
    'can_delete',
    'can_edit',
    'can_view',
    'is_member',
    'is_owner',
    'require',
    'resolve',
    'Group',
    'Hierarchy',
    'Project',
    'User',
    'slugify',
    'fork_project',
    'MergeRequest',
    'open_merge_request',
    'Commit',
    'Repository',
    'Runner',
    'RunnerRef',
    'register_runner',
    'ClientNamespace',
    'ClientProject',
    'to_client_project',
]

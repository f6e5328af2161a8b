from .config import AclConfig, LogLevel, load_config_from_env
from .exceptions import (
    ConfigurationError,
    InvalidStateError,
    PersistenceError,
    SerializationError,
    WebAclError,
    error_registry,
    register_error,
)
from .interfaces import FetchGraph, Serializer, Statement, TripleMatcher, WebClient
from .logging import (
    AclFormatter,
    AclLoggerAdapter,
    get_acl_logger,
    redact_mailto,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .permissions import (
    ALL_MODES,
    AccessMode,
    AccessType,
    Everyone,
    Group,
    GroupListing,
    Permission,
    PermissionSet,
    SingleAgent,
    as_modes,
    default_acl_url_for,
    default_is_acl,
)
from .vocab import ACL, EVERYONE

__all__ = [
    'ACL',
    'ALL_MODES',
    'EVERYONE',
    'AccessMode',
    'AccessType',
    'AclConfig',
    'AclFormatter',
    'AclLoggerAdapter',
    'ConfigurationError',
    'Everyone',
    'FetchGraph',
    'Group',
    'GroupListing',
    'InvalidStateError',
    'LogLevel',
    'Permission',
    'PermissionSet',
    'PersistenceError',
    'SerializationError',
    'Serializer',
    'SingleAgent',
    'Statement',
    'TripleMatcher',
    'WebAclError',
    'WebClient',
    'as_modes',
    'default_acl_url_for',
    'default_is_acl',
    'error_registry',
    'get_acl_logger',
    'load_config_from_env',
    'redact_mailto',
    'register_error',
    'safe_log_value',
    'safe_preview',
    'setup_logging',
]

"""
Event kind catalog for Herald.

The catalog is static data: opaque labels with no behaviour attached.
Members subclass `str`, so `EventKind.USER_CREATED` and `"user:created"`
address the same registry entry. Applications may define their own catalog;
the registry accepts any hashable identifier.

Namespaces are the label prefix before the first `:` or `.`
(`"user:created"` → `"user"`, `"log.error"` → `"log"`).
"""

from __future__ import annotations

import re
from enum import Enum

_NAMESPACE_SEPARATOR = re.compile(r"[:.]")


class EventKind(str, Enum):
    """Built-in event kinds."""

    LOG = "log"
    LOG_ERROR = "log.error"
    LOG_INFO = "log.info"
    LOG_WARNING = "log.warning"
    LOG_DEBUG = "log.debug"
    LOG_CRITICAL = "log.critical"
    LOG_EMERGENCY = "log.emergency"
    LOG_NOTICE = "log.notice"
    LOG_TRACE = "log.trace"
    LOG_SILENT = "log.silent"

    SERVER_STARTED = "server:started"
    SERVER_STOPPED = "server:stopped"
    SERVER_SHUTDOWN = "server:shutdown"
    SERVER_ERROR = "server:error"
    SERVER_WARNING = "server:warning"
    SERVER_CRITICAL = "server:critical"
    SERVER_DEBUG = "server:debug"
    SERVER_THROW = "server:throw"

    USER_CREATED = "user:created"
    USER_UPDATED = "user:updated"
    USER_DELETED = "user:deleted"

    CAPABILITY_CREATED = "capability:created"
    CAPABILITY_UPDATED = "capability:updated"
    CAPABILITY_DELETED = "capability:deleted"
    CAPABILITY_ASSIGNED = "capability:assigned"
    CAPABILITY_UNASSIGNED = "capability:unassigned"
    CAPABILITY_OPENED = "capability:opened"
    CAPABILITY_CLOSED = "capability:closed"

    ROLE_CREATED = "role:created"
    ROLE_UPDATED = "role:updated"
    ROLE_DELETED = "role:deleted"

    PERMISSION_CREATED = "permission:created"
    PERMISSION_UPDATED = "permission:updated"
    PERMISSION_DELETED = "permission:deleted"

    ROUTE_OPENED = "route:opened"
    ROUTE_CLOSED = "route:closed"

    def __str__(self) -> str:
        return self.value

    @property
    def namespace(self) -> str:
        """
        Label prefix of this kind.

        >>> EventKind.USER_CREATED.namespace
        'user'
        >>> EventKind.LOG.namespace
        'log'
        """
        return _NAMESPACE_SEPARATOR.split(self.value, maxsplit=1)[0]

    @classmethod
    def in_namespace(cls, namespace: str) -> list["EventKind"]:
        """
        All kinds sharing a namespace, in declaration order.

        >>> [k.value for k in EventKind.in_namespace("role")]
        ['role:created', 'role:updated', 'role:deleted']
        """
        return [kind for kind in cls if kind.namespace == namespace]

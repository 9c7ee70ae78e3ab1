from topology.app.application.tasks.cache import init_cache
from topology.app.application.tasks.connection import (
    close_channel,
    close_channels,
    close_connection,
    connect,
    create_channel,
    create_channels,
)
from topology.app.application.tasks.topology import (
    apply_bindings,
    assert_exchanges,
    assert_queues,
    check_exchanges,
    check_queues,
    delete_exchanges,
    delete_queues,
    purge_queues,
)
from topology.app.application.tasks.vhost import (
    bounce_vhost,
    disconnect_vhost,
    forewarn_vhost,
    nuke_vhost,
    purge_vhost,
    shutdown_vhost,
)

__all__ = [
    "apply_bindings",
    "assert_exchanges",
    "assert_queues",
    "bounce_vhost",
    "check_exchanges",
    "check_queues",
    "close_channel",
    "close_channels",
    "close_connection",
    "connect",
    "create_channel",
    "create_channels",
    "delete_exchanges",
    "delete_queues",
    "disconnect_vhost",
    "forewarn_vhost",
    "init_cache",
    "nuke_vhost",
    "purge_queues",
    "purge_vhost",
    "shutdown_vhost",
]

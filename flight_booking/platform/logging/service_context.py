"""
Service context for log lines.

Every instance shares the same backing store, so log lines must say which
instance wrote them.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'flight-booking')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    instance = os.getenv('INSTANCE_ID') or f'{socket.gethostname()}-{os.getpid()}'
    return f'{service_name}@{deploy_env}:{instance}'

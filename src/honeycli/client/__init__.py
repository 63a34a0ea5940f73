"""HTTP client module for honeycli.

Provides :class:`SyncClient`, a blocking client backed by
:class:`httpx.Client` that sends one request per call and maps transport
failures to :class:`~honeycli.exceptions.ConnectionError_`, and
:func:`describe_error` for turning API error bodies into diagnostics.

Example::

    from honeycli.client import SyncClient

    with SyncClient(resolved.request) as client:
        response = client.send(request)
"""

from honeycli.client.response import describe_error
from honeycli.client.sync_client import SyncClient

__all__ = ["SyncClient", "describe_error"]

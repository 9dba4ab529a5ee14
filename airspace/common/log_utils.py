"""Logging filters for structured request logs.

- ExtraFieldsFilter: trace id and HTTP request/response fields
- EndpointFilter: drops access-log lines for a noisy path (e.g. /health)
"""

import logging

from airspace.common.tracing import ctx_request, ctx_response, ctx_trace_id


class ExtraFieldsFilter(logging.Filter):
    """Adds ECS-style fields to log records.

    - trace.id: request trace id
    - url.full: full request URL
    - http.request.method / http.response.status_code
    """

    def filter(self, record: logging.LogRecord) -> bool:
        trace_id = ctx_trace_id.get()
        req = ctx_request.get()
        resp = ctx_response.get()

        if trace_id:
            record.trace = {"id": trace_id}

        http = {}
        if req:
            record.url = {"full": req.get("url")}
            http["request"] = {"method": req.get("method")}
        if resp:
            http["response"] = resp
        if http:
            record.http = http

        return True


class EndpointFilter(logging.Filter):
    """Drops records whose message mentions ``path``."""

    def __init__(self, path: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._path = path

    def filter(self, record: logging.LogRecord) -> bool:
        return self._path not in record.getMessage()

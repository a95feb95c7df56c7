import json
import logging

from flask import has_request_context, request

logger = logging.getLogger("audit")


def log_event(action: str, entity=None, entity_id=None, metadata=None):
    ip = None
    if has_request_context():
        ip = request.headers.get("X-Forwarded-For", request.remote_addr)

    logger.info(
        "%s entity=%s entity_id=%s ip=%s metadata=%s",
        action,
        entity,
        str(entity_id) if entity_id is not None else None,
        ip,
        json.dumps(metadata, default=str) if metadata else None,
    )

# Middleware package init
"""
Mnemosyne Backend — Middleware Package
========================================

Middleware Chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    1. Rate Limit first: abusive clients are rejected before any work is done
    2. Request ID: correlation id stored in a ContextVar for every log line
    3. Access Log: one line per request with status and duration

Responses travel the chain in reverse, so the request id header is set and
the duration is measured after the route has produced its response.
"""

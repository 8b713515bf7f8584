"""
Grievance Portal Backend — Middleware Package
==============================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Rate Limit] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: one access-log line per request, with status and duration
    3. Rate Limit: throttles anonymous submissions before any database work
"""

# Middleware package init
"""
Hospeda Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Rate Limit] → [Timeout] → [Actor] → Route

    1. Request ID first so every later log line and error body carries it
    2. Logging measures the full duration, including rejected requests
    3. Rate Limit rejects abusive clients before any database work
    4. Timeout bounds the time spent in the route (504 on expiry)
    5. Actor resolves the caller identity from gateway headers
"""

"""
API orchestration boundary for the handoff parser.

Design intent:
- Expose thin, typed endpoints over the parsing core.
- Own request-layer concerns (caching, timeouts) outside the pure core.
"""

"""
Template rendering boundary for the handoff parser.

Design intent:
- Fill plain-text note templates from extracted patient fields.
- Keep wall-clock reads behind an injectable clock.
"""

"""
Field and signal extraction boundary for the handoff parser.

Design intent:
- Keep every extractor an isolated pure function over section lines.
- Return empty values on no match so partial documents still render.
"""

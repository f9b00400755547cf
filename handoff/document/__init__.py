"""
Document structure boundary for the handoff parser.

Design intent:
- Split raw handoff text into header-delimited patient sections.
- Derive patient identity from header lines without touching body heuristics.
"""

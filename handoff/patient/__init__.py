"""
Patient projection boundary for the handoff parser.

Design intent:
- Combine section-level extractors into per-patient records and dashboard rows.
- Recompute everything per call; no document state is held here.
"""

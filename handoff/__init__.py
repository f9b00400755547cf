"""
Handoff document parser package.

Design intent:
- Turn one free-text clinical handoff document into per-patient structure.
- Keep domain modules (document/extract/patient/note) pure and independently testable.
"""

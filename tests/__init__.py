"""
Test package.

External collaborators (ledger, content store, gateway, session guard) are
replaced by in-memory fakes from ``tests/unit/conftest.py``; no test touches
an external host.
"""

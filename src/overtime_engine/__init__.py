"""Overtime request lifecycle engine.

Approval routing, submission-window checks, statutory overtime pay and
holiday calendar consolidation for OT claims.
"""

__version__ = "1.0.0"

"""
tokenkeeper.auth

Token lifecycle core.

Responsibilities:
- Claim construction, signing and verification.
- Issuance, renewal and validation through `TokenService`.
- The credential resolver boundary.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package logs; the host layer decides what to record.

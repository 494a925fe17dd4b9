"""
Gatekeeper - Credential brokering for a Vault-compatible secrets backend

Decides who a caller is and what tokens minted for them may do.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- vault: Backend request helpers, login executor and error types
- unsealer: Credential methods (token, app-id, github, userpass)
- policy: Identity to policy cache with wildcard and default fallback
"""

__version__ = "1.0.0"

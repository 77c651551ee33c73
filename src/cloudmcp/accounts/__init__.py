"""Account registry: tenants, their clients, and the current-account switch."""

from cloudmcp.accounts.registry import Account, AccountRegistry, verify_credential

__all__ = ["Account", "AccountRegistry", "verify_credential"]

from .account_domain import AccountService

__all__ = ["AccountService"]

from .jwt import get_current_owner, verify_token

__all__ = ["get_current_owner", "verify_token"]

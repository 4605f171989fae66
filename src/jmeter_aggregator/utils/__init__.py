from .functions import safe_divide, safe_rate

__all__ = ["safe_divide", "safe_rate"]

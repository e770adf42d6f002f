"""
OpenAPI document access.
"""

from .loader import ApiSpec, OperationSpec, ParameterSpec

__all__ = ["ApiSpec", "OperationSpec", "ParameterSpec"]

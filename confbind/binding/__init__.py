"""Binding capabilities.

Two generations of capability that strategies delegate to:
- RelaxedPropertyResolver: legacy flat sub-property lookup
- Binder: modern typed binding into pydantic-validated targets
"""

from confbind.binding.binder import Binder, BindResult
from confbind.binding.names import PropertyNameError, nest, parse_name
from confbind.binding.relaxed import RelaxedPropertyResolver

__all__ = [
    "Binder",
    "BindResult",
    "PropertyNameError",
    "RelaxedPropertyResolver",
    "nest",
    "parse_name",
]

"""
Integrations with third-party libraries like Pydantic.
"""

from .pydantic import from_dataclass, PydanticMT101Page

__all__ = ["from_dataclass", "PydanticMT101Page"]

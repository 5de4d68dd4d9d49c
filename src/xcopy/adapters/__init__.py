"""External integration adapters.

Provides the primitive converter protocol and its pydantic implementation.

Usage:
    from xcopy.adapters import Converter, PydanticConverter

    converter: Converter = PydanticConverter()
"""

from xcopy.adapters.protocol import Converter
from xcopy.adapters.pydantic import PydanticConverter

__all__ = [
    # Protocols
    "Converter",
    # Implementations
    "PydanticConverter",
]

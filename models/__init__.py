# models/__init__.py
from .material import Material

__all__ = [
    "Material",
]

"""Python implementation of the raytracer's geometric primitives.

This package provides the kind-aware 4-component Tuple that later rendering
stages build on, with:
- Point/vector/color constructors
- Kind-aware addition, subtraction and negation
- Epsilon-based approximate equality
- Taichi kernel equivalents and batched numpy entry points

Subpackages:
    core: Tuple type, Taichi tuple functions, and batch operations
    config: Taichi backend selection and initialization
"""

__version__ = "0.1.0"

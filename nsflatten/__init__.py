"""
nsflatten - Namespaced global JavaScript to CommonJS converter

Rewrites legacy modules that declare classes on shared namespace objects
(``my.name.space.Widget = function() {}``) into CommonJS modules that require
their dependencies and export their class.
"""

__version__ = "0.1.0"

# Only expose version by default - everything else is lazy loaded
__all__ = [
    "__version__",
    # Main API
    "NamespaceFlattener",
    "ConversionResult",
    "NsFlattenConfig",
    "load_config",
    # Transforms
    "RootNamespaceTransform",
    "TransformPipeline",
]


def __getattr__(name):
    """Lazy loading of main API classes to prevent heavy imports at module level."""
    if name in {"NamespaceFlattener", "ConversionResult"}:
        from .api import NamespaceFlattener, ConversionResult

        return {
            "NamespaceFlattener": NamespaceFlattener,
            "ConversionResult": ConversionResult,
        }[name]

    if name in {"NsFlattenConfig", "load_config"}:
        from .config import NsFlattenConfig, load_config

        return {"NsFlattenConfig": NsFlattenConfig, "load_config": load_config}[name]

    if name in {"RootNamespaceTransform", "TransformPipeline"}:
        from . import transforms

        return getattr(transforms, name)

    raise AttributeError(f"module 'nsflatten' has no attribute '{name}'")

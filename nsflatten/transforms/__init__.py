"""
Transforms module for nsflatten

Provides the module rewriting passes:
- Root namespace flattening into CommonJS requires
- Namespaced class constructor flattening
- Single member expression flattening
- Requires for library globals
- The per-file transform pipeline and file executor
"""

__all__ = [
    "RootNamespaceTransform",
    "TransformReport",
    "NamespacedClassFlattener",
    "FlattenMemberExpression",
    "AddRequireForGlobalIdentifier",
    "TransformPipeline",
    "PipelineResult",
    "ConversionExecutor",
    # Naming helpers
    "is_constant_name",
    "is_class_like_name",
    "unique_module_variable_id",
]


def __getattr__(name: str):
    if name in {"RootNamespaceTransform", "TransformReport"}:
        from .root_namespace import RootNamespaceTransform, TransformReport

        return {
            "RootNamespaceTransform": RootNamespaceTransform,
            "TransformReport": TransformReport,
        }[name]

    if name == "NamespacedClassFlattener":
        from .namespaced_class import NamespacedClassFlattener

        return NamespacedClassFlattener

    if name == "FlattenMemberExpression":
        from .flatten_member_expression import FlattenMemberExpression

        return FlattenMemberExpression

    if name == "AddRequireForGlobalIdentifier":
        from .global_require import AddRequireForGlobalIdentifier

        return AddRequireForGlobalIdentifier

    if name in {"TransformPipeline", "PipelineResult"}:
        from .pipeline import TransformPipeline, PipelineResult

        return {"TransformPipeline": TransformPipeline, "PipelineResult": PipelineResult}[name]

    if name == "ConversionExecutor":
        from .executor import ConversionExecutor

        return ConversionExecutor

    if name in {"is_constant_name", "is_class_like_name", "unique_module_variable_id"}:
        from .naming import is_constant_name, is_class_like_name, unique_module_variable_id

        return {
            "is_constant_name": is_constant_name,
            "is_class_like_name": is_class_like_name,
            "unique_module_variable_id": unique_module_variable_id,
        }[name]

    raise AttributeError(name)

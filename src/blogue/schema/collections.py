"""Content collection discovery for config sources.

Finds every `defineCollection({...})` binding in a parsed module, applies
the `export const collections = {...}` mapping, and runs each schema
through the evaluator and extractor. One broken collection never takes
the others down with it.
"""

from dataclasses import dataclass, field

from loguru import logger

from blogue.schema.ast import (
    ArrowFunction,
    CallExpression,
    ExpressionNode,
    Identifier,
    ModuleNode,
    ObjectExpression,
    StringLiteral,
)
from blogue.schema.errors import SchemaError
from blogue.schema.evaluator import HELPER_NAMES, SchemaEvaluator
from blogue.schema.extractor import extract_fields
from blogue.schema.model import Collection, FieldModel
from blogue.schema.parser import SchemaParser

ZOD_MODULES = frozenset({"astro:content", "astro/zod", "zod", "astro:schema"})
HELPER_MODULES = frozenset({"astro:content", "astro:assets"})
COLLECTION_KINDS = frozenset({"content", "data"})


@dataclass
class CollectionDefinition:
    """A `defineCollection` call located in the module."""

    binding: str
    kind: str
    schema: ExpressionNode | None
    # local name -> helper ("image", "reference"); "" binds the whole helper argument
    helpers: dict[str, str] = field(default_factory=dict)


@dataclass
class SchemaAnalysis:
    """Collections found in one config source."""

    collections: list[Collection] = field(default_factory=list)
    success: bool = False
    message: str = ""
    warnings: list[str] = field(default_factory=list)

    def get(self, name: str) -> Collection | None:
        return next((c for c in self.collections if c.name == name), None)


def find_collection_definitions(module: ModuleNode) -> dict[str, CollectionDefinition]:
    """Map public collection name -> definition.

    When the module exports a `collections` object, its keys are the public
    names and bindings it leaves out are dropped. Without one, every
    `defineCollection` binding is public under its own name.
    """
    define_names = {"defineCollection"} | {
        local for local, (_, imported) in module.imports.items() if imported == "defineCollection"
    }
    import_helpers = {
        local: imported
        for local, (source, imported) in module.imports.items()
        if source in HELPER_MODULES and imported in HELPER_NAMES
    }

    definitions: dict[str, CollectionDefinition] = {}
    for name, binding in module.bindings.items():
        init = binding.init
        if not (
            isinstance(init, CallExpression)
            and isinstance(init.callee, Identifier)
            and init.callee.name in define_names
            and init.arguments
        ):
            continue

        config = _resolve(init.arguments[0], module)
        if not isinstance(config, ObjectExpression):
            logger.debug(f"Collection '{name}' config is not an object literal, skipping")
            continue

        kind_node = config.get("type")
        kind = "content"
        if isinstance(kind_node, StringLiteral) and kind_node.value in COLLECTION_KINDS:
            kind = kind_node.value

        schema = config.get("schema")
        helpers = dict(import_helpers)
        if schema is not None:
            resolved = _resolve(schema, module)
            if isinstance(resolved, ArrowFunction):
                # schema: ({ image }) => z.object({...})
                for local, key in resolved.params.items():
                    if key is None:
                        helpers[local] = ""
                    elif key in HELPER_NAMES:
                        helpers[local] = key
                schema = resolved.body

        definitions[name] = CollectionDefinition(
            binding=name, kind=kind, schema=schema, helpers=helpers
        )

    if module.collection_exports is None:
        return definitions

    exported: dict[str, CollectionDefinition] = {}
    for public_name, binding_name in module.collection_exports.items():
        definition = definitions.get(binding_name)
        if definition is not None:
            exported[public_name] = definition
        else:
            logger.debug(f"Exported collection '{public_name}' has no defineCollection binding")
    return exported


def zod_names(module: ModuleNode) -> set[str]:
    """Local names the Zod namespace is imported under."""
    names = {
        local
        for local, (source, imported) in module.imports.items()
        if source in ZOD_MODULES and imported in ("z", "*", "default")
    }
    return names or {"z"}


def analyze_schema_source(source_text: str) -> SchemaAnalysis:
    """Parse a content config source and extract a field model per collection.

    Never raises: syntax errors yield an unsuccessful analysis, and a
    collection whose schema cannot be evaluated is skipped with a warning.
    """
    try:
        module = SchemaParser.parse(source_text)
    except SchemaError as e:
        logger.warning(f"Could not parse content config: {e}")
        return SchemaAnalysis(success=False, message=f"Failed to parse config: {e}")

    definitions = find_collection_definitions(module)
    if not definitions:
        return SchemaAnalysis(success=False, message="No collections found in config")

    namespaces = zod_names(module)
    collections: list[Collection] = []
    warnings: list[str] = []

    for name, definition in definitions.items():
        if definition.schema is None:
            warning = f"Skipped collection '{name}': no schema declared"
            logger.warning(warning)
            warnings.append(warning)
            continue

        evaluator = SchemaEvaluator(
            helpers=definition.helpers, zod_names=namespaces, bindings=module.bindings
        )
        try:
            shape = evaluator.evaluate_schema(definition.schema)
            fields = extract_fields(shape)
            model = FieldModel(
                fields=fields,
                message=f"Extracted {len(fields)} field(s) from collection '{name}'",
            )
        except (SchemaError, ValueError) as e:
            warning = f"Skipped collection '{name}': {e}"
            logger.warning(warning)
            warnings.append(warning)
            continue

        collections.append(
            Collection(
                name=name,
                kind=definition.kind,
                model=model,
                default_dir=f"src/content/{name}",
            )
        )

    if not collections:
        return SchemaAnalysis(
            success=False, message="No usable collections found in config", warnings=warnings
        )

    return SchemaAnalysis(
        collections=collections,
        success=True,
        message=f"Successfully analyzed {len(collections)} collection(s)",
        warnings=warnings,
    )


def parse_schema_source(source_text: str) -> list[Collection]:
    """Return the collections of a content config source, possibly empty."""
    return analyze_schema_source(source_text).collections


def _resolve(node: ExpressionNode, module: ModuleNode) -> ExpressionNode:
    """Follow identifiers through top-level bindings."""
    seen: set[str] = set()
    while isinstance(node, Identifier) and node.name not in seen:
        binding = module.bindings.get(node.name)
        if binding is None or binding.init is None:
            break
        seen.add(node.name)
        node = binding.init
    return node

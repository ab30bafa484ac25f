"""
Native document-model schemas.

A Schema is the field table of a document model, declared the way
Mongoose-style object modeling layers declare it:

    Schema({
        'title': str,                                     # bare type token
        'tags': [str],                                    # array of a type
        'comments': [{'body': str, 'date': datetime}],    # array of object literals
        'meta': {'votes': int},                           # nested object literal
        'hidden': {'type': bool, 'required': True},       # field options
        'author': {'type': Types.ObjectId, 'ref': 'User'},
        'address': Schema({...}),                         # embedded sub-schema
    })

Each declaration is parsed into a FieldDescriptor once, when it is added to
the schema. Type tokens are kept as declared; resolving them is left to the
converters.
"""

import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from docmodel.common import enum_symbols

logger = logging.getLogger(__name__)

# JSON spelling of an embedded Schema instance
SUBSCHEMA_KEY = '$subschema'


class DocModelError(Exception):
    """
    Exception raised when a document model cannot be read.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, context: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class Types:
    """Named type tokens of the modeling layer."""
    String = 'String'
    Number = 'Number'
    Boolean = 'Boolean'
    Date = 'Date'
    ObjectId = 'ObjectId'
    Buffer = 'Buffer'
    Mixed = 'Mixed'
    Decimal128 = 'Decimal128'
    UUID = 'UUID'


class FieldDescriptor:
    """One declared field of a document model."""

    def __init__(self, type: Any = None, is_array: bool = False,
                 enum_values: Optional[List[Any]] = None, required: bool = False,
                 ref: Optional[str] = None, nested_schema: Optional['Schema'] = None,
                 nested_fields: Optional[Dict[str, 'FieldDescriptor']] = None,
                 item: Optional['FieldDescriptor'] = None) -> None:
        self.type = type
        self.is_array = is_array
        self.enum_values = enum_values
        self.required = required
        self.ref = ref
        self.nested_schema = nested_schema
        self.nested_fields = nested_fields
        self.item = item

    def __repr__(self) -> str:
        attrs = ', '.join(f"{key}={value!r}" for key, value in vars(self).items()
                          if value is not None and value is not False)
        return f"FieldDescriptor({attrs})"


class Schema:
    """Ordered field table of a document model."""

    def __init__(self, definition: Optional[Dict[str, Any]] = None) -> None:
        self._fields: Dict[str, FieldDescriptor] = {}
        if definition is not None:
            self.add(definition)

    def add(self, definition: Dict[str, Any]) -> 'Schema':
        """Add the field declarations of a definition mapping."""
        if not isinstance(definition, dict):
            raise DocModelError(
                f"Schema definition must be a mapping of field names, got {type(definition).__name__}")
        for name, declaration in definition.items():
            self._fields[str(name)] = parse_declaration(declaration)
        return self

    def path(self, name: str) -> Optional[FieldDescriptor]:
        return self._fields.get(name)

    def fields(self) -> Iterator[Tuple[str, FieldDescriptor]]:
        """Iterate (name, descriptor) pairs in declaration order."""
        return iter(list(self._fields.items()))

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __repr__(self) -> str:
        return f"Schema({', '.join(self._fields)})"


def is_field_options(declaration: Dict[str, Any]) -> bool:
    """
    Tell field options ({'type': String, 'required': True}) apart from a
    nested object literal.

    A mapping is a nested literal when it has no 'type' key, or when its
    'type' value is itself a declaration carrying a 'type' (a nested field
    that happens to be named 'type').
    """
    if 'type' not in declaration:
        return False
    declared_type = declaration['type']
    return not (isinstance(declared_type, dict) and 'type' in declared_type)


def parse_declaration(declaration: Any) -> FieldDescriptor:
    """Parse one field declaration into a FieldDescriptor."""
    if isinstance(declaration, Schema):
        return FieldDescriptor(nested_schema=declaration)
    if isinstance(declaration, (list, tuple)):
        if len(declaration) > 1:
            logger.debug("Array declaration with %d element shapes, using the first", len(declaration))
        item = parse_declaration(declaration[0]) if declaration else None
        return FieldDescriptor(is_array=True, item=item)
    if isinstance(declaration, dict):
        if not declaration:
            return FieldDescriptor()
        if len(declaration) == 1 and SUBSCHEMA_KEY in declaration:
            return FieldDescriptor(nested_schema=Schema(declaration[SUBSCHEMA_KEY]))
        if is_field_options(declaration):
            return _parse_field_options(declaration)
        return FieldDescriptor(nested_fields={
            str(name): parse_declaration(value) for name, value in declaration.items()
        })
    if declaration is None:
        return FieldDescriptor()
    return FieldDescriptor(type=declaration)


def _parse_field_options(options: Dict[str, Any]) -> FieldDescriptor:
    declared_type = options['type']
    if isinstance(declared_type, (list, tuple, dict, Schema)):
        descriptor = parse_declaration(declared_type)
    else:
        descriptor = FieldDescriptor(type=declared_type)

    descriptor.required = _is_required(options.get('required', False))
    ref = options.get('ref')
    if ref is not None:
        descriptor.ref = ref if isinstance(ref, str) else getattr(ref, '__name__', str(ref))

    enum_values = enum_symbols(options.get('enum'))
    if enum_values is not None:
        # enum on an array declaration constrains its elements
        target = descriptor.item if descriptor.is_array and descriptor.item is not None else descriptor
        target.enum_values = enum_values
    return descriptor


def _is_required(value: Any) -> bool:
    # [True, 'message'] carries a custom validation message
    if isinstance(value, (list, tuple)):
        value = value[0] if value else False
    # conditional requiredness can't be known from the declaration
    if callable(value):
        return False
    return bool(value)


def load_docmodel(content: str, context: Optional[str] = None) -> Schema:
    """
    Parse a JSON document model into a Schema.

    Type tokens are given by name ("String", "ObjectId") and embedded
    sub-schemas are spelled {"$subschema": {...}}.
    """
    try:
        definition = json.loads(content)
    except json.JSONDecodeError as e:
        raise DocModelError(f"Invalid document model: {e}", context=context, cause=e) from e
    if not isinstance(definition, dict):
        raise DocModelError(
            f"Document model root must be an object, got {type(definition).__name__}", context=context)
    return Schema(definition)


def load_docmodel_file(docmodel_file_path: str) -> Schema:
    """Read a JSON document model file into a Schema."""
    with open(docmodel_file_path, 'r', encoding='utf-8') as file:
        content = file.read()
    return load_docmodel(content, context=docmodel_file_path)

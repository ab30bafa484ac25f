"""

Convert a document-model schema to a JSON schema.

"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jsonschema import Draft202012Validator
from jsonschema.validators import validator_for

from docmodel.common import type_token_name, write_text_file
from docmodel.schema import FieldDescriptor, Schema, load_docmodel, load_docmodel_file

logger = logging.getLogger(__name__)

DATE_TIME_FORMAT = 'date-time'

# Canonical native type -> JSON schema primitive kind
NATIVE_TYPE_KINDS: Dict[str, str] = {
    'String': 'string',
    'Number': 'number',
    'Boolean': 'boolean',
    'Date': 'string',
    'ObjectId': 'object',
    'Buffer': 'object',
    'Mixed': 'object',
    'UUID': 'string',
}

# Lower-cased spelling -> canonical native type. Python type constructors
# resolve through their class name (str, int, datetime, Decimal, UUID, ...).
TYPE_ALIASES: Dict[str, str] = {
    'string': 'String',
    'str': 'String',
    'number': 'Number',
    'int': 'Number',
    'int32': 'Number',
    'long': 'Number',
    'float': 'Number',
    'double': 'Number',
    'decimal': 'Number',
    'decimal128': 'Number',
    'boolean': 'Boolean',
    'bool': 'Boolean',
    'date': 'Date',
    'datetime': 'Date',
    'objectid': 'ObjectId',
    'buffer': 'Buffer',
    'bytes': 'Buffer',
    'bytearray': 'Buffer',
    'mixed': 'Mixed',
    'object': 'Mixed',
    'dict': 'Mixed',
    'map': 'Mixed',
    'any': 'Mixed',
    'uuid': 'UUID',
}


def register_type_alias(alias: str, canonical: str) -> None:
    """Teach the normalizer another spelling of a known native type."""
    if canonical not in NATIVE_TYPE_KINDS:
        raise ValueError(f"Unknown native type: {canonical}")
    TYPE_ALIASES[alias.lower()] = canonical


def canonical_type_name(token: Any) -> Optional[str]:
    """Resolve a type token to its canonical native type name, or None if unrecognized."""
    name = type_token_name(token)
    if not name:
        return None
    return TYPE_ALIASES.get(name.lower())


def normalize_type(token: Any) -> str:
    """
    Map a native type token to a JSON schema primitive kind.

    Returns one of 'string', 'number', 'boolean' or 'object'. Dates map to
    'string'; identifier references and unrecognized tokens map to 'object'.
    """
    canonical = canonical_type_name(token)
    if canonical is None:
        logger.debug("Unrecognized type token %r, falling back to 'object'", token)
        return 'object'
    return NATIVE_TYPE_KINDS[canonical]


class DocModelToJsonSchemaConverter:
    """
    Walks the field table of a document model and emits JSON schema nodes.

    Every object node gets its own 'properties' and 'required' lists, built
    from that level's direct fields only.
    """

    def translate(self, schema: Schema | Dict[str, Any]) -> Dict[str, Any]:
        """Translate a whole schema into an object node."""
        if not isinstance(schema, Schema):
            schema = Schema(schema)
        return self.translate_fields(schema.fields())

    def translate_fields(self, fields: Iterable[Tuple[str, FieldDescriptor]]) -> Dict[str, Any]:
        """Translate a field table into an object node."""
        properties: Dict[str, Any] = {}
        required: List[str] = []
        for name, descriptor in fields:
            properties[name] = self.translate_field(descriptor)
            if descriptor.required:
                required.append(name)

        json_schema: Dict[str, Any] = {
            'type': 'object',
            'properties': properties
        }
        if required:
            json_schema['required'] = required
        return json_schema

    def translate_field(self, descriptor: FieldDescriptor) -> Dict[str, Any]:
        """Translate a single field descriptor."""
        if descriptor.nested_schema is not None:
            return self.translate(descriptor.nested_schema)
        if descriptor.is_array:
            return self.translate_array(descriptor)
        if descriptor.nested_fields is not None:
            return self.translate_fields(descriptor.nested_fields.items())
        return self.translate_leaf(descriptor)

    def translate_array(self, descriptor: FieldDescriptor) -> Dict[str, Any]:
        """
        Translate an array declaration. The element shape (type token, object
        literal or sub-schema) goes into a single 'items' node.
        """
        if descriptor.item is None:
            items: Dict[str, Any] = {'type': 'object'}
        else:
            items = self.translate_field(descriptor.item)
        return {
            'type': 'array',
            'items': items
        }

    def translate_leaf(self, descriptor: FieldDescriptor) -> Dict[str, Any]:
        """Translate a field declared with a type token, or with no type at all."""
        canonical = canonical_type_name(descriptor.type)
        if canonical == 'ObjectId' or (descriptor.ref and descriptor.type is None):
            # references are exposed as opaque identifiers
            json_type: Dict[str, Any] = {'type': 'string'}
        elif descriptor.type is None:
            logger.debug("Untyped field, emitting an opaque object")
            json_type = {'type': 'object'}
        else:
            json_type = {'type': normalize_type(descriptor.type)}

        if canonical == 'Date':
            json_type['format'] = DATE_TIME_FORMAT
        if descriptor.enum_values:
            json_type['enum'] = list(descriptor.enum_values)
        return json_type


def translate(schema: Schema | Dict[str, Any]) -> Dict[str, Any]:
    """Translate a document-model schema into a JSON schema object node."""
    return DocModelToJsonSchemaConverter().translate(schema)


def extract_fields(schema: Schema | Dict[str, Any]) -> List[Dict[str, Any]]:
    """List the top-level properties of the translated schema as {'field': name, ...node} entries."""
    json_schema = translate(schema)
    return [{'field': name, **node} for name, node in json_schema['properties'].items()]


def build_json_schema_document(schema: Schema, title: Optional[str] = None,
                               schema_uri: Optional[str] = None,
                               check_schema: bool = True) -> Dict[str, Any]:
    """
    Translate a schema into a standalone JSON schema document.

    :param schema: The document-model schema.
    :param title: Optional title for the root node.
    :param schema_uri: Optional $schema URI for the root node.
    :param check_schema: Check the result against the JSON schema metaschema.
    """
    document: Dict[str, Any] = {}
    if schema_uri:
        document['$schema'] = schema_uri
    if title:
        document['title'] = title
    document.update(translate(schema))

    if check_schema:
        validator_class = validator_for(document, default=Draft202012Validator)
        validator_class.check_schema(document)
    return document


def convert_docmodel_to_json_schema_string(docmodel_content: str, title: Optional[str] = None,
                                           schema_uri: Optional[str] = None,
                                           check_schema: bool = True) -> str:
    """
    Convert a JSON document model string to a JSON schema string.

    :param docmodel_content: The document model as a JSON string.
    :param title: Optional title for the root node.
    :param schema_uri: Optional $schema URI for the root node.
    :param check_schema: Check the result against the JSON schema metaschema.
    :return: The JSON schema document as a string.
    """
    schema = load_docmodel(docmodel_content)
    document = build_json_schema_document(schema, title, schema_uri, check_schema)
    return json.dumps(document, indent=4)


def convert_docmodel_to_json_schema(docmodel_file_path: str, json_schema_file_path: str,
                                    title: Optional[str] = None, schema_uri: Optional[str] = None,
                                    check_schema: bool = True) -> None:
    """
    Convert a JSON document model file to a JSON schema file.

    :param docmodel_file_path: The path to the input document model file.
    :param json_schema_file_path: The path to the output JSON schema file.
    :param title: Optional title for the root node.
    :param schema_uri: Optional $schema URI for the root node.
    :param check_schema: Check the result against the JSON schema metaschema.
    """
    if not docmodel_file_path:
        raise ValueError("Document model file path is required.")

    schema = load_docmodel_file(docmodel_file_path)
    document = build_json_schema_document(schema, title, schema_uri, check_schema)
    write_text_file(json_schema_file_path, json.dumps(document, indent=4))
    logger.info("Converted %s (%d fields) to %s", docmodel_file_path, len(schema), json_schema_file_path)

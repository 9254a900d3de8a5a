from .schema import FieldType, ResourceData, SchemaField, requires_replacement
from .table import RESOURCE_TYPE as TABLE_RESOURCE_TYPE
from .table import TABLE_SCHEMA, TableResource

__all__ = [
    'FieldType',
    'ResourceData',
    'SchemaField',
    'requires_replacement',
    'TABLE_RESOURCE_TYPE',
    'TABLE_SCHEMA',
    'TableResource',
]

'''Election snapshots as JSON-ready dictionaries.

The hosting environment stores election state between calls; this module
defines the format. A snapshot is built from four kinds of values:

-   plain JSON values (strings, numbers, booleans and None), with enum
    members such as :class:`~voteflow.phase.Phase` stored by their value,
-   records, i.e. dataclasses decorated with :func:`simple_serialization`
    and objects with their own ``to_dict()``, stored as dictionaries with
    a ``class`` key naming the class within this package,
-   dictionaries: keyed by strings they are stored as they are, otherwise
    (account identifiers may be any hashable value) as
    ``{'type': 'dict', 'keys': [...], 'values': [...]}``,
-   tuples as ``{'type': 'tuple', 'items': [...]}`` so that they stay
    hashable when used as account identifiers, and lists as lists.

Only classes defined in this package are ever resolved when restoring.
'''

import dataclasses
import enum
import importlib
from typing import Any, Dict

PACKAGE = 'voteflow'

JSON_ATOMS = (str, int, float, bool, type(None))


def simple_serialization(class_: type) -> type:
    '''A decorator giving a dataclass a ``to_dict()`` snapshot method.

    All dataclass fields are stored under their names, next to the
    ``class`` key.
    '''
    field_names = [field.name for field in dataclasses.fields(class_)]

    def to_dict(self) -> Dict[str, Any]:
        record = {'class': class_path(type(self))}
        record.update(
            (name, serialize_value(getattr(self, name)))
            for name in field_names
        )
        return record

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, JSON_ATOMS):
        return value
    if isinstance(value, tuple):
        return {'type': 'tuple', 'items': [serialize_value(v) for v in value]}
    if isinstance(value, dict):
        if all(isinstance(key, str) for key in value):
            return {key: serialize_value(val) for key, val in value.items()}
        return {
            'type': 'dict',
            'keys': [serialize_value(key) for key in value],
            'values': [serialize_value(val) for val in value.values()],
        }
    if isinstance(value, list):
        return [serialize_value(v) for v in value]
    raise ValueError(f'cannot store {value!r} in a snapshot')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, JSON_ATOMS):
        return value
    if isinstance(value, list):
        return [deserialize_value(v) for v in value]
    if not isinstance(value, dict):
        raise ValueError(f'cannot restore {value!r}, type unknown')
    if 'class' in value:
        return _restore_record(value)
    if value.get('type') == 'tuple':
        return tuple(deserialize_value(v) for v in value['items'])
    if value.get('type') == 'dict':
        if len(value['keys']) != len(value['values']):
            raise ValueError('dict snapshot keys and values differ in length')
        return {
            deserialize_value(key): deserialize_value(val)
            for key, val in zip(value['keys'], value['values'])
        }
    return {key: deserialize_value(val) for key, val in value.items()}


def _restore_record(record: Dict[str, Any]) -> Any:
    params = dict(record)
    cls = resolve_class(params.pop('class'))
    if hasattr(cls, 'from_dict'):
        return cls.from_dict(params)
    return cls(**{
        name: deserialize_value(val) for name, val in params.items()
    })


def resolve_class(path: Any) -> type:
    '''Find a class of this package by its dotted path.

    :raises ValueError: If the path does not name a class of this package.
    '''
    if not isinstance(path, str) or not path.startswith(PACKAGE + '.'):
        raise ValueError(f'refusing to restore unknown class: {path!r}')
    if not all(chunk.isidentifier() for chunk in path.split('.')):
        raise ValueError(f'invalid class path: {path!r}')
    module_name, _, class_name = path.rpartition('.')
    try:
        module = importlib.import_module(module_name)
    except ImportError as err:
        raise ValueError(f'unknown module in class path: {path!r}') from err
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        raise ValueError(f'refusing to restore unknown class: {path!r}')
    return cls


def class_path(cls: type) -> str:
    return f'{cls.__module__}.{cls.__qualname__}'


def from_dict(value: Dict[str, Any]) -> Any:
    """Rebuild an election or a record from its snapshot.

    :param value: A dictionary created by :func:`to_dict`.
    :raises ValueError: If the snapshot is malformed or names a class
        outside of this package.
    """
    if not isinstance(value, dict) or 'class' not in value:
        raise ValueError(f'invalid snapshot, no class given: {value!r}')
    return deserialize_value(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Snapshot an election or a record to a JSON-ready dictionary."""
    return serialize_value(obj)

'''Dictionary serialization of Panchayat records and validators.

Classes decorated with :func:`simple_serialization` gain a ``to_dict()``
method producing a JSON-ready dictionary tagged with the class name, and are
entered into a registry of rebuildable classes. :func:`from_dict` only ever
instantiates classes from that registry, so a dictionary from an untrusted
source cannot name arbitrary callables.
'''

import inspect
from typing import Any, Dict

CLASS_KEY = 'class'
TUPLE_KEY = 'tuple'

SERIALIZABLE_CLASSES: Dict[str, type] = {}
'''Classes that :func:`from_dict` may rebuild, keyed by qualified name.'''


def qualified_name(class_: type) -> str:
    return f'{class_.__module__}.{class_.__qualname__}'


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The dictionary holds the object attributes named like the parameters of
    the class's constructor, so the class must keep its parameters under
    their own names (or list the attribute names in a ``serialize_params``
    class attribute). The class is also registered for :func:`from_dict`.

    :param class_: The class to add the method to.
    '''
    if hasattr(class_, 'serialize_params'):
        param_names = list(class_.serialize_params)
    else:
        param_names = [
            name for name in inspect.signature(class_.__init__).parameters
            if name != 'self'
        ]
    class_name = qualified_name(class_)

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {CLASS_KEY: class_name}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    SERIALIZABLE_CLASSES[class_name] = class_
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, ATOMIC_TYPES):
        return value
    elif isinstance(value, tuple):
        return {TUPLE_KEY: [serialize_value(item) for item in value]}
    elif hasattr(value, 'items') and hasattr(value, 'keys'):
        return {str(key): serialize_value(val) for key, val in value.items()}
    elif isinstance(value, list):
        return [serialize_value(item) for item in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if CLASS_KEY in value:
            return _rebuild(value)
        elif set(value) == {TUPLE_KEY} and isinstance(value[TUPLE_KEY], list):
            return tuple(deserialize_value(item) for item in value[TUPLE_KEY])
        else:
            return {key: deserialize_value(val) for key, val in value.items()}
    elif isinstance(value, ATOMIC_TYPES):
        return value
    elif isinstance(value, list):
        return [deserialize_value(item) for item in value]
    else:
        raise ValueError(f'cannot deserialize {value!r}, type unknown')


def _rebuild(definition: Dict[str, Any]) -> Any:
    class_name = definition[CLASS_KEY]
    try:
        class_ = SERIALIZABLE_CLASSES[class_name]
    except (KeyError, TypeError) as e:
        raise ValueError(
            f'invalid panchayat class def: {class_name!r}, known: '
            + ', '.join(sorted(SERIALIZABLE_CLASSES))
        ) from e
    params = {
        key: deserialize_value(val)
        for key, val in definition.items() if key != CLASS_KEY
    }
    try:
        return class_(**params)
    except TypeError as e:
        raise ValueError(f'invalid parameters for {class_name}: {e}') from e


def from_dict(value: Dict[str, Any]) -> Any:
    """Rebuild a Panchayat object from a JSON-like dictionary.

    :param value: A dictionary created by :func:`to_dict`.
    :raises ValueError: If the dictionary does not define an object of a
        registered Panchayat class.
    """
    if not isinstance(value, dict):
        raise ValueError('invalid panchayat object def: dict expected, '
                         f'got {value!r}')
    elif CLASS_KEY not in value:
        raise ValueError('invalid panchayat object def: must have a class key')
    return _rebuild(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize a Panchayat record or validator to a JSON-ready dictionary."""
    return serialize_value(obj)


ATOMIC_TYPES = (str, int, float, bool, type(None))

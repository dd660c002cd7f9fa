"""
String → declared type conversion for bound option values.

Rules
- None passes through untouched; str is the identity.
- bool accepts true/false, yes/no, on/off, 1/0 (any casing).
- Enum subclasses match a member name (exact, then case-insensitive) or a
  member value given as text.
- list/tuple/set/frozenset, bare or parametrized (list[int]), split on
  commas and convert every element with the item type.
- Any other callable is called with the string (int, float, pathlib.Path, ...).

Every failure is reported as ConversionError (a ValueError) whose message
reads "failed to convert 'x' to int: <reason>".
"""
import builtins
import typing
from enum import Enum

_TRUTHY = frozenset(("true", "yes", "on", "1"))
_FALSY = frozenset(("false", "no", "off", "0"))
_COLLECTIONS = (list, tuple, set, frozenset)


class ConversionError(ValueError):
    def __init__(self, value, type, reason):
        super().__init__(f"failed to convert {value!r} to {typename(type)}: {reason}")
        self.value = value
        self.type = type
        self.reason = reason


def typename(type, /):
    """
    Readable name of a declared type ("int", "list[int]", "Color").
    """
    if typing.get_origin(type) is not None:
        return repr(type).removeprefix("typing.")
    return getattr(type, "__name__", repr(type))


def _convert_bool(value):
    if (folded := value.strip().lower()) in _TRUTHY:
        return True
    if folded in _FALSY:
        return False
    raise ValueError(f"expected one of {", ".join(sorted(_TRUTHY | _FALSY))}")


def _convert_enum(value, type):
    try:
        return type[value]
    except KeyError:
        pass
    for member in type:
        if member.name.lower() == value.lower() or str(member.value) == value:
            return member
    raise ValueError(f"expected one of {", ".join(member.name for member in type)}")


def _convert_collection(value, origin, arguments):
    item = arguments[0] if arguments else str
    if origin is tuple and len(arguments) == 2 and arguments[1] is Ellipsis:
        item = arguments[0]
    elif origin is tuple and len(arguments) > 1:
        words = value.split(",")
        if len(words) != len(arguments):
            raise ValueError(f"expected {len(arguments)} comma separated values")
        return tuple(convert(word, type) for word, type in zip(words, arguments))
    return origin(convert(word, item) for word in value.split(",")) if value else origin()


def convert(value, type=str, /):
    """
    Convert a raw bound value to 'type'.

    Raises
    - ConversionError when the converter refuses the value.
    """
    if value is None or type is str:
        return value
    if not isinstance(value, str):
        raise TypeError("convert() first argument must be a string or None")

    origin = typing.get_origin(type)
    arguments = typing.get_args(type)
    try:
        if type is bool:
            return _convert_bool(value)
        if origin in _COLLECTIONS:
            return _convert_collection(value, origin, arguments)
        if type in _COLLECTIONS:
            return _convert_collection(value, type, ())
        if isinstance(type, builtins.type) and issubclass(type, Enum):
            return _convert_enum(value, type)
        if not callable(type):
            raise TypeError(f"{typename(type)} is not callable")
        return type(value)
    except ConversionError:
        raise
    except Exception as exception:
        raise ConversionError(value, type, exception) from exception


__all__ = (
    "ConversionError",
    "convert",
)

"""
cmdtree command registrations.

A CommandRegistration ties a command path (["root2", "sub1", "sub2"]) to the
options it declares and to an opaque target the host runs once parsing
succeeded. The parser never calls the target; it only hands the registration
back in ParseResult.registration.

Construction
- CommandRegistration("root2", "sub1", options=[...], target=func, ...)
- @registration("root2", "sub1") on a function, optionally stacked with
  @option(...) decorators (see cmdtree.options.option).

Validation happens here, before any parse() call is possible: a registration
without a path, with blank or whitespace-containing segments, or with two
options sharing a name raises TypeError/ValueError immediately.
"""
import re
from collections.abc import Iterable

from rich.text import Text

from .options import CommandOption
from .utils import *
from .utils import SpecType


def _sanitize_path(cls, path, /, *, label="path"):
    """
    Internal: a path is a non-empty sequence of non-blank, whitespace-free words.
    """
    if isinstance(path, str) or not isinstance(path, Iterable):
        raise TypeError(f"{cls.__typename__} {label!r} must be an iterable of strings")

    segments = []
    for segment in path:
        if not isinstance(segment, str):
            raise TypeError(f"{cls.__typename__} {label!r} segments must be strings")
        elif not segment.strip():
            raise ValueError(f"{cls.__typename__} {label!r} segments cannot be blank")
        elif re.search(r"\s", segment):
            raise ValueError(f"{cls.__typename__} {label!r} segment {segment!r} cannot contain whitespace")
        elif segment.startswith("-"):
            raise ValueError(f"{cls.__typename__} {label!r} segment {segment!r} cannot start with a dash")
        segments.append(segment)

    if not segments:
        raise ValueError(f"{cls.__typename__} {label!r} must contain at least one segment")
    return tuple(segments)


def _resolve_option(cls, object, /):
    """
    Internal: accept a CommandOption or anything exposing __option__().
    """
    if isinstance(object, CommandOption):
        return object
    if hasattr(object, "__option__") and callable(object.__option__):
        option = object.__option__()
        if not isinstance(option, CommandOption):
            raise TypeError("__option__() non-option returned")
        return option
    raise TypeError(f"{cls.__typename__} 'options' must only contain command options")


def _sanitize_options(cls, options, /):
    """
    Internal: options keep declaration order and never share a long or short name.
    """
    if isinstance(options, str) or not isinstance(options, Iterable):
        raise TypeError(f"{cls.__typename__} 'options' must be an iterable of command options")

    resolved = []
    longnames, shortnames = set(), set()
    for object in options:
        option = _resolve_option(cls, object)
        if option in resolved:
            raise ValueError(f"{cls.__typename__} 'options' cannot contain the same option twice")
        if conflicts := longnames.intersection(option.longnames):
            raise ValueError(f"{cls.__typename__} option name '--{min(conflicts)}' is declared twice")
        if conflicts := shortnames.intersection(option.shortnames):
            raise ValueError(f"{cls.__typename__} option name '-{min(conflicts)}' is declared twice")
        longnames.update(option.longnames)
        shortnames.update(option.shortnames)
        resolved.append(option)
    return tuple(resolved)


def _sanitize_aliases(cls, aliases, /):
    """
    Internal: aliases are alternative paths, given as strings ("r2 s1") or segment sequences.
    """
    if isinstance(aliases, str) or not isinstance(aliases, Iterable):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of paths")
    return tuple(
        _sanitize_path(cls, alias.split() if isinstance(alias, str) else alias, label="aliases")
        for alias in aliases
    )


def _sanitize_text(cls, object, name, /):
    """
    Internal: optional human text; Unset becomes None.
    """
    if not isinstance(object, str | Text | Unset | None):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string")
    elif isinstance(object, str) and not (object := object.strip()):
        raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
    return coalesce(object)


class CommandRegistration(metaclass=SpecType):
    """
    Command path + declared options + opaque target.

    Identity and equality follow the path: two registrations for the same
    path compare equal (the command model refuses to hold both).

    Properties
    - path: tuple[str, ...]
    - options: tuple[CommandOption, ...]
    - target: Callable | None (never interpreted by the parser)
    - description, group: str | None
    - hidden: bool
    - aliases: tuple[tuple[str, ...], ...]
    """

    __introspectable__ = (
        "path",
        "options",
        "target",
        "description",
        "group",
        "hidden",
        "aliases",
    )
    __displayable__ = (
        "path",
        "options",
        "aliases",
    )

    def __init__(
            self,
            *path,
            options=(),
            target=None,
            description=Unset,
            group=Unset,
            hidden=False,
            aliases=(),
    ):
        cls = type(self)
        # "root2 sub1" is accepted as a shorthand for ("root2", "sub1")
        if len(path) == 1 and isinstance(path[0], str):
            path = path[0].split()

        if target is not None and not callable(target):
            raise TypeError(f"{cls.__typename__} 'target' must be callable or None")

        self._path = _sanitize_path(cls, path)
        self._options = _sanitize_options(cls, options)
        self._target = target
        self._description = _sanitize_text(cls, description, "description")
        self._group = _sanitize_text(cls, group, "group")
        self._hidden = bool(hidden)
        self._aliases = _sanitize_aliases(cls, aliases)

    @property
    def command(self):
        """
        Space-joined path, as typed by users ("root2 sub1").
        """
        return " ".join(self._path)

    @property
    def paths(self):
        """
        Primary path followed by every alias path.
        """
        return (self._path, *self._aliases)

    def positionals(self):
        """
        Options declaring a position, in ascending position order (stable on ties).
        """
        return sorted(
            (option for option in self._options if option.position is not None),
            key=lambda option: option.position,
        )

    def __call__(self, *args, **kwargs):
        if self._target is None:
            raise TypeError(f"{type(self).__typename__} {self.command!r} has no target")
        return self._target(*args, **kwargs)

    def __registration__(self):
        return self

    def __replace__(self, **changes):
        """
        Return a re-validated copy with some fields replaced (copy.replace support).
        """
        unknown = changes.keys() - set(type(self).__introspectable__)
        if unknown:
            raise TypeError(f"{type(self).__typename__} got unexpected field {min(unknown)!r}")
        fields = {name: getattr(self, "_" + name) for name in type(self).__introspectable__}
        fields |= changes
        return type(self)(*fields.pop("path"), **fields)

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __eq__(self, other):
        if not isinstance(other, CommandRegistration):
            return NotImplemented
        return self._path == other._path

    def __hash__(self):
        return hash(self._path)


def registration(*path, **kwargs):
    """
    Decorator/factory binding a function as the target of a registration.

    Usage
        @registration("root2", "sub1", description="second level")
        @option("--arg1", required=True)
        def sub1(arg1): ...

    The decorated name becomes the CommandRegistration; calling it forwards to
    the original function. Options stacked below (closest to the function) are
    collected from the function's __options__ list and come before any options
    passed explicitly through 'options'.

    Parameters
    - *path: command path segments (or one space-separated string).
    - **kwargs: forwarded to CommandRegistration (options, description, group,
      hidden, aliases).
    """
    if "target" in kwargs:
        raise TypeError("@registration() cannot receive a 'target'; it decorates one")

    @rename("registration")
    def wrapper(target, /):
        if not callable(target):
            raise TypeError("@registration() must be applied to a callable")
        metadata = dict(kwargs)
        metadata["options"] = (*getattr(target, "__options__", ()), *metadata.get("options", ()))
        return CommandRegistration(*path, target=target, **metadata)

    return wrapper


def registrations_of(objects, /):
    """
    Internal: flatten registrations (or objects exposing __registration__()) into a tuple.
    """
    if isinstance(objects, str) or not isinstance(objects, Iterable):
        raise TypeError("registrations must be an iterable of command registrations")

    resolved = []
    for object in objects:
        if not isinstance(object, CommandRegistration):
            if not (hasattr(object, "__registration__") and callable(object.__registration__)):
                raise TypeError("registrations must only contain command registrations")
            object = object.__registration__()
            if not isinstance(object, CommandRegistration):
                raise TypeError("__registration__() non-registration returned")
        resolved.append(object)
    return tuple(resolved)


__all__ = (
    "CommandRegistration",
    "registration",
)

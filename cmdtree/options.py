r"""
cmdtree option specifications.

Overview
- Arity: how many words an option consumes, as a (min, max) pair where
  max=None means unbounded. Presets cover the usual shapes:
  ZERO, ZERO_OR_ONE, EXACTLY_ONE, ZERO_OR_MORE, ONE_OR_MORE.
- CommandOption: a named and/or positional option of a command registration,
  identified by its long names ("--name") and short names ("-n").
- option(...): decorator that stacks a CommandOption onto a command target
  (or onto an already built CommandRegistration).

Metadata (sanitized on construction)
- names: "--long" and/or "-s" spellings; at least one, no duplicates.
  Long names match r"--[^\W\d_][\w-]*", short names are a single letter.
- type: Callable converter or a collection alias such as list[int] (default str).
- required: bool.
- default: Unset | str | None; the raw string bound when the option is absent.
- arity: Unset | Arity | int | "?" | "*" | "+" | (min, max).
- position: Unset | int >= 0; ranks the option among positional slots.
- description/label: Unset | str, non-empty when provided.
- hidden: bool.

Quick example:
    >>> from cmdtree.options import CommandOption, Arity
    >>> CommandOption("--arg1", "-a", type=int, arity=Arity.EXACTLY_ONE, position=0)
    command-option(longnames=('arg1',), shortnames=('a',), type=<class 'int'>, ...)
"""
import re
from collections.abc import Iterable
from typing import NamedTuple

from rich.text import Text

from .utils import *
from .utils import SpecType


class Arity(NamedTuple):
    """
    Inclusive word-count range for an option; max=None means unbounded.
    """
    min: int
    max: int | None

    @classmethod
    def of(cls, source, /):
        """
        Normalize the accepted arity shorthands into an Arity.

        - Arity          → itself
        - int n          → exactly n (n >= 0)
        - "?", "*", "+"  → zero-or-one, zero-or-more, one-or-more
        - (min, max)     → explicit range, max may be None
        """
        if isinstance(source, Arity):
            return source
        if isinstance(source, bool):
            raise TypeError("arity must be an Arity, an integer, a string or a (min, max) pair")
        if isinstance(source, int):
            return cls.of((source, source))
        if isinstance(source, str):
            try:
                return {"?": ZERO_OR_ONE, "*": ZERO_OR_MORE, "+": ONE_OR_MORE}[source]
            except KeyError:
                raise ValueError("arity string must be one of '?', '*', or '+'") from None
        if not isinstance(source, Iterable):
            raise TypeError("arity must be an Arity, an integer, a string or a (min, max) pair")

        try:
            minimum, maximum = source
        except ValueError:
            raise ValueError("arity range must be a (min, max) pair") from None
        if not isinstance(minimum, int) or isinstance(minimum, bool):
            raise TypeError("arity min must be an integer")
        if maximum is not None and (not isinstance(maximum, int) or isinstance(maximum, bool)):
            raise TypeError("arity max must be an integer or None")
        if minimum < 0:
            raise ValueError("arity min must be 0 or more")
        if maximum is not None and maximum < minimum:
            raise ValueError("arity max must be equal or more than min")
        return cls(minimum, maximum)

    @property
    def unbounded(self):
        return self.max is None

    def __repr__(self):
        return "arity(%d..%s)" % (self.min, "*" if self.max is None else self.max)


ZERO = Arity(0, 0)
ZERO_OR_ONE = Arity(0, 1)
EXACTLY_ONE = Arity(1, 1)
ZERO_OR_MORE = Arity(0, None)
ONE_OR_MORE = Arity(1, None)

Arity.ZERO = ZERO
Arity.ZERO_OR_ONE = ZERO_OR_ONE
Arity.EXACTLY_ONE = EXACTLY_ONE
Arity.ZERO_OR_MORE = ZERO_OR_MORE
Arity.ONE_OR_MORE = ONE_OR_MORE



def _sanitize_text(cls, metadata, name, /):
    """
    Internal: optional human text (str | Text | Unset), trimmed and non-empty; Unset becomes None.
    """
    if not isinstance(object := metadata[name], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string")
    elif isinstance(object, str) and not (object := object.strip()):
        raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
    metadata[name] = coalesce(object)


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: split "--long" / "-s" spellings into longnames and shortnames.

    Rules
    - at least one name; each a string matching r"--[^\W\d_][\w-]*" or r"-[^\W\d_]".
    - names are stored without their dashes and in declaration order.
    - duplicates are rejected.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    longnames, shortnames = [], []
    for name in metadata.pop("names"):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"--[^\W\d_][\w-]*", name):
            target = longnames
        elif re.fullmatch(r"-[^\W\d_]", name):
            target = shortnames
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} must look like '--long' or '-s'")
        if name.lstrip("-") in target:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        target.append(name.lstrip("-"))

    metadata["longnames"] = tuple(longnames)
    metadata["shortnames"] = tuple(shortnames)


def _sanitize_binding(cls, metadata, /):
    """
    Internal: validate type/required/default/arity/position.
    """
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(default := metadata["default"], str | None | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")
    metadata["default"] = coalesce(default)

    if metadata["arity"] is not Unset:
        metadata["arity"] = Arity.of(metadata["arity"])

    if not isinstance(position := metadata["position"], int | Unset) or isinstance(position, bool):
        raise TypeError(f"{cls.__typename__} 'position' must be an integer")
    if isinstance(position, int) and position < 0:
        raise ValueError(f"{cls.__typename__} 'position' must be a non-negative integer")
    metadata["position"] = coalesce(position)


class CommandOption(metaclass=SpecType):
    """
    Named and/or positional option specification of a command registration.

    Highlights
    - Identity is the object itself: two specs with equal metadata are still
      different options (results reference the exact spec they bind to).
    - arity stays Unset when not declared; the parser then picks the
      contextual default (see resolve_arity()).
    - default is a raw string, converted with 'type' like any user input.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "longnames",
        "shortnames",
        "type",
        "required",
        "default",
        "arity",
        "position",
        "description",
        "label",
        "hidden",
    )

    def __init__(
            self,
            *names,
            type=str,
            required=False,
            default=Unset,
            arity=Unset,
            position=Unset,
            description=Unset,
            label=Unset,
            hidden=False,
    ):
        metadata = {
            "names": names,
            "type": type,
            "required": bool(required),
            "default": default,
            "arity": arity,
            "position": position,
            "description": description,
            "label": label,
            "hidden": bool(hidden),
        }
        _sanitize_names(CommandOption, metadata)
        _sanitize_binding(CommandOption, metadata)
        _sanitize_text(CommandOption, metadata, "description")
        _sanitize_text(CommandOption, metadata, "label")

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def name(self):
        """
        Display name: "--<first long name>" or "-<first short name>".
        """
        if self._longnames:
            return "--" + self._longnames[0]
        return "-" + self._shortnames[0]

    @property
    def positional(self):
        return self._position is not None

    def resolve_arity(self, *, positional=False, alone=False):
        """
        Return the declared arity, or the contextual default when undeclared.

        - named binding: ZERO for bool options (flags), ZERO_OR_MORE otherwise.
        - positional binding: one word per slot, unbounded when alone.
        """
        if self._arity is not Unset:
            return self._arity
        if positional:
            return ZERO_OR_MORE if alone else ZERO_OR_ONE
        return ZERO if self._type is bool else ZERO_OR_MORE

    def matches(self, name, /, *, casefold=False):
        """
        True when a dashed spelling ("--arg1", "-a") names this option.
        """
        if casefold:
            name = name.lower()
        if name.startswith("--"):
            names = self._longnames
            name = name[2:]
        elif name.startswith("-"):
            names = self._shortnames
            name = name[1:]
        else:
            return False
        return name in (map(str.lower, names) if casefold else names)

    def __option__(self):
        """
        Introspection hook: identify this spec as a CommandOption.
        """
        return self


def option(*args, **kwargs):
    """
    Decorator/factory that attaches a CommandOption to a command.

    Usage
    - Stacked on a target function (collected later by @registration):
        @registration("root4")
        @option("--arg1", required=True)
        def root4(arg1): ...

    - Applied on top of a built registration (returns an updated copy):
        @option("--verbose", "-v", type=bool)
        @registration("root5")
        def root5(verbose): ...

    Options keep top-down declaration order in both forms.
    """
    spec = CommandOption(*args, **kwargs)

    @rename("option")
    def wrapper(target, /):
        if hasattr(target, "__registration__") and callable(target.__registration__):
            registration = target.__registration__()
            return registration.__replace__(options=(spec, *registration.options))
        if not callable(target):
            raise TypeError("@option() must be applied to a callable or a command registration")
        try:
            target.__options__.insert(0, spec)
        except AttributeError:
            target.__options__ = [spec]
        return target

    wrapper.__option__ = lambda: spec
    return wrapper


__all__ = (
    "Arity",
    "CommandOption",
    "option",
)

"""
Parser configuration: independent feature toggles.

Each Feature carries its own default state; a fresh ParserConfig starts from
those defaults and can be tuned fluently:

    >>> config = ParserConfig().disable(Feature.CASE_SENSITIVE_COMMANDS).enable(Feature.ALLOW_DIRECTIVES)
    >>> config.is_enabled(Feature.ALLOW_DIRECTIVES)
    True

Hosts that keep settings in plain mappings (ini/toml/env driven) can use
ParserConfig.of({"case-sensitive-commands": False}); keys are the kebab-case
feature names.

The command model and the lexer take a snapshot (copy) of the config they are
built with, so toggling a config afterwards never changes a built parser.
"""
import copy
from collections.abc import Mapping
from enum import Enum


class Feature(Enum):
    """
    parser features and their default state.

    - CASE_SENSITIVE_COMMANDS: command segments match with exact casing.
    - CASE_SENSITIVE_OPTIONS: option names match with exact casing.
    - ALLOW_DIRECTIVES: "[name]" / "[name:value]" words before the command become directives.
    - IGNORE_DIRECTIVES: when directives are not allowed, drop them silently instead of reporting.
    """
    CASE_SENSITIVE_COMMANDS = ("case-sensitive-commands", True)
    CASE_SENSITIVE_OPTIONS = ("case-sensitive-options", True)
    ALLOW_DIRECTIVES = ("allow-directives", False)
    IGNORE_DIRECTIVES = ("ignore-directives", False)

    def __init__(self, key, default):
        # key: kebab-case name used by ParserConfig.of() mappings
        self.key = key
        self.default = default


class ParserConfig:
    """
    Mutable set of enabled features, seeded from Feature defaults.
    """
    __slots__ = ("_enabled",)

    def __init__(self):
        self._enabled = {feature for feature in Feature if feature.default}

    @classmethod
    def of(cls, mapping, /):
        """
        Build a config from a mapping of feature keys (or Feature members) to booleans.

        Unknown keys raise ValueError, non-boolean values raise TypeError.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError("ParserConfig.of() argument must be a mapping")
        self = cls()
        keys = {feature.key: feature for feature in Feature}
        for key, state in mapping.items():
            if isinstance(key, Feature):
                feature = key
            else:
                try:
                    feature = keys[str(key).strip().lower().replace("_", "-")]
                except KeyError:
                    raise ValueError(f"unknown parser feature {key!r}") from None
            if not isinstance(state, bool):
                raise TypeError(f"parser feature {feature.key!r} must be a boolean")
            self.configure(feature, state)
        return self

    def configure(self, feature, state, /):
        if not isinstance(feature, Feature):
            raise TypeError("parser feature must be a Feature member")
        if state:
            self._enabled.add(feature)
        else:
            self._enabled.discard(feature)
        return self

    def enable(self, feature, /):
        return self.configure(feature, True)

    def disable(self, feature, /):
        return self.configure(feature, False)

    def is_enabled(self, feature, /):
        return feature in self._enabled

    def __copy__(self):
        clone = type(self).__new__(type(self))
        clone._enabled = set(self._enabled)
        return clone

    def __eq__(self, other):
        if not isinstance(other, ParserConfig):
            return NotImplemented
        return self._enabled == other._enabled

    __hash__ = None

    def __repr__(self):
        return "parser-config(%s)" % ", ".join(
            "%s=%r" % (feature.key, feature in self._enabled) for feature in Feature
        )


def snapshot(config, /):
    """
    Internal: copy a config (or build the default one when None is given).
    """
    if config is None:
        return ParserConfig()
    if not isinstance(config, ParserConfig):
        raise TypeError("config must be a ParserConfig")
    return copy.copy(config)


__all__ = (
    "Feature",
    "ParserConfig",
)

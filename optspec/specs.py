r"""
optspec option specifications.

Overview
- OptionKind: FLAG (presence-only, boolean) or VALUE (carries exactly one string).
- OptionSpec: one declared option; its canonical long name, kind, optional
  single-character short form and an optional description.
- OptionSet: an ordered, read-only collection of specs with the three lookups the
  parser needs (exact long name, long-name prefix, short form).
- flag(...) / option(...): factories for FLAG and VALUE specs.

Metadata (sanitized on construction)
- name: str matching r"[^\W\d_](-?[^\W_]+)*", given without leading dashes.
- kind: OptionKind.
- short: Unset | str, a single printable character other than '-' and '='.
- descr: Unset | str | Text (help only), non-empty when provided, None otherwise.

Validation highlights
- Names must be unique within an OptionSet, and so must short forms.
- Specs are immutable: fields are exposed through read-only properties.

Quick example:
    >>> from optspec.specs import OptionSet, flag, option
    >>> specs = OptionSet(
    ...     flag("verbose", "v", "print more"),
    ...     option("output", "o", "write to FILE"),
    ... )
    >>> specs.shorthand("o").name
    'output'
"""
import functools
import operator
import re
from collections.abc import Iterable, Sequence
from enum import Enum
from types import MappingProxyType

from rich.text import Text

from .utils import *


class OptionKind(Enum):
    """
    What an option carries: FLAG is presence-only, VALUE takes one argument.
    """
    FLAG = "flag"
    VALUE = "value"

    def __repr__(self):
        return f"{type(self).__name__}.{self.name}"


class SpecType(type):
    """
    Metaclass that gives specs stable representations and read-only fields.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for messages.
    - Expose every name in __introspectable__ as a read-only property via mirror().
    - Provide __repr__/__rich_repr__ built from those properties.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate OptionSpec metadata in place.

    Raises
    - TypeError: wrong types for name/kind/short/descr.
    - ValueError: empty or malformed name, short form, or description.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid long option name without dashes (unicodes are allowed)")
    metadata["name"] = name

    if not isinstance(metadata["kind"], OptionKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be an option-kind")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str):
        if len(short) != 1:
            raise ValueError(f"{cls.__typename__} 'short' must be a single character")
        elif short in "-=" or short.isspace() or not short.isprintable():
            raise ValueError(f"{cls.__typename__} 'short' cannot be {short!r}")
    metadata["short"] = coalesce(short)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class OptionSpec(metaclass=SpecType):
    """
    One declared option.

    The canonical long name is used both on the command line (--name) and as the
    key of the parse result. The short form, when present, is a one-character
    alias (-n). The description is only for help output; parsing never reads it.

    Properties
    - name, kind, short, descr: read-only mirrors of the sanitized metadata.
    - default: False for flags, None for values.
    """

    __introspectable__ = (
        "name",
        "kind",
        "short",
        "descr",
    )

    def __new__(cls, name, /, kind=OptionKind.FLAG, short=Unset, descr=Unset):
        metadata = {
            "name": name,
            "kind": kind,
            "short": short,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, value in metadata.items():
            object.__setattr__(self, "_" + name, value)
        return self

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__typename__} object is read-only")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__typename__} object is read-only")

    def __eq__(self, other):
        if not isinstance(other, OptionSpec):
            return NotImplemented
        return (self._name, self._kind, self._short, self._descr) == (other._name, other._kind, other._short, other._descr)

    def __hash__(self):
        return hash((self._name, self._kind, self._short))

    @property
    def default(self):
        return False if self._kind is OptionKind.FLAG else None


def flag(name, /, short=Unset, descr=Unset):
    """
    Build a FLAG spec: `--name` / `-s` set it to True, absence leaves it False.
    """
    return OptionSpec(name, OptionKind.FLAG, short, descr)


def option(name, /, short=Unset, descr=Unset):
    """
    Build a VALUE spec: `--name=v`, `--name v`, `-sv`, `-s=v` and `-s v` set it
    to the string v, absence leaves it None.
    """
    return OptionSpec(name, OptionKind.VALUE, short, descr)


class OptionSet(Sequence):
    """
    Ordered, read-only collection of OptionSpec.

    Order only matters for display. Lookups:
    - get(name): exact long name, or None.
    - shorthand(char): short form, or None.
    - expand(candidate): specs whose name has candidate as a proper prefix.

    Raises
    - TypeError: an item is not an OptionSpec.
    - ValueError: two specs share a name or a short form.
    """

    def __init__(self, *specs):
        names = {}
        shorts = {}
        for spec in specs:
            if not isinstance(spec, OptionSpec):
                raise TypeError("option-set items must be option specs")
            if spec.name in names:
                raise ValueError(f"option-set name {spec.name!r} is already in use")
            names[spec.name] = spec
            if spec.short is None:
                continue
            if spec.short in shorts:
                raise ValueError(f"option-set short form {spec.short!r} is already in use")
            shorts[spec.short] = spec

        self._specs = specs
        self._names = MappingProxyType(names)
        self._shorts = MappingProxyType(shorts)

    @classmethod
    def coerce(cls, specs, /):
        """
        Return specs unchanged when it is already an OptionSet, otherwise build
        one from an iterable of OptionSpec.
        """
        if isinstance(specs, cls):
            return specs
        if isinstance(specs, OptionSpec) or not isinstance(specs, Iterable):
            raise TypeError("option-set must be built from an iterable of option specs")
        return cls(*specs)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return type(self)(*self._specs[index])
        return self._specs[index]

    def __len__(self):
        return len(self._specs)

    def __iter__(self):
        return iter(self._specs)

    def __contains__(self, object):
        if isinstance(object, str):
            return object in self._names
        return object in self._specs

    def __eq__(self, other):
        if not isinstance(other, OptionSet):
            return NotImplemented
        return self._specs == other._specs

    def __repr__(self):
        return "option-set(%s)" % ", ".join(map(repr, self._specs))

    def __rich_repr__(self):
        yield from self._specs

    @property
    def names(self):
        return tuple(self._names)

    def get(self, name, /):
        return self._names.get(name)

    def shorthand(self, char, /):
        return self._shorts.get(char)

    def expand(self, candidate, /):
        """
        Every spec whose name strictly extends candidate, in declaration order.
        """
        return tuple(
            spec for spec in self._specs
            if spec.name.startswith(candidate) and spec.name != candidate
        )

    def defaults(self):
        """
        Map every declared name to its kind default (False / None).
        """
        return {spec.name: spec.default for spec in self._specs}


__all__ = (
    "OptionKind",
    "OptionSpec",
    "OptionSet",
    "flag",
    "option",
)

# Keep the metaclass out of star-imports; it is not part of the public API.
del SpecType

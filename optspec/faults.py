"""
optspec faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue the
  parser can report. Codes are grouped by domain so logs and searches stay predictable.
- ParseError / ParseWarning: base types that carry a message plus context options
  and know how to render themselves with rich.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- The message names the offending option exactly as typed (“Unknown option: --outptu”).
- The hint is position-first (“the third argument”) and carries a single clear action.

Integration
- The parser builds a fault with full context (code, token, index, title, hint) and
  hands it to trigger(). Outside shell mode errors are raised and warnings go through
  the warnings machinery; in shell mode both are printed with rich, and errors end the
  process with status 1.
- Hosts customize rendering through __main__: __prog__, __styles__, __codes__, __docs__.
"""
import inspect
import os
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - options (1111x)
      • UNKNOWN_OPTION, AMBIGUOUS_OPTION, FLAG_ASSIGNMENT,
        MISSING_ARGUMENT, COMBINED_VALUE
    - warnings (1211x)
      • EMPTY_INLINE_VALUE

    normalize() lets the host remap codes to custom labels while the numeric
    identity stays fixed.
    """
    # --- option errors (11xxx) ---
    UNKNOWN_OPTION      = 11112
    AMBIGUOUS_OPTION    = 11113
    FLAG_ASSIGNMENT     = 11114
    MISSING_ARGUMENT    = 11117
    COMBINED_VALUE      = 11118

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE  = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    """
    resolve the program label for fault headers: explicit option, then
    __main__.__prog__, then the basename of sys.argv[0].
    """
    if prog := options.get("prog"):
        return prog
    if prog := getattr(__import__("__main__"), "__prog__", None):
        return prog
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "optspec"


def _stacklevel():
    """
    warnings.warn level of the first frame outside this package, so warnings
    point at the caller of parse() rather than at optspec internals.
    """
    package = os.path.dirname(os.path.abspath(__file__))
    frame, level = inspect.currentframe().f_back, 1
    while frame and os.path.dirname(os.path.abspath(frame.f_code.co_filename)) == package:
        frame, level = frame.f_back, level + 1
    return level


class _Fault:
    """
    shared behaviour of errors and warnings: context options, attribute access
    into them, replacement with overrides, and rich rendering.
    """
    __palette__ = {}
    __heading__ = "title"

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        # context options double as attributes (error.code, error.token, ...)
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __rich__(self):
        main = __import__("__main__")

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, type(self).__palette__ | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options.get("code")
        title = self.options.get("title") or type(self).__name__

        header = Text.assemble(
            "[ ",
            text(_program(self.options), styler("prog-name")),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
            " | ",
            text(title.title(), styler(type(self).__heading__)),
            " ]"
        )
        message = text(str(self), styler("message"))
        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left", width=console.width - 4)

        return Group(header, *parts)


class ParseError(_Fault, Exception):
    """
    base class of every terminal parse failure.

    context options (set by the parser)
    - code: FaultCode of the category
    - token: the offending argument, exactly as given
    - index: 1-based position of that argument
    - title, hint: short heading and one actionable sentence
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "error-title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }
    __heading__ = "error-title"

    def __init__(self, message=Unset, /, **options):
        super().__init__(message, **options)
        Exception.__init__(self, str(self))

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)


class UnknownOptionError(ParseError): ...
class AmbiguousOptionError(ParseError): ...
class FlagAssignmentError(ParseError): ...
class MissingArgumentError(ParseError): ...
class CombinedValueError(ParseError): ...


class ParseWarning(_Fault, Warning):
    """
    base class of non-fatal parse diagnostics.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "warning-title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }
    __heading__ = "warning-title"

    def __init__(self, message=Unset, /, **options):
        super().__init__(message, **options)
        Warning.__init__(self, str(self))

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=_stacklevel())
        console.print(self)


class EmptyValueWarning(ParseWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - errors never return: they raise (non-shell) or exit with status 1 (shell).

    typical options
    - prog, shell, fancy, colorful, title, code, hint, token, index, and any other
      context the reporter may want to expose.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParseError",
    "UnknownOptionError",
    "AmbiguousOptionError",
    "FlagAssignmentError",
    "MissingArgumentError",
    "CombinedValueError",
    "ParseWarning",
    "EmptyValueWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)

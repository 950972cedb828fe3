"""
optspec parser: split raw arguments into resolved options and non-options.

What this module provides
- ParseResult: immutable outcome of one parse, the option mapping (every declared
  name present) and the non-option arguments in their original order.
- Parser: a read-only configuration (option set + presentation flags) whose
  parse() runs one synchronous, single-pass scan.
- parse(args, specs): the plain library entry point; failures raise ParseError.
- run(specs, args): the host entry point; failures are printed with rich and the
  process exits with status 1.

Token classification (each argument on its own shape, no permutation)
- "", "-", or anything not starting with '-'   → non-option
- "--name", "--name=value"                     → long option
- "-x", "-xyz", "-xvalue", "-x=value"          → short option

Long options accept any unambiguous prefix of a declared name ("--verb" for
"--verbose"); an exact name always wins over prefixes. A value option takes its
value inline after '=' or from the next argument, unless that argument is missing
or itself looks like an option. Short flags may be combined ("-vq"); a value
option may only lead a short token ("-ofile", "-o=file").

Quick start
    from optspec import OptionSet, flag, option, parse

    specs = OptionSet(flag("verbose", "v"), option("output", "o"))
    result = parse(["-v", "--out=a.txt", "b.txt"], specs)
    result.options       # {'verbose': True, 'output': 'a.txt'}
    result.non_options   # ('b.txt',)
"""
import difflib
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from types import MappingProxyType

from .faults import *
from .specs import OptionKind, OptionSet
from .utils import *


def _optional(token):
    """
    Whether an argument is option-shaped: starts with '-' and is longer than '-'.
    """
    return token.startswith("-") and len(token) > 1


class ParseResult:
    """
    Outcome of a successful parse.

    - options: read-only mapping from every declared name to True/False (flags)
      or a string/None (values).
    - non_options: tuple of the remaining arguments, in original order.
    """

    def __init__(self, options, non_options, /):
        self._options = MappingProxyType(dict(options))
        self._non_options = tuple(non_options)

    @property
    def options(self):
        return self._options

    @property
    def non_options(self):
        return self._non_options

    def __getitem__(self, name):
        return self._options[name]

    def __eq__(self, other):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return dict(self._options) == dict(other._options) and self._non_options == other._non_options

    def __repr__(self):
        return f"parse-result(options={dict(self._options)!r}, non_options={self._non_options!r})"

    def __rich_repr__(self):
        yield "options", dict(self._options)
        yield "non_options", self._non_options


class Parser:
    """
    Read-only parser configuration.

    Parameters
    - specs: OptionSet | Iterable[OptionSpec]
      the declared options; iterables are wrapped into an OptionSet (which
      rejects duplicate names and short forms).
    - prog: Unset | str
      program label used in rendered faults (falls back to __main__.__prog__,
      then to sys.argv[0]).
    - shell: bool
      when True faults are printed with rich and errors exit with status 1;
      when False errors are raised and warnings go through warnings.warn.
    - fancy: bool
      render faults inside a rich Panel.
    - colorful: bool
      render faults with colors.

    No scan state is stored on the instance, so a Parser can be shared freely.

    Under warnings-as-errors (python -W error, or a warnings filter set to
    "error") an empty inline value raises EmptyValueWarning, which is not a
    ParseError.
    """

    def __init__(self, specs, /, *, prog=Unset, shell=False, fancy=False, colorful=True):
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError("parser 'prog' cannot be empty")

        self._specs = OptionSet.coerce(specs)
        self._prog = coalesce(prog)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    @property
    def specs(self):
        return self._specs

    prog = mirror("prog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __repr__(self):
        return f"parser(specs={self._specs!r}, prog={self._prog!r}, shell={self._shell!r})"

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's presentation flags merged in.
        """
        return trigger(
            fault,
            **options,
            prog=self._prog,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
        )

    def _tokenize(self, args):
        """
        normalize the accepted input shapes into a list of arguments.

        - Unset: sys.argv[1:]
        - str: shell-like string, split via shlex.split (unbalanced quotes raise
          shlex's ValueError, not a ParseError)
        - Iterable[str]: used verbatim (empty strings are kept, they are non-options)
        """
        if args is Unset:
            return sys.argv[1:]
        if isinstance(args, str):
            return shlex.split(args)
        if not isinstance(args, Iterable):
            raise TypeError("parse() arguments must be a string or an iterable of strings")
        tokens = list(args)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() arguments must be a string or an iterable of strings")
        return tokens

    def _resolve_long(self, input, token, index):
        """
        find the spec for a long candidate: exact name first, then a unique
        proper-prefix match. zero matches is unknown, several is ambiguous.
        """
        if spec := self._specs.get(input):
            return spec

        matches = self._specs.expand(input)
        if len(matches) == 1:
            return matches[0]

        if not matches:
            suggestions = difflib.get_close_matches(input, self._specs.names, 5)
            try:
                hint = "did you mean '--%s'? check the %s argument" % (suggestions[0], ordinal(index))
            except IndexError:
                hint = "remove the %s argument or declare the option" % ordinal(index)
            return self.trigger(UnknownOptionError(
                "Unknown option: --%s" % input,
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                token=token,
                index=index,
                suggestions=suggestions,
                hint=hint,
                docs=getdoc(FaultCode.UNKNOWN_OPTION)
            ))

        candidates = sorted(spec.name for spec in matches)
        return self.trigger(AmbiguousOptionError(
            "Ambiguous option abbreviation: --%s" % input,
            title="ambiguous option",
            code=FaultCode.AMBIGUOUS_OPTION,
            token=token,
            index=index,
            candidates=candidates,
            hint="spell out the %s argument as one of %s" % (
                ordinal(index),
                ", ".join("'--%s'" % name for name in candidates)
            ),
            docs=getdoc(FaultCode.AMBIGUOUS_OPTION)
        ))

    def _resolve_short(self, char, token, index):
        if spec := self._specs.shorthand(char):
            return spec
        return self.trigger(UnknownOptionError(
            "Option unknown: -%s" % char,
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            token=token,
            index=index,
            suggestions=[],
            hint="remove '%s' from the %s argument" % (char, ordinal(index)),
            docs=getdoc(FaultCode.UNKNOWN_OPTION)
        ))

    def _getvalue(self, input, token, tokens, index):
        """
        take a value option's argument from the next token.

        the next token must exist and must not be option-shaped; otherwise the
        option is missing its argument.
        """
        if not tokens or _optional(tokens[0]):
            return self.trigger(MissingArgumentError(
                "Option requires an argument: %s" % input,
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                token=token,
                index=index,
                hint="pass a value after the %s argument (for example: %s=<value>)" % (ordinal(index), input),
                docs=getdoc(FaultCode.MISSING_ARGUMENT)
            ))
        return tokens.popleft()

    def _warn_empty(self, input, token, index):
        self.trigger(EmptyValueWarning(
            "Empty value for option: %s" % input,
            title="empty inline value",
            code=FaultCode.EMPTY_INLINE_VALUE,
            token=token,
            index=index,
            hint="add a value after '=' in the %s argument (for example: %s=<value>)" % (ordinal(index), input),
            docs=getdoc(FaultCode.EMPTY_INLINE_VALUE)
        ))

    def _parse_long(self, token, tokens, index):
        """
        parse '--name' or '--name=value' into a single (name, value) pair.
        """
        input, separator, value = token[2:].partition("=")
        spec = self._resolve_long(input, token, index)

        if spec.kind is OptionKind.FLAG:
            if separator:
                return self.trigger(FlagAssignmentError(
                    "Option takes no argument: --%s" % input,
                    title="flag cannot take a value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    token=token,
                    index=index,
                    hint="remove everything from '=' in the %s argument (for example: --%s)" % (ordinal(index), input),
                    docs=getdoc(FaultCode.FLAG_ASSIGNMENT)
                ))
            return [(spec.name, True)]

        if not separator:
            value = self._getvalue("--" + input, token, tokens, index)
        elif not value:
            self._warn_empty("--" + input, token, index)
        return [(spec.name, value)]

    def _parse_short(self, token, tokens, index):
        """
        parse '-x...' into one or more (name, value) pairs.

        a leading flag turns the rest of the token into more flags; a leading
        value option takes the rest of the token (after an optional '=') or the
        next argument.
        """
        spec = self._resolve_short(token[1], token, index)

        if spec.kind is OptionKind.VALUE:
            if len(token) == 2:
                value = self._getvalue(token, token, tokens, index)
            elif token[2] == "=":
                if not (value := token[3:]):
                    self._warn_empty(token[:2], token, index)
            else:
                value = token[2:]
            return [(spec.name, value)]

        pairs = [(spec.name, True)]
        for char in token[2:]:
            spec = self._resolve_short(char, token, index)
            if spec.kind is OptionKind.VALUE:
                return self.trigger(CombinedValueError(
                    "Option needs an argument: -%s" % char,
                    title="value option inside combined flags",
                    code=FaultCode.COMBINED_VALUE,
                    token=token,
                    index=index,
                    hint="move '-%s' into its own argument, apart from the %s argument" % (char, ordinal(index)),
                    docs=getdoc(FaultCode.COMBINED_VALUE)
                ))
            pairs.append((spec.name, True))
        return pairs

    def parse(self, args=Unset, /):
        """
        Run one parse and return a ParseResult.

        phases
        - scan: classify each argument by its own shape; option tokens resolve to
          (name, value) pairs in encounter order and may consume the next argument.
        - fold: start from every declared default and apply the pairs in order,
          so the last occurrence of an option wins.

        failures
        - the first problem in left-to-right order is triggered: raised as a
          ParseError subclass (shell=False) or printed before exiting (shell=True).
          nothing is returned in that case.
        - a string with unbalanced quotes fails in shlex.split with ValueError
          before scanning starts; it is never reported as a ParseError.
        """
        tokens = deque(self._tokenize(args))
        total = len(tokens)

        pairs = []
        non_options = []
        while tokens:
            token = tokens.popleft()
            index = total - len(tokens)

            if token.startswith("--") and len(token) > 2:
                pairs.extend(self._parse_long(token, tokens, index))
            elif _optional(token):
                pairs.extend(self._parse_short(token, tokens, index))
            else:
                non_options.append(token)

        options = self._specs.defaults()
        options.update(pairs)
        return ParseResult(options, non_options)


def parse(args, specs, /):
    """
    Parse args against specs and return a ParseResult.

    Raises
    - UnknownOptionError, AmbiguousOptionError, FlagAssignmentError,
      MissingArgumentError, CombinedValueError (all ParseError).
    - TypeError / ValueError for malformed inputs or option sets.
    - ValueError from shlex.split when args is a string with unbalanced quotes.
    """
    return Parser(specs).parse(args)


def run(specs, args=Unset, /, **options):
    """
    Host entry point: parse args (sys.argv[1:] when omitted) in shell mode.

    Faults are rendered on stderr with rich; errors exit with status 1.
    Keyword options (prog, fancy, colorful, shell) are forwarded to Parser.
    """
    return Parser(specs, **{"shell": True} | options).parse(args)


__all__ = (
    "ParseResult",
    "Parser",
    "parse",
    "run",
)

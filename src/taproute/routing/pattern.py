"""Rule template compilation.

Turns a rule template such as ``users/{id}/posts.{format?}`` plus per-name
constraints into an anchored regular expression and a prefix table.

Optional placeholders that directly follow a ``/``, ``-`` or ``.`` absorb
that separator into their capture group, so ``users/{format?}`` matches
both ``users`` and ``users/json``. The separator is stripped from the
captured value again at match time.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from taproute.errors import PatternError

DEFAULT_FRAGMENT = r"\w+"

# Literal separators escaped before any placeholder substitution
SEPARATORS: tuple[str, ...] = ("/", "-", ".")

_TOKEN = re.compile(r"{(\w+)\??}")


def _escape(rule: str) -> str:
    for separator in SEPARATORS:
        rule = rule.replace(separator, "\\" + separator)
    return rule


def _substitute(pattern: str, name: str, fragment: str, prefixes: dict[str, str]) -> str:
    """Replace the token for *name* with a named capture group."""
    optional = "{" + name + "?}"
    for separator in SEPARATORS:
        token = "\\" + separator + optional
        if token in pattern:
            prefixes[name] = separator
            return pattern.replace(token, f"(?P<{name}>(\\{separator}{fragment})?)")
    if optional in pattern:
        return pattern.replace(optional, f"(?P<{name}>({fragment})?)")
    return pattern.replace("{" + name + "}", f"(?P<{name}>{fragment})")


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """An anchored matcher built once from a rule and its constraints."""

    rule: str
    source: str
    regex: re.Pattern[str]
    constraints: Mapping[str, str] = field(default_factory=dict)
    prefixes: Mapping[str, str] = field(default_factory=dict)

    def match(self, path: str) -> dict[str, str] | None:
        """Match *path* (leading ``/`` already stripped) against the rule.

        Returns the captured parameters, or ``None`` when the path does not
        match. Values captured for prefixed optional parameters have every
        leading separator character removed, so a raw ``///x`` becomes ``x``.
        """
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        arguments: dict[str, str] = {}
        for name, value in m.groupdict().items():
            value = value or ""
            prefix = self.prefixes.get(name)
            arguments[name] = value.lstrip(prefix) if prefix else value
        return arguments


def compile_rule(rule: str, constraints: Mapping[str, str] | None = None) -> CompiledPattern:
    """Compile a rule template into a :class:`CompiledPattern`.

    Explicit *constraints* are substituted first; every placeholder left
    untouched afterwards falls back to ``\\w+``. Character classes are
    ASCII-only.

    Raises ``PatternError`` if the assembled expression is not valid,
    e.g. a malformed constraint fragment or a repeated placeholder name.
    """
    constraints = dict(constraints or {})
    prefixes: dict[str, str] = {}
    pattern = _escape(rule)

    for name, fragment in constraints.items():
        pattern = _substitute(pattern, name, fragment, prefixes)

    # Names come from the template itself so quantifiers such as ``\d{2}``
    # inside constraint fragments are never mistaken for placeholders.
    for name in dict.fromkeys(_TOKEN.findall(rule)):
        if name not in constraints:
            pattern = _substitute(pattern, name, DEFAULT_FRAGMENT, prefixes)

    source = f"^{pattern}$"
    try:
        regex = re.compile(source, re.ASCII)
    except (re.error, OverflowError, RecursionError) as exc:
        raise PatternError(rule, source, str(exc)) from exc

    return CompiledPattern(
        rule=rule,
        source=source,
        regex=regex,
        constraints=MappingProxyType(constraints),
        prefixes=MappingProxyType(prefixes),
    )

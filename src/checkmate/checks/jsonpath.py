"""
kubectl-style JSONPath templates.

A template mixes literal text with `{...}` actions, as in
`kubectl get -o jsonpath='{.status.phase}'`. Each action holds a JSONPath
expression relative to the document root (`.a.b`, `.items[0].name`,
`.items[*].name`) or a quoted string literal. Expressions are evaluated
with jsonpath-ng; multiple matches are joined with a space. Strings render
as-is, every other value renders as JSON.

Flow-control actions (`range`, `end`) are not supported.
"""

import json
from dataclasses import dataclass
from typing import Any, Union

from jsonpath_ng.jsonpath import JSONPath
from jsonpath_ng.exceptions import JSONPathError as JsonPathLibraryError
from jsonpath_ng.ext import parse as jsonpath_parse

from checkmate.checks.exceptions import JSONPathExpressionError, JSONPathNotFound

_UNSUPPORTED_ACTIONS = ("range", "end")


@dataclass(frozen=True)
class _Expression:
    source: str
    path: JSONPath


_Segment = Union[str, _Expression]


def _compile_action(action: str, template: str) -> _Segment:
    action = action.strip()
    if not action:
        raise JSONPathExpressionError("Empty action '{}' in template", template)

    if len(action) >= 2 and action[0] == action[-1] and action[0] in ('"', "'"):
        return action[1:-1]

    if action.split(" ", 1)[0] in _UNSUPPORTED_ACTIONS:
        raise JSONPathExpressionError(f"Unsupported action {action!r}", template)

    if action.startswith("$"):
        expression = action
    elif action.startswith("@"):
        expression = "$" + action[1:]
    elif action.startswith((".", "[")):
        expression = "$" + action
    else:
        raise JSONPathExpressionError(f"Unrecognized identifier {action!r}", template)

    # A lone "$." refers to the whole document
    if expression == "$.":
        expression = "$"

    try:
        return _Expression(source=action, path=jsonpath_parse(expression))
    except (JsonPathLibraryError, ValueError, AttributeError) as e:
        raise JSONPathExpressionError(
            f"Can't parse {action!r}: {e}", template
        ) from None


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


@dataclass(frozen=True)
class KubectlJSONPath:
    """Compiled kubectl-style JSONPath template."""

    template: str
    segments: tuple[_Segment, ...]

    @classmethod
    def parse(cls, template: str) -> "KubectlJSONPath":
        """
        Compile a template.

        Raises:
            JSONPathExpressionError: Unclosed or empty action, unsupported
                action, or an expression jsonpath-ng can't parse
        """
        segments: list[_Segment] = []
        position = 0
        while position < len(template):
            start = template.find("{", position)
            if start == -1:
                segments.append(template[position:])
                break
            if start > position:
                segments.append(template[position:start])
            end = template.find("}", start + 1)
            if end == -1:
                raise JSONPathExpressionError("Unclosed action in template", template)
            segments.append(_compile_action(template[start + 1:end], template))
            position = end + 1

        if not segments:
            raise JSONPathExpressionError("Empty JSONPath template", template)

        return cls(template=template, segments=tuple(segments))

    def evaluate(self, document: Any) -> str:
        """
        Render the template against a parsed JSON document.

        Raises:
            JSONPathNotFound: An expression matched nothing or could not be
                evaluated against this document
        """
        parts: list[str] = []
        for segment in self.segments:
            if isinstance(segment, str):
                parts.append(segment)
                continue
            try:
                matches = segment.path.find(document)
            except (TypeError, ValueError, KeyError, AttributeError) as e:
                # Filters comparing mismatched types (null > 1) raise inside jsonpath-ng
                raise JSONPathNotFound(
                    f"{segment.source} could not be evaluated: {e}",
                    {"jsonpath": self.template},
                ) from None
            if not matches:
                raise JSONPathNotFound(
                    f"{segment.source} is not found",
                    {"jsonpath": self.template},
                )
            parts.append(" ".join(_render(m.value) for m in matches))
        return "".join(parts)

import re
from typing import Any, List, Mapping, Tuple, Union

import yaml

from .errors import MissingParameterError, TemplateError, TemplateSyntaxError

_OPEN = "{{"
_CLOSE = "}}"
_FIELD_RE = re.compile(r"^\.(?:[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)?$")

# A parsed template is a flat list of literal text and field paths.
Node = Union[str, Tuple[str, ...]]


def _parse(template: str) -> List[Node]:
    nodes: List[Node] = []
    pos = 0
    trim_next = False
    while True:
        start = template.find(_OPEN, pos)
        text = template[pos:] if start < 0 else template[pos:start]
        if trim_next:
            text = text.lstrip()
        if start < 0:
            nodes.append(text)
            return nodes

        line = template.count("\n", 0, start) + 1
        end = template.find(_CLOSE, start + len(_OPEN))
        if end < 0:
            raise TemplateSyntaxError(f"line {line}: unclosed action")
        if template.find(_OPEN, start + len(_OPEN), end) >= 0:
            raise TemplateSyntaxError(f"line {line}: unexpected '{_OPEN}' in action")

        body = template[start + len(_OPEN):end]
        if len(body) > 1 and body[0] == "-" and body[1].isspace():
            text = text.rstrip()
            body = body[1:]
        trim_next = len(body) > 1 and body[-1] == "-" and body[-2].isspace()
        if trim_next:
            body = body[:-1]
        nodes.append(text)

        field = body.strip()
        if not field:
            raise TemplateSyntaxError(f"line {line}: missing value for action")
        if not _FIELD_RE.match(field):
            raise TemplateSyntaxError(f"line {line}: unsupported action '{field}'")
        nodes.append(tuple(p for p in field.split(".") if p))
        pos = end + len(_CLOSE)


def _lookup(params: Any, path: Tuple[str, ...]) -> Any:
    value = params
    for i, key in enumerate(path):
        if isinstance(value, Mapping):
            if key not in value:
                raise MissingParameterError(".".join(path[: i + 1]))
            value = value[key]
        elif not key.startswith("_") and hasattr(value, key):
            # methods are not fields
            attr = getattr(value, key)
            if callable(attr):
                raise MissingParameterError(".".join(path[: i + 1]))
            value = attr
        else:
            raise MissingParameterError(".".join(path[: i + 1]))
    return value


def to_text(value: Any) -> str:
    """Canonical stringification of a parameter value.

    Structured values are emitted as single-line YAML flow collections so
    they stay valid wherever a scalar could appear in a manifest.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise TemplateError(f"parameter bytes are not valid UTF-8: {e}") from e
    if isinstance(value, Mapping):
        value = dict(value)
    elif isinstance(value, (list, tuple, set, frozenset)):
        value = list(value)
    else:
        return str(value)
    try:
        dumped = yaml.safe_dump(
            value, default_flow_style=True, sort_keys=False, width=float("inf")
        )
    except yaml.YAMLError as e:
        raise TemplateError(f"cannot render structured parameter: {e}") from e
    return dumped.strip()


def placeholders(template: str) -> List[str]:
    """Field paths referenced by ``template``, in order of first use."""
    seen: List[str] = []
    for node in _parse(template):
        if isinstance(node, tuple):
            name = ".".join(node)
            if name not in seen:
                seen.append(name)
    return seen


def render_str(template: str, params: Any) -> str:
    """Substitute every ``{{ .Field }}`` in ``template`` from ``params``.

    The whole template is parsed before anything is substituted, so syntax
    errors never yield partial output. A field missing from ``params``
    raises :class:`MissingParameterError` instead of rendering empty.
    """
    nodes = _parse(template)
    out = []
    for node in nodes:
        if isinstance(node, tuple):
            out.append(to_text(_lookup(params, node)))
        else:
            out.append(node)
    return "".join(out)


def render(template: str, params: Any) -> bytes:
    return render_str(template, params).encode("utf-8")

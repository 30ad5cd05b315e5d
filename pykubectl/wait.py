import json
import logging
import time
from typing import Any, Dict, Optional

from jsonpath_ng import parse as jp_parse

from .client import Kubectl
from .errors import CommandError

logger = logging.getLogger("pykubectl.wait")

_OPS = ("equals", "notEquals", "contains", "greaterThan", "lessThan")


def decode_json(payload: bytes) -> Any:
    try:
        return json.loads(payload)
    except ValueError as e:
        raise ValueError(f"cannot decode kubectl output as JSON: {e}") from e


def _compare(op: str, found: Any, value: Any) -> bool:
    if op == "equals":
        return str(found) == str(value)
    if op == "notEquals":
        return str(found) != str(value)
    if op == "contains":
        return str(value) in str(found)
    if op in ("greaterThan", "lessThan"):
        try:
            left, right = float(found), float(value)
        except (TypeError, ValueError):
            return False
        return left > right if op == "greaterThan" else left < right
    raise ValueError(f"Unsupported op {op}")


def wait_for_resource_condition(
    kubectl: Kubectl,
    res: Dict[str, Any],
    condition: str,
    timeout: float,
    interval: float,
    default_namespace: Optional[str] = None,
    jsonpath: Optional[str] = None,
    op: Optional[str] = None,
    value: Optional[Any] = None,
) -> Optional[Any]:
    """Poll ``kubectl get`` until ``res`` satisfies ``condition``.

    ``res`` is ``{"kind": ..., "name": ..., "namespace": ...}``. Conditions:

    * ``Exist``: the resource can be fetched.
    * ``Deleted``: kubectl reports it NotFound.
    * ``Custom``: ``jsonpath`` evaluated on the decoded object matches
      ``value`` under ``op`` (equals, notEquals, contains, greaterThan,
      lessThan).

    Returns the last decoded object for ``Exist`` and ``Custom``, ``None``
    for ``Deleted``. Raises :class:`TimeoutError` once ``timeout`` seconds
    have passed. Any kubectl failure other than NotFound is re-raised.
    """
    kind = res["kind"]
    name = res["name"]
    ns = res.get("namespace") or default_namespace or "default"

    cond = condition.lower()
    if cond == "custom":
        if not jsonpath or not op:
            raise ValueError("Custom condition requires jsonPath and op")
        if op not in _OPS:
            raise ValueError(f"Unsupported op {op}")
        expr = jp_parse(jsonpath)
    elif cond not in ("exist", "deleted"):
        raise ValueError(f"Unsupported waitFor condition '{condition}'")

    def get_obj():
        try:
            return decode_json(kubectl.get_by_name(kind, name, ns))
        except CommandError as e:
            if e.returncode is None or "NotFound" not in e.stderr:
                raise
            logger.debug("%s/%s in %s not found", kind, name, ns)
            return None

    end = time.monotonic() + timeout
    while True:
        obj = get_obj()
        if cond == "exist" and obj is not None:
            return obj
        if cond == "deleted" and obj is None:
            return None
        if cond == "custom" and obj is not None:
            matches = [m.value for m in expr.find(obj)]
            logger.debug("%s/%s %s -> %s", kind, name, jsonpath, matches)
            if any(_compare(op, m, value) for m in matches):
                return obj
        if time.monotonic() >= end:
            raise TimeoutError(f"waitFor {condition} timed out for {kind}/{name}")
        time.sleep(interval)


def wait_for_phase(
    kubectl: Kubectl,
    kind: str,
    name: str,
    namespace: str,
    phase: str = "Running",
    timeout: float = 300,
    interval: float = 1,
) -> Any:
    return wait_for_resource_condition(
        kubectl,
        {"kind": kind, "name": name, "namespace": namespace},
        "Custom",
        timeout,
        interval,
        jsonpath="status.phase",
        op="equals",
        value=phase,
    )

from .client import Kubectl, get_kubectl
from .errors import (
    CommandError,
    CommandTimeout,
    KubectlError,
    MissingParameterError,
    TemplateError,
    TemplateSyntaxError,
)
from .exec import run_command
from .templating import placeholders, render, render_str
from .wait import decode_json, wait_for_phase, wait_for_resource_condition

__all__ = [
    "Kubectl",
    "get_kubectl",
    "KubectlError",
    "TemplateError",
    "TemplateSyntaxError",
    "MissingParameterError",
    "CommandError",
    "CommandTimeout",
    "run_command",
    "render",
    "render_str",
    "placeholders",
    "decode_json",
    "wait_for_resource_condition",
    "wait_for_phase",
]

from typing import Optional, Sequence


class KubectlError(Exception):
    pass


class TemplateError(KubectlError, ValueError):
    pass


class TemplateSyntaxError(TemplateError):
    pass


class MissingParameterError(TemplateError):
    def __init__(self, name: str):
        super().__init__(f"missing template parameter '.{name}'")
        self.name = name


class CommandError(KubectlError, RuntimeError):
    """A kubectl invocation that could not start or exited non-zero.

    The message always carries both the failure and the captured stderr so
    a single ``str(err)`` is enough for operator-facing output.
    """

    def __init__(
        self,
        action: str,
        argv: Sequence[str],
        cause: str,
        stderr: str = "",
        returncode: Optional[int] = None,
    ):
        super().__init__(f"{action}: {cause}: {stderr}")
        self.action = action
        self.argv = list(argv)
        self.cause = cause
        self.stderr = stderr
        self.returncode = returncode


class CommandTimeout(CommandError, TimeoutError):
    pass

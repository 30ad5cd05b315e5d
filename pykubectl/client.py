import os
from typing import Any, Optional, Sequence

from .exec import run_command
from .templating import render

DEFAULT_EXECUTABLE = "kubectl"


class Kubectl:
    """Stateless facade over the ``kubectl`` command line.

    Every call renders its manifest (when it takes one), starts exactly one
    process and returns that process's stdout as bytes. Failures raise
    :class:`pykubectl.errors.KubectlError` subclasses.
    """

    def __init__(
            self,
            executable: Optional[str] = None,
            timeout: Optional[float] = None,
            exec_separator: bool = False,
    ):
        self.executable = executable or os.getenv("KUBECTL_BIN", DEFAULT_EXECUTABLE)
        self.timeout = timeout
        self.exec_separator = exec_separator

    def __repr__(self) -> str:
        return f"Kubectl(executable={self.executable!r}, timeout={self.timeout!r})"

    def _run(self, action: str, args: Sequence[str], stdin: Optional[bytes] = None) -> bytes:
        return run_command(
            self.executable, args, stdin=stdin, timeout=self.timeout, action=action
        )

    def apply(self, manifest: str, params: Any) -> bytes:
        body = render(manifest, params)
        return self._run("cannot apply from manifest", ["apply", "-f", "-"], body)

    def delete(self, manifest: str, params: Any) -> bytes:
        body = render(manifest, params)
        return self._run("cannot delete from manifest", ["delete", "-f", "-"], body)

    def patch(self, resource: str, name: str, namespace: str, patch: str) -> bytes:
        args = ["patch", resource, name, "-n", namespace, "--patch", patch]
        return self._run("cannot patch", args)

    def exec(self, name: str, namespace: str, command: Sequence[str]) -> bytes:
        if isinstance(command, (str, bytes)):
            raise TypeError("exec command must be a sequence of arguments, not a string")
        if not command:
            raise ValueError("exec command must not be empty")
        args = ["exec", name, "-n", namespace]
        if self.exec_separator:
            args.append("--")
        args.extend(command)
        return self._run("cannot exec command", args)

    def get_by_name(self, resource: str, name: str, namespace: str) -> bytes:
        args = ["get", resource, name, f"-n={namespace}", "-o", "json"]
        return self._run("cannot get resource", args)

    def get_by_label(self, resource: str, label: str, namespace: str) -> bytes:
        args = ["get", resource, "-l", label, f"-n={namespace}", "-o", "json"]
        return self._run("cannot get resource", args)

    def delete_by_label(self, resources: Sequence[str], label: str, namespace: str) -> bytes:
        if isinstance(resources, str):
            resources = [resources]
        if not resources:
            raise ValueError("delete_by_label needs at least one resource kind")
        args = ["delete", ",".join(resources), "-l", label, f"-n={namespace}"]
        return self._run("cannot delete resource", args)


_cached_kubectl: Optional[Kubectl] = None


def get_kubectl() -> Kubectl:
    global _cached_kubectl
    if _cached_kubectl:
        return _cached_kubectl
    _cached_kubectl = Kubectl()
    return _cached_kubectl

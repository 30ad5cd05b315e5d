"""
Shared pytest fixtures for pykubectl tests.

- RunRecorder: patches subprocess.run and records every argv/stdin
- fake_kubectl: an executable script that mimics the kubectl subcommands
  used by Kubectl, keeping pod state on disk
"""

import json
import os
import stat
import sys
import textwrap
from dataclasses import dataclass, field
from typing import List, Optional
from unittest.mock import MagicMock, patch

import pytest

POD_MANIFEST = """
apiVersion: v1
kind: Pod
metadata:
  name: {{ .Name }}
  labels:
    app: {{ .Name }}
spec:
  containers:
    - name: nginx
      image: nginx:latest
"""


@dataclass
class RecordedCall:
    argv: List[str]
    input: Optional[bytes]
    kwargs: dict


@dataclass
class RunRecorder:
    """Stand-in for subprocess.run returning a canned result."""

    stdout: bytes = b""
    stderr: bytes = b""
    returncode: int = 0
    calls: List[RecordedCall] = field(default_factory=list)

    def __call__(self, argv, input=None, **kwargs):
        self.calls.append(RecordedCall(list(argv), input, kwargs))
        result = MagicMock()
        result.stdout = self.stdout
        result.stderr = self.stderr
        result.returncode = self.returncode
        return result

    @property
    def last(self) -> RecordedCall:
        return self.calls[-1]


@pytest.fixture
def recorder():
    rec = RunRecorder()
    with patch("pykubectl.exec.subprocess.run", side_effect=rec):
        yield rec


FAKE_KUBECTL = '''
import json
import os
import re
import sys

state = os.environ["FAKE_KUBECTL_STATE"]
args = sys.argv[1:]
with open(os.path.join(state, "calls.jsonl"), "a") as f:
    f.write(json.dumps(args) + "\\n")


def fail(msg):
    sys.stderr.write(msg + "\\n")
    sys.exit(1)


def pod_path(name):
    return os.path.join(state, "pod-" + name)


cmd = args[0] if args else ""
if cmd in ("apply", "delete") and args[1:] == ["-f", "-"]:
    manifest = sys.stdin.read()
    m = re.search(r"^\\s*name:[ \\t]*(\\S+)[ \\t]*$", manifest, re.M)
    if not m:
        fail("error: error validating data: metadata.name is required")
    name = m.group(1)
    if cmd == "apply":
        if not os.path.exists(pod_path(name)):
            with open(pod_path(name), "w") as f:
                f.write("0")
            print("pod/%s created" % name)
        else:
            print("pod/%s unchanged" % name)
    else:
        if not os.path.exists(pod_path(name)):
            fail('Error from server (NotFound): pods "%s" not found' % name)
        os.remove(pod_path(name))
        print('pod "%s" deleted' % name)
elif cmd == "get":
    name = args[2]
    if not os.path.exists(pod_path(name)):
        fail('Error from server (NotFound): pods "%s" not found' % name)
    with open(pod_path(name)) as f:
        polls = int(f.read() or "0")
    with open(pod_path(name), "w") as f:
        f.write(str(polls + 1))
    phase = "Running" if polls >= 2 else "Pending"
    print(json.dumps({"kind": "Pod", "metadata": {"name": name}, "status": {"phase": phase}}))
elif cmd == "exec":
    name, command = args[1], args[4:]
    if not os.path.exists(pod_path(name)):
        fail('Error from server (NotFound): pods "%s" not found' % name)
    if command[:1] == ["echo"]:
        print(" ".join(command[1:]))
    elif command[:1] == ["argv"]:
        print(json.dumps(command[1:]))
    else:
        fail("command terminated with exit code 1")
else:
    fail("error: unknown command %r" % cmd)
'''


@dataclass
class FakeKubectl:
    executable: str
    state_dir: str

    def calls(self) -> List[List[str]]:
        path = os.path.join(self.state_dir, "calls.jsonl")
        if not os.path.exists(path):
            return []
        with open(path) as f:
            return [json.loads(line) for line in f if line.strip()]


@pytest.fixture
def fake_kubectl(tmp_path, monkeypatch):
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    script = tmp_path / "kubectl"
    script.write_text(f"#!{sys.executable}\n" + textwrap.dedent(FAKE_KUBECTL))
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    monkeypatch.setenv("FAKE_KUBECTL_STATE", str(state_dir))
    return FakeKubectl(executable=str(script), state_dir=str(state_dir))

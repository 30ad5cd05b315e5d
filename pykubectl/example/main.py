import logging
from typing import Optional

from pykubectl import Kubectl, KubectlError, wait_for_phase

logger = logging.getLogger("pykubectl.example")

POD_MANIFEST = """
apiVersion: v1
kind: Pod
metadata:
  name: {{ .Name }}
  namespace: {{ .Namespace }}
  labels:
    app: {{ .Name }}
spec:
  containers:
    - name: main
      image: {{ .Image }}
"""


def run_example(
        name: str = "foo",
        namespace: str = "default",
        image: str = "nginx:latest",
        timeout: float = 300,
        interval: float = 1,
        executable: Optional[str] = None,
) -> int:
    k = Kubectl(executable=executable)
    params = {"Name": name, "Namespace": namespace, "Image": image}

    try:
        logger.info("Applying pod %s/%s", namespace, name)
        k.apply(POD_MANIFEST, params)

        wait_for_phase(k, "pod", name, namespace, "Running", timeout=timeout, interval=interval)
        logger.info("Pod %s/%s is Running", namespace, name)

        out = k.exec(name, namespace, ["echo", "foo", "bar"])
        logger.info("exec output: %s", out.decode("utf-8", errors="replace").strip())

        k.delete(POD_MANIFEST, params)
        logger.info("Deleted pod %s/%s", namespace, name)
    except (KubectlError, TimeoutError) as e:
        logger.error("Example failed: %s", e)
        return 1
    return 0

import argparse
import logging
import os


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Create a pod, wait for it, exec into it and delete it"
    )
    parser.add_argument("--name", default="foo", help="Pod name")
    parser.add_argument("--namespace", default="default", help="Pod namespace")
    parser.add_argument("--image", default="nginx:latest", help="Container image")
    parser.add_argument(
        "--timeout",
        type=float,
        default=300,
        help="Seconds to wait for the pod to reach Running",
    )
    parser.add_argument(
        "--interval", type=float, default=1, help="Seconds between status polls"
    )
    parser.add_argument(
        "--kubectl",
        default=None,
        help="kubectl executable (defaults to $KUBECTL_BIN or kubectl)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (overrides --log-level to DEBUG)",
    )
    args = parser.parse_args(argv)

    level_name = "DEBUG" if args.debug else args.log_level.upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    from .main import run_example

    return run_example(
        name=args.name,
        namespace=args.namespace,
        image=args.image,
        timeout=args.timeout,
        interval=args.interval,
        executable=args.kubectl,
    )


if __name__ == "__main__":
    raise SystemExit(main())

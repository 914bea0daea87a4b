from __future__ import annotations

import argparse
import json
import sys
from typing import Any

import requests


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def _key_values(items: list[str], flag: str) -> dict[str, str] | None:
    if not items:
        return None
    out: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise SystemExit(f"{flag} expects key=value, got {item!r}")
        out[key] = value
    return out


def parse_publish(raw: str) -> dict[str, Any]:
    """Parse name:protocol:internal:published, e.g. http:tcp:80:8080."""
    parts = raw.split(":")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError(f"expected name:protocol:internal:published, got {raw!r}")
    name, protocol, internal, published = parts
    try:
        return {
            "name": name,
            "protocol": protocol or "tcp",
            "internal_port": int(internal),
            "publish_port": int(published),
        }
    except ValueError:
        raise argparse.ArgumentTypeError(f"ports must be integers in {raw!r}")


def build_create_payload(args: argparse.Namespace) -> dict[str, Any]:
    mode: dict[str, Any] = {"kind": "global"} if args.global_mode else {"kind": "replicated", "replicas": args.replicas}
    payload: dict[str, Any] = {
        "name": args.name,
        "image": args.image,
        "env": list(args.env),
        "mode": mode,
        "publish_specs": list(args.publish),
    }
    labels = _key_values(args.label, "--label")
    if labels is not None:
        payload["labels"] = labels
    container_labels = _key_values(args.container_label, "--container-label")
    if container_labels is not None:
        payload["container_labels"] = container_labels
    return payload


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Swarm service provisioning CLI")
    p.add_argument("--api", default="http://localhost:8000", help="API base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    s_create = sub.add_parser("create", help="Create a service")
    s_create.add_argument("--name", required=True)
    s_create.add_argument("--image", required=True)
    s_create.add_argument("--env", action="append", default=[], help="KEY=VALUE, repeatable")
    s_create.add_argument("--label", action="append", default=[], help="Service label key=value, repeatable")
    s_create.add_argument("--container-label", action="append", default=[], help="Container label key=value, repeatable")
    s_create.add_argument(
        "--publish",
        action="append",
        default=[],
        type=parse_publish,
        help="name:protocol:internal:published, repeatable",
    )
    mode = s_create.add_mutually_exclusive_group()
    mode.add_argument("--replicas", type=int, default=1, help="Replicated mode with N tasks (default)")
    mode.add_argument("--global", dest="global_mode", action="store_true", help="One task per node")

    s_rm = sub.add_parser("remove", help="Remove a service")
    s_rm.add_argument("ident", help="Service ID or name")

    s_ev = sub.add_parser("events", help="Show events")
    s_ev.add_argument("--limit", type=int, default=20)

    args = p.parse_args(argv)

    base = args.api.rstrip("/")

    if args.cmd == "create":
        r = requests.post(f"{base}/v1/services", json=build_create_payload(args), timeout=30)
        _print(r.json())
        return 0 if r.ok else 1

    if args.cmd == "remove":
        r = requests.delete(f"{base}/v1/services/{args.ident}", timeout=30)
        _print(r.json())
        return 0 if r.ok else 1

    if args.cmd == "events":
        _print(requests.get(f"{base}/v1/events", params={"limit": args.limit}, timeout=10).json())
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

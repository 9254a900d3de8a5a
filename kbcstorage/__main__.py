from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import kbcstorage
from kbcstorage.exceptions import KbcError
from kbcstorage.provider import Provider, ProviderConfig
from kbcstorage.resources.table import RESOURCE_TYPE


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="kbcstorage",
        description="Create, read or delete a Keboola Storage table.")
    p.add_argument("action", choices=["create", "read", "delete"])
    p.add_argument("config", help="JSON file with the table configuration.")
    p.add_argument("--id", default=None,
                   help="Table ID, for read/delete (defaults to 'id' in the "
                   "config file).")
    p.add_argument("--timeout", type=float, default=None,
                   help="Give up waiting for the create job after this many "
                   "seconds.")
    p.add_argument("--log-level", default=None,
                   help="DEBUG, INFO, WARNING or ERROR.")
    return p.parse_args(argv)


def load_config(path: Path) -> Dict[str, Any]:
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise KbcError(f"Could not read {path}: {e}") from e
    if not isinstance(config, dict):
        raise KbcError(f"{path} must contain a JSON object")
    return config


def run(args: argparse.Namespace) -> Dict[str, Any]:
    values = load_config(Path(args.config))
    table_id = args.id or values.pop("id", "") or ""

    config = ProviderConfig.from_env()
    if args.timeout is not None:
        config = dataclasses.replace(
            config,
            polling=dataclasses.replace(config.polling,
                                        timeout_s=args.timeout),
        )

    resource = Provider(config).resource(RESOURCE_TYPE)
    data = resource.new_data(values, id=table_id)

    if args.action == "create":
        resource.create(data)
    elif args.action == "read":
        if not data.id:
            raise KbcError("read requires a table ID (--id or 'id')")
        resource.read(data)
    else:
        if not data.id:
            raise KbcError("delete requires a table ID (--id or 'id')")
        resource.delete(data)
    return data.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.log_level:
        kbcstorage.set_log_level(args.log_level.upper())

    try:
        state = run(args)
    except (KbcError, ValueError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(json.dumps(state, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Command-line access to a Lay-Z-Spa through pylayzspa.

Credentials come from the environment (see ``LayzConfig.from_env``):
- LAYZ_API_TOKEN
- LAYZ_DEVICE_ID
- LAYZ_BASE_URL (optional)

Examples::

    scripts/spa_status.py status
    scripts/spa_status.py set heating on
    scripts/spa_status.py set-temp 38
    scripts/spa_status.py watch --seconds 120
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pylayzspa import LayzClient, LayzConfig, LayzError, SpaControlSurface  # noqa: E402
from pylayzspa.models.state import DeviceState  # noqa: E402

_TOGGLES = {
    "power": SpaControlSurface.write_power,
    "heating": SpaControlSurface.write_heating_state,
    "filtration": SpaControlSurface.write_filtration_state,
    "waves": SpaControlSurface.write_wave_state,
}


def _print_state(state: DeviceState) -> None:
    print(json.dumps(state.model_dump(mode="json"), indent=2, sort_keys=True))


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="fetch and print the current state")

    set_parser = sub.add_parser("set", help="switch a control point on or off")
    set_parser.add_argument("control", choices=sorted(_TOGGLES))
    set_parser.add_argument("value", choices=("on", "off"))

    temp_parser = sub.add_parser("set-temp", help="change the target temperature (20-40 °C)")
    temp_parser.add_argument("temperature", type=int)

    watch_parser = sub.add_parser("watch", help="poll in the background and print changes")
    watch_parser.add_argument("--seconds", type=float, default=60.0)

    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    config = LayzConfig.from_env()
    async with LayzClient(config) as client:
        spa = SpaControlSurface(client, config)

        if args.command == "status":
            _print_state(await spa.cache.refresh(force=True))
            return 0

        if args.command == "set":
            await spa.cache.refresh(force=True)
            _print_state(await _TOGGLES[args.control](spa, args.value == "on"))
            return 0

        if args.command == "set-temp":
            await spa.cache.refresh(force=True)
            _print_state(await spa.write_target_temperature(args.temperature))
            return 0

        async with spa:
            last: DeviceState | None = None
            loop = asyncio.get_running_loop()
            deadline = loop.time() + args.seconds
            while loop.time() < deadline:
                state = spa.read_state()
                if state != last:
                    _print_state(state)
                    last = state
                await asyncio.sleep(config.poll_interval)
        return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        return asyncio.run(_run(args))
    except (LayzError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

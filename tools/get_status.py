#!/usr/bin/env python3
"""Read and print the status and identity of a DSIOT device."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import httpx

from dsiot_gateway.core.config import setup_logging
from dsiot_gateway.protocol.envelope import EnvelopeRejectedError
from dsiot_gateway.protocol.handler import ProtocolHandler
from dsiot_gateway.transport.http import HttpTransport


async def read_device(host: str, timeout: float, raw: bool) -> None:
    transport = HttpTransport(host, timeout=timeout)
    handler = ProtocolHandler(transport)
    try:
        info = await handler.get_info()
        print(f"Device:   {info.name}")
        print(f"MAC:      {info.mac}")
        print(f"Firmware: {info.version}")
        print(f"EDID:     {info.edid}")
        print()

        status = await handler.fetch_status()
        if raw:
            print(json.dumps({name: item.value for name, item in status.items().items()}, indent=2))
            return

        for name, value in status.as_dict().items():
            print(f"  {name:22s}: {value}")
    finally:
        await transport.close()


def main():
    parser = argparse.ArgumentParser(description="Print the status of a DSIOT device")
    parser.add_argument("host", help="Device IP address or hostname")
    parser.add_argument("--timeout", "-t", type=float, default=5.0, help="Request timeout in seconds")
    parser.add_argument("--raw", "-r", action="store_true", help="Show raw wire values instead of decoded ones")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log wire traffic")
    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else "WARNING")

    try:
        asyncio.run(read_device(args.host, args.timeout, args.raw))
    except EnvelopeRejectedError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"Error: Cannot reach {args.host}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

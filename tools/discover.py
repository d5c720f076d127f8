#!/usr/bin/env python3
"""Find DSIOT devices on the local network by UDP broadcast."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dsiot_gateway.core.config import Settings, setup_logging
from dsiot_gateway.transport.discovery import discover


def main():
    settings = Settings()
    parser = argparse.ArgumentParser(description="Discover DSIOT devices by UDP broadcast")
    parser.add_argument("--timeout", "-t", type=float, default=settings.discovery_timeout, help="Seconds to wait per reply")
    parser.add_argument("--broadcast", "-b", default=settings.discovery_broadcast, help="Broadcast address")
    parser.add_argument("--port", "-p", type=int, default=settings.discovery_port, help="Device discovery port")
    parser.add_argument(
        "--listen-port", "-l", type=int, default=settings.discovery_listen_port, help="Local port for replies"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else "WARNING")

    try:
        devices = asyncio.run(
            discover(
                timeout=args.timeout,
                broadcast_address=args.broadcast,
                port=args.port,
                listen_port=args.listen_port,
            )
        )
    except OSError as e:
        print(f"Error: Cannot open discovery socket: {e}")
        sys.exit(1)

    if not devices:
        print("No devices found")
        return

    print(f"Found {len(devices)} device(s):")
    print()
    for device in devices:
        info = device.info
        print(f"  {device.host:15s}  {info.name:20s}  mac={info.mac}  ver={info.version}  edid={info.edid}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Check whether a DSIOT device exposes the properties the gateway needs."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import httpx

from dsiot_gateway.core.config import setup_logging
from dsiot_gateway.protocol.compatibility import Severity, check_status
from dsiot_gateway.protocol.envelope import EnvelopeRejectedError
from dsiot_gateway.protocol.handler import ProtocolHandler
from dsiot_gateway.transport.http import HttpTransport

MARKS = {Severity.OK: "OK  ", Severity.WARNING: "WARN", Severity.FAILURE: "FAIL"}


async def check_device(host: str, timeout: float) -> int:
    """Run the checks and return the process exit code."""
    print("Checking compatibility.")
    print(f"Device address: {host}")
    print()

    transport = HttpTransport(host, timeout=timeout)
    handler = ProtocolHandler(transport)
    try:
        try:
            info = await handler.get_info()
        except httpx.HTTPError as e:
            print(f"FAIL API endpoint: cannot reach device - {e}")
            return 1
        except ValueError as e:
            print(f"FAIL API endpoint: invalid response - {e}")
            return 1
        print("OK   API endpoint: available")
        print(f"     Device name:    {info.name}")
        print(f"     Device MAC:     {info.mac}")
        print(f"     Device version: {info.version}")

        try:
            status = await handler.fetch_status()
        except EnvelopeRejectedError as e:
            print("OK   Request API: available")
            print(f"FAIL Status API: unavailable - {e}")
            return 1
        except httpx.HTTPError as e:
            print(f"FAIL Request API: request failed - {e}")
            return 1
        except ValueError as e:
            print(f"FAIL Request API: invalid response - {e}")
            return 1
        print("OK   Request API: available")
        print("OK   Status API: available")
    finally:
        await transport.close()

    checks = check_status(status)
    for check in checks:
        print(f"{MARKS[check.severity]} {check.field:22s}: {check.detail}")
    print()

    severities = {check.severity for check in checks}
    if Severity.FAILURE in severities:
        print("Your device is not supported.")
        return 1
    if Severity.WARNING in severities:
        print("Your device is mostly supported except optional fan and air direction control.")
    else:
        print("Your device is fully compatible.")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Check a DSIOT device for gateway compatibility")
    parser.add_argument("host", help="Device IP address or hostname")
    parser.add_argument("--timeout", "-t", type=float, default=5.0, help="Request timeout in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log wire traffic")
    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else "WARNING")

    sys.exit(asyncio.run(check_device(args.host, args.timeout)))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Interactive GATT Client Script.

Scans for a peripheral, connects to it, lists its characteristics and
prints notifications until interrupted.

Usage: try_gatt.py [ADDRESS]
"""

import sys
import logging
from pathlib import Path

# Add SDK to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from gattsdk import GattClient, GattError, SerialTransport

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)

SCAN_LIMIT = 20


def scan(client):
    seen = {}

    def on_device(rssi, address, data):
        if address not in seen:
            print(f"  {address}  rssi={rssi}  adv={data.hex()}")
        seen[address] = rssi
        return len(seen) < SCAN_LIMIT

    print("\nScanning (Ctrl+C to stop)...")
    try:
        client.discover(on_device)
    except KeyboardInterrupt:
        pass
    return seen


def main():
    transport = SerialTransport()
    print("Opening dongle (auto-detect)...")
    if not transport.open():
        print("Failed to open! Is the dongle plugged in?")
        return

    client = GattClient(transport)
    try:
        if len(sys.argv) > 1:
            target = sys.argv[1]
        else:
            seen = scan(client)
            if not seen:
                print("No devices found.")
                return
            target = max(seen, key=seen.get)

        print(f"\nConnecting to {target}...")
        client.connect(target)
        print(f"Connected: {client.state}")

        print("\nCharacteristics:")
        for uuid, handle in client.discover_characteristics().items():
            print(f"  0x{handle:04x}  {uuid[::-1].hex()}")

        print("\nListening for notifications (Ctrl+C to stop)...")
        while True:
            client.listen(lambda handle, data: print(f"  0x{handle:04x}: {data.hex()}"))

    except KeyboardInterrupt:
        print("\nStopped by user")
    except GattError as e:
        print(f"\nError: {e}")
    finally:
        print("Disconnecting...")
        client.disconnect_all()
        transport.close()
        print("Done.")


if __name__ == "__main__":
    main()

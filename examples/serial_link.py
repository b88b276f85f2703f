"""Exchange tagged-union commands over a serial port.

Defaults to pyserial's ``loop://`` URL, which echoes every written byte back,
so the example runs without hardware. Pass a device path to talk to a real
port, e.g. ``python serial_link.py /dev/ttyACM0``.
"""

import sys
from enum import Enum
from typing import Annotated, Optional

import serial
from pydantic import BaseModel

from loaddump import IOSink, IOSource, StreamReadError, TaggedUnion, dump, load, never
from loaddump.types import UInt8, UInt16, UInt32


class McuType(Enum):
    STM32F446 = 1
    STM32H563 = 2
    STM32G071 = 4


class Version(BaseModel):
    firmware: Annotated[int, UInt32]
    hardware_rev: Annotated[int, UInt8]
    mcu: McuType

    def __str__(self) -> str:
        return f"Firmware 0x{self.firmware:08X}, HW rev {self.hardware_rev}, MCU {self.mcu.name}"


class Command(TaggedUnion):
    pass


class WhosThere(Command):
    pass


class SetLed(Command):
    channel: Annotated[int, UInt8]
    brightness: Annotated[int, UInt16]


class Report(Command):
    device_id: Annotated[int, UInt32]
    name: str
    version: Optional[Version]


@never("bootloader commands must go through the flashing tool")
class EnterBootloader(Command):
    pass


class SerialLink:
    """Commands over a serial port."""

    def __init__(self, url: str = "loop://", baudrate: int = 115200, timeout: float = 2.0):
        print(f"Opening {url} @ {baudrate} baud...")
        self.port = serial.serial_for_url(url, baudrate=baudrate, timeout=timeout)
        self.sink = IOSink(self.port)
        self.source = IOSource(self.port)

    def close(self) -> None:
        self.port.close()

    def __enter__(self) -> "SerialLink":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def send(self, command: Command) -> None:
        dump(command, self.sink)
        self.port.flush()

    def receive(self) -> Command | None:
        """Read one command, or None when the port times out."""
        try:
            return load(self.source, Command)
        except StreamReadError:
            return None


COMMANDS: list[Command] = [
    WhosThere(),
    SetLed(channel=2, brightness=512),
    Report(
        device_id=0x42,
        name="lumen",
        version=Version(firmware=0x01020003, hardware_rev=3, mcu=McuType.STM32H563),
    ),
]


def main() -> None:
    url = sys.argv[1] if len(sys.argv) > 1 else "loop://"
    with SerialLink(url) as link:
        for command in COMMANDS:
            print(f"\nSending: {command!r}")
            link.send(command)
            reply = link.receive()
            if reply is None:
                print("  (no response)")
                continue
            print(f"  Received: {reply!r}")
            if isinstance(reply, Report) and reply.version is not None:
                print(f"  {reply.version}")


if __name__ == "__main__":
    main()

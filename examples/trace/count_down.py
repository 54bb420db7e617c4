"""Trace a small program that paints a countdown onto the screen."""  # noqa: INP001

import logging

from mos6502.cpu import CPU6502, load_and_run
from mos6502.screen import ScreenSampler
from mos6502.trace import TraceRecorder

# .ORG $0600
#
# SCREEN = $0200
#
#         LDX #$0F
# !       TXA
#         STA SCREEN,X
#         DEX
#         BPL !-
#         BRK
PROGRAM = bytes.fromhex(
    "a2 0f"     # LDX #$0F
    "8a"        # TXA
    "9d 00 02"  # STA $0200,X
    "ca"        # DEX
    "10 f9"     # BPL $0602
    "00"        # BRK
)
BRK_ADDRESS = 0x0609


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(message)s")

    cpu = CPU6502()
    trace = TraceRecorder(capacity=16, stop_at=BRK_ADDRESS)
    steps = load_and_run(cpu, PROGRAM, callback=trace)

    frame = ScreenSampler().sample(cpu.memory).frame
    print(f"Executed {steps} instructions in {cpu.cycles} cycles. Last {len(trace)} steps:")  # noqa: T201
    print("\n".join(trace))  # noqa: T201
    print("Top row of the screen:", [tuple(int(c) for c in pixel) for pixel in frame[0, :16]])  # noqa: T201

"""Tests for disassembly and execution traces."""

import logging

import pytest

from mos6502.cpu import CPU6502, run
from mos6502.memory import MemoryBlock
from mos6502.trace import TraceRecorder, disassemble, format_state


@pytest.mark.parametrize(
    ("code", "text", "length"),
    [
        ("a9 05", "A9 05     LDA #$05", 2),
        ("85 10", "85 10     STA $10", 2),
        ("b5 10", "B5 10     LDA $10,X", 2),
        ("b6 10", "B6 10     LDX $10,Y", 2),
        ("8d 00 02", "8D 00 02  STA $0200", 3),
        ("bd 00 02", "BD 00 02  LDA $0200,X", 3),
        ("6c ff 30", "6C FF 30  JMP ($30FF)", 3),
        ("a1 08", "A1 08     LDA ($08,X)", 2),
        ("b1 08", "B1 08     LDA ($08),Y", 2),
        ("0a", "0A        ASL A", 1),
        ("ea", "EA        NOP", 1),
        ("d0 fe", "D0 FE     BNE $0100", 2),
        ("02", "02        .byte $02", 1),
    ],
)
def test_disassemble(memory: MemoryBlock, code: str, text: str, length: int):  # noqa: D103
    memory.write_bytes_hex(0x0100, code)
    assert disassemble(memory, 0x0100) == (text, length)


def test_disassemble_past_memory(memory: MemoryBlock):  # noqa: D103
    memory.write(len(memory) - 1, 0x8d)  # STA abs cut off by the end of memory
    assert disassemble(memory, len(memory) - 1) == ("??        ???", 1)


def test_format_state(cpu: CPU6502):  # noqa: D103
    cpu.memory.write_bytes_hex(0x0200, "a9 05")
    cpu.pc = 0x0200
    cpu.a = 0x12
    cpu.cycles = 7
    assert format_state(cpu) == (
        "0200  A9 05     LDA #$05              A:12 X:00 Y:00 P:20 SP:FF CYC:7"
    )


def test_recorder_keeps_recent_lines(cpu: CPU6502, caplog: pytest.LogCaptureFixture):  # noqa: D103
    cpu.memory.write_bytes_hex(0, "e8 e8 e8 e8 e8")  # INX x5
    recorder = TraceRecorder(capacity=3)
    with caplog.at_level(logging.DEBUG, logger="mos6502.trace"):
        run(cpu, recorder, max_steps=5)

    assert len(recorder) == 3  # noqa: PLR2004
    assert [line[:4] for line in recorder] == ["0002", "0003", "0004"]
    assert recorder.last is not None
    assert "X:04" in recorder.last
    assert "0000  E8        INX" in caplog.text

    recorder.clear()
    assert recorder.last is None


def test_recorder_stops_run(cpu: CPU6502):  # noqa: D103
    cpu.memory.write_bytes_hex(0, "e8 e8 e8 e8 e8")  # INX x5
    assert run(cpu, TraceRecorder(stop_at=0x0003)) == 3  # noqa: PLR2004
    assert cpu.x == 3  # noqa: PLR2004


def test_recorder_rejects_empty_capacity():  # noqa: D103
    with pytest.raises(ValueError, match="capacity must be positive"):
        TraceRecorder(capacity=0)

import pytest

from scpikit.errors import (
    INTERLOCK_OPEN,
    QUEUE_OVERFLOW,
    WARMUP_NOT_FINISHED,
    ErrorQueue,
    EsrBit,
    ScpiError,
    StbBit,
    esr_bits_for,
    translate,
)


@pytest.mark.parametrize(
    "code, bit",
    [
        (-113, EsrBit.CER),
        (-109, EsrBit.CER),
        (-222, EsrBit.EER),
        (-350, EsrBit.DER),
        (101, EsrBit.DER),
        (32767, EsrBit.DER),
        (-410, EsrBit.QER),
        (-500, EsrBit.PON),
        (-600, EsrBit.URQ),
        (-700, EsrBit.REQ),
        (-800, EsrBit.OPC),
    ],
)
def test_esr_bits_for(code, bit):
    assert esr_bits_for(code) == bit


@pytest.mark.parametrize("code", [0, -1, -99, -900])
def test_esr_bits_none(code):
    assert esr_bits_for(code) == EsrBit(0)


def test_translate_user_errors():
    assert translate(WARMUP_NOT_FINISHED) == "The device has not finished the warm up process yet"
    assert translate(INTERLOCK_OPEN) == "Switching output to on is not allowed when interlock is open"


def test_translate_unknown():
    assert translate(12345) == "Unknown error"


def test_push_and_pop():
    queue = ErrorQueue(4)
    queue.push(-113)
    queue.push(101, "warming")
    assert len(queue) == 2
    assert queue.pop() == ScpiError(-113)
    assert queue.pop() == ScpiError(101, "warming")
    assert len(queue) == 0


def test_pop_empty_returns_no_error():
    queue = ErrorQueue(2)
    error = queue.pop()
    assert error.code == 0
    assert error.info is None


def test_push_sets_registers():
    queue = ErrorQueue(4)
    assert queue.cmd_error is False
    queue.push(-113)
    queue.push(-222)
    assert queue.esr == EsrBit.CER | EsrBit.EER
    assert queue.stb & StbBit.QMA
    assert queue.cmd_error is True


def test_callbacks_and_qma_clearing():
    events = []
    queue = ErrorQueue(4, events.append)
    queue.push(-113)
    queue.push(-109)
    queue.pop()
    assert events == [-113, -109]
    queue.pop()
    assert events == [-113, -109, 0]
    assert not queue.stb & StbBit.QMA
    queue.pop()
    assert events == [-113, -109, 0]


def test_overflow_replaces_newest():
    events = []
    queue = ErrorQueue(2, events.append)
    assert queue.push(-113) is True
    assert queue.push(-109) is True
    assert queue.push(-222) is False
    assert events == [-113, -109, -222, QUEUE_OVERFLOW]
    assert len(queue) == 2
    assert queue.pop().code == -113
    assert queue.pop().code == QUEUE_OVERFLOW
    assert queue.esr & EsrBit.EER


def test_clear_emits_no_error():
    events = []
    queue = ErrorQueue(3, events.append)
    queue.push(-113)
    queue.clear()
    assert len(queue) == 0
    assert events == [-113, 0]
    assert not queue.stb & StbBit.QMA


def test_message_property():
    assert ScpiError(INTERLOCK_OPEN).message == translate(INTERLOCK_OPEN)
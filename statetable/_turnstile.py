# -*- test-case-name: statetable._test.test_turnstile -*-
"""
The two-coin turnstile: a L{TransitionTable} that admits one passenger for
every two coins, sounds an alarm on an unpaid passage, and waits for a reset.
"""
from __future__ import annotations

from enum import Enum
from typing import Protocol

from ._core import StateMachine, TransitionTable


class TurnstileState(Enum):
    Locked0 = "Locked0"
    Locked1 = "Locked1"
    Unlocked = "Unlocked"
    Alarming = "Alarming"

    def __str__(self) -> str:
        return self.value


class TurnstileEvent(Enum):
    Coin = "Coin"
    Pass = "Pass"
    Reset = "Reset"

    def __str__(self) -> str:
        return self.value


class TurnstileActions(Protocol):
    """
    The hardware (or test double) a L{TwoCoinTurnstile} drives.
    """

    def unlock(self) -> None:
        ...

    def lock(self) -> None:
        ...

    def alarmOn(self) -> None:
        ...

    def alarmOff(self) -> None:
        ...

    def thankyou(self) -> None:
        ...

    def unhandledTransition(
        self, state: TurnstileState, event: TurnstileEvent
    ) -> None:
        ...


S = TurnstileState
E = TurnstileEvent

TURNSTILE_TABLE = TransitionTable.fromTransitions(S.Locked0, [
    # state     event    next state  actions
    (S.Locked0, E.Coin,  S.Locked1,  []),
    (S.Locked1, E.Coin,  S.Unlocked, ["unlock"]),
    (S.Unlocked, E.Coin, S.Unlocked, ["thankyou"]),
    (S.Locked0, E.Pass,  S.Alarming, ["alarmOn"]),
    (S.Locked1, E.Pass,  S.Alarming, ["alarmOn"]),
    (S.Unlocked, E.Pass, S.Locked0,  ["lock"]),
    (S.Alarming, E.Reset, S.Locked0, ["alarmOff", "lock"]),
])

del S, E

# The same machine, in the form read by statetable.compileFSM.
TWO_COIN_TURNSTILE_FSM = """\
Actions: TurnstileActions
FSM: TwoCoinTurnstile
Initial: Locked0
{
    Locked0 {
        Coin    Locked1     -
        Pass    Alarming    alarmOn
    }
    Locked1 {
        Coin    Unlocked    unlock
        Pass    Alarming    alarmOn
    }
    Unlocked {
        Coin    -           thankyou
        Pass    Locked0     lock
    }
    Alarming    Reset   Locked0     {alarmOff lock}
}
"""


class TwoCoinTurnstile(object):
    """
    A turnstile that starts out L{TurnstileState.Locked0} and reports what
    it does to C{actions}.
    """

    def __init__(self, actions: TurnstileActions) -> None:
        self._machine = StateMachine(TURNSTILE_TABLE, actions)

    @property
    def state(self) -> TurnstileState:
        return self._machine.state

    def process(self, event: TurnstileEvent) -> None:
        self._machine.process(event)

    def setTrace(self, tracer) -> None:
        self._machine.setTrace(tracer)

    def Coin(self) -> None:
        "A coin was inserted."
        self.process(TurnstileEvent.Coin)

    def Pass(self) -> None:
        "Someone walked through."
        self.process(TurnstileEvent.Pass)

    def Reset(self) -> None:
        "The attendant reset the turnstile."
        self.process(TurnstileEvent.Reset)

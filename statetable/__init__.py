# -*- test-case-name: statetable -*-
from ._core import (
    ReentrantDispatch,
    StateMachine,
    Transition,
    TransitionTable,
    Unhandled,
)
from ._generate import generatePython
from ._syntax import (
    FsmSemanticError,
    FsmSyntaxError,
    compileFSM,
    compileFSMFile,
    parseFSM,
)
from ._turnstile import (
    TURNSTILE_TABLE,
    TWO_COIN_TURNSTILE_FSM,
    TurnstileActions,
    TurnstileEvent,
    TurnstileState,
    TwoCoinTurnstile,
)

__all__ = [
    'TransitionTable',
    'Transition',
    'Unhandled',
    'StateMachine',
    'ReentrantDispatch',
    'compileFSM',
    'compileFSMFile',
    'parseFSM',
    'generatePython',
    'FsmSyntaxError',
    'FsmSemanticError',
    'TURNSTILE_TABLE',
    'TWO_COIN_TURNSTILE_FSM',
    'TurnstileActions',
    'TurnstileEvent',
    'TurnstileState',
    'TwoCoinTurnstile',
]

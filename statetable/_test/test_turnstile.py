"""
Tests for the two-coin turnstile.
"""
from itertools import product
from unittest import TestCase

from .. import (
    TURNSTILE_TABLE,
    TWO_COIN_TURNSTILE_FSM,
    TurnstileEvent,
    TurnstileState,
    TwoCoinTurnstile,
    compileFSM,
)


class RecordingActions(object):
    """
    Spells out what the turnstile asked for, one letter per action.
    """

    def __init__(self):
        self.output = ""

    def unlock(self):
        self.output += "U"

    def lock(self):
        self.output += "L"

    def alarmOn(self):
        self.output += "A"

    def alarmOff(self):
        self.output += "O"

    def thankyou(self):
        self.output += "T"

    def unhandledTransition(self, state, event):
        self.output += "X({},{})".format(state, event)


class TwoCoinTurnstileTests(TestCase):
    """
    Tests for L{TwoCoinTurnstile}.
    """

    def setUp(self):
        self.actions = RecordingActions()
        self.turnstile = TwoCoinTurnstile(self.actions)

    def test_initialState(self):
        self.assertIs(self.turnstile.state, TurnstileState.Locked0)

    def test_normal(self):
        """
        Two coins unlock the turnstile; passing through locks it again.
        """
        self.turnstile.Coin()
        self.turnstile.Coin()
        self.turnstile.Pass()
        self.assertEqual(self.actions.output, "UL")
        self.assertIs(self.turnstile.state, TurnstileState.Locked0)

    def test_oneCoinAttempt(self):
        self.turnstile.Coin()
        self.turnstile.Pass()
        self.assertEqual(self.actions.output, "A")
        self.assertIs(self.turnstile.state, TurnstileState.Alarming)

    def test_alarmReset(self):
        self.turnstile.Pass()
        self.turnstile.Reset()
        self.assertEqual(self.actions.output, "AOL")
        self.assertIs(self.turnstile.state, TurnstileState.Locked0)

    def test_extraCoins(self):
        """
        Every coin after the turnstile is unlocked gets a thank-you.
        """
        for _ in range(4):
            self.turnstile.Coin()
        self.turnstile.Pass()
        self.assertEqual(self.actions.output, "UTTL")

    def test_resetWhenLocked(self):
        """
        Resetting a turnstile that is not alarming is unhandled and leaves
        it where it was.
        """
        self.turnstile.Reset()
        self.assertEqual(self.actions.output, "X(Locked0,Reset)")
        self.assertIs(self.turnstile.state, TurnstileState.Locked0)

    def test_alarmingIgnoresCoinsAndPasses(self):
        self.turnstile.Pass()
        self.turnstile.Coin()
        self.turnstile.Pass()
        self.assertEqual(self.actions.output,
                         "AX(Alarming,Coin)X(Alarming,Pass)")
        self.assertIs(self.turnstile.state, TurnstileState.Alarming)

    def test_eventWrappersMatchProcess(self):
        """
        C{Coin}, C{Pass} and C{Reset} behave exactly like passing the
        corresponding L{TurnstileEvent} to C{process}.
        """
        other = RecordingActions()
        direct = TwoCoinTurnstile(other)
        for event in [TurnstileEvent.Pass, TurnstileEvent.Reset,
                      TurnstileEvent.Coin, TurnstileEvent.Coin,
                      TurnstileEvent.Coin, TurnstileEvent.Pass]:
            getattr(self.turnstile, event.value)()
            direct.process(event)
        self.assertEqual(self.actions.output, other.output)
        self.assertIs(self.turnstile.state, direct.state)

    def test_everyStateAndEvent(self):
        """
        From every state, every event produces either the table's actions
        and next state or a single unhandled report, and the turnstile is
        always in one of the four declared states.
        """
        routes = {
            TurnstileState.Locked0: [],
            TurnstileState.Locked1: [TurnstileEvent.Coin],
            TurnstileState.Unlocked: [TurnstileEvent.Coin] * 2,
            TurnstileState.Alarming: [TurnstileEvent.Pass],
        }
        for state, event in product(TurnstileState, TurnstileEvent):
            actions = RecordingActions()
            turnstile = TwoCoinTurnstile(actions)
            for step in routes[state]:
                turnstile.process(step)
            self.assertIs(turnstile.state, state)
            actions.output = ""
            turnstile.process(event)
            self.assertIn(turnstile.state, list(TurnstileState))
            outcome = TURNSTILE_TABLE.outcomeFor(state, event)
            if hasattr(outcome, "nextState"):
                self.assertIs(turnstile.state, outcome.nextState)
                self.assertNotIn("X", actions.output)
                self.assertEqual(len(actions.output), len(outcome.actions))
            else:
                self.assertIs(turnstile.state, state)
                self.assertEqual(actions.output,
                                 "X({},{})".format(state, event))

    def test_longRun(self):
        """
        However many events it gets, the turnstile stays in a declared
        state.
        """
        events = list(TurnstileEvent)
        for n in range(300):
            self.turnstile.process(events[(n * 7 + n // 5) % 3])
            self.assertIn(self.turnstile.state, list(TurnstileState))

    def test_trace(self):
        """
        C{setTrace} sees each matched transition and each action.
        """
        traces = []

        def tracer(old, event, new):
            traces.append((str(old), str(event), str(new)))
            return traces.append

        self.turnstile.setTrace(tracer)
        self.turnstile.Pass()
        self.turnstile.Reset()
        self.assertEqual(traces, [
            ("Locked0", "Pass", "Alarming"), "alarmOn",
            ("Alarming", "Reset", "Locked0"), "alarmOff", "lock",
        ])


class TurnstileDescriptionTests(TestCase):
    """
    The textual description of the turnstile describes the same machine as
    L{TURNSTILE_TABLE}.
    """

    def test_sameTransitions(self):
        compiled = compileFSM(TWO_COIN_TURNSTILE_FSM)
        self.assertEqual(compiled.name, "TwoCoinTurnstile")
        self.assertEqual(compiled.actionsName, "TurnstileActions")
        self.assertEqual(compiled.table.initialState, "Locked0")

        def asStrings(table):
            return set((str(t.state), str(t.event), str(t.nextState),
                        t.actions) for t in table.allTransitions())

        self.assertEqual(asStrings(compiled.table),
                         asStrings(TURNSTILE_TABLE))

    def test_compiledScenarios(self):
        """
        A machine built from the description produces the same outputs as
        L{TwoCoinTurnstile}.
        """
        compiled = compileFSM(TWO_COIN_TURNSTILE_FSM)
        for events, expected in [
                ("Coin Coin Pass", "UL"),
                ("Coin Pass", "A"),
                ("Pass Reset", "AOL"),
                ("Coin Coin Coin Coin Pass", "UTTL"),
                ("Reset", "X(Locked0,Reset)"),
        ]:
            actions = RecordingActions()
            machine = compiled.machine(actions)
            for event in events.split():
                machine.process(event)
            self.assertEqual(actions.output, expected)

# -*- test-case-name: statetable._test.test_core -*-

"""
A core state-machine abstraction: an immutable transition table and the
dispatcher that walks it.
"""

from itertools import chain

import attr


@attr.s(frozen=True)
class Transition(object):
    """
    One row of a L{TransitionTable}: in C{state}, C{event} moves the machine
    to C{nextState} after invoking each of C{actions} in order.
    """
    state = attr.ib()
    event = attr.ib()
    nextState = attr.ib()
    actions = attr.ib(converter=tuple, default=())


@attr.s(frozen=True)
class Unhandled(object):
    """
    The outcome of looking up an event for which the table has no row.

    @ivar state: the state the machine was in.
    @ivar event: the event that matched nothing.
    """
    state = attr.ib()
    event = attr.ib()


class ReentrantDispatch(RuntimeError):
    """
    L{StateMachine.process} was called on a machine that is already in the
    middle of processing another event, most likely from inside an action.

    @param state: the state the machine was leaving when the nested call was
        made.

    @param event: the event that was being processed.

    @param nested: the event passed to the rejected call.
    """

    def __init__(self, state, event, nested):
        self.state = state
        self.event = event
        self.nested = nested
        super(ReentrantDispatch, self).__init__(
            "cannot process {} while processing {} in {}".format(
                nested, event, state)
        )


def _indexTransitions(transitions):
    index = {}
    for transition in transitions:
        key = (transition.state, transition.event)
        if key in index:
            raise ValueError(
                "already have transition from {} via {}".format(
                    transition.state, transition.event))
        index[key] = transition
    return index


@attr.s(frozen=True, eq=False, repr=False)
class TransitionTable(object):
    """
    A declaration of a finite state machine.

    Note that this is not the machine itself; it is immutable, and any
    number of L{StateMachine}s may share it.
    """
    initialState = attr.ib()
    _transitions = attr.ib(converter=tuple)
    _index = attr.ib(init=False)

    @_index.default
    def _buildIndex(self):
        return _indexTransitions(self._transitions)

    @classmethod
    def fromTransitions(cls, initialState, transitions):
        """
        Build a table from an initial state and an iterable of
        L{Transition}s or C{(state, event, nextState, actions)} tuples.

        :raises ValueError: if two rows share a state and an event.
        """
        rows = []
        for row in transitions:
            if not isinstance(row, Transition):
                row = Transition(*row)
            rows.append(row)
        return cls(initialState, rows)

    def __eq__(self, other):
        if not isinstance(other, TransitionTable):
            return NotImplemented
        return (self.initialState == other.initialState and
                self.allTransitions() == other.allTransitions())

    def __hash__(self):
        return hash((self.initialState, self.allTransitions()))

    def __repr__(self):
        return "<TransitionTable initial={!r} transitions={}>".format(
            self.initialState, len(self._transitions))

    def allTransitions(self):
        """
        All transitions.
        """
        return frozenset(self._transitions)

    def inputAlphabet(self):
        """
        The full set of events acceptable to this table.
        """
        return set(t.event for t in self._transitions)

    def outputAlphabet(self):
        """
        The full set of actions which can be invoked by this table.
        """
        return set(chain.from_iterable(t.actions for t in self._transitions))

    def states(self):
        """
        All valid states;
        "Q" in the mathematical description of a state machine.
        """
        return frozenset(
            chain([self.initialState],
                  chain.from_iterable((t.state, t.nextState)
                                      for t in self._transitions))
        )

    def outcomeFor(self, currentState, event):
        """
        Find the transition that corresponds to the given starting state and
        event.

        :rtype: Union[Transition, Unhandled]
        :return: the matching L{Transition}, or L{Unhandled} if there is no
            match for the starting state and event pair.
        """
        transition = self._index.get((currentState, event))
        if transition is None:
            return Unhandled(state=currentState, event=event)
        return transition

    def asDigraph(self):
        """
        Generate a L{graphviz.Digraph} that represents this table's
        states and transitions.

        @return: L{graphviz.Digraph} object; for more information, please
            see the documentation for
            U{graphviz<https://graphviz.readthedocs.io/>}
        """
        from ._visualize import makeDigraph
        return makeDigraph(self)


UNHANDLED_TRANSITION = "unhandledTransition"


def _checkActions(table, actions):
    missing = sorted(
        name for name in table.outputAlphabet() | {UNHANDLED_TRANSITION}
        if not callable(getattr(actions, name, None))
    )
    if missing:
        raise TypeError(
            "{!r} does not provide action(s) {}".format(
                actions, ", ".join(missing))
        )


class StateMachine(object):
    """
    The combination of a current state, a L{TransitionTable}, and the
    object whose methods the table's actions name.
    """

    def __init__(self, table, actions):
        _checkActions(table, actions)
        self._table = table
        self._actions = actions
        self._state = table.initialState
        self._tracer = None
        self._dispatching = False
        self._processing = None

    @property
    def state(self):
        """
        The state this machine is currently in.
        """
        return self._state

    def setTrace(self, tracer):
        """
        Install C{tracer}, called as C{tracer(oldState, event, newState)} for
        every matched transition before its actions run.  If it returns a
        callable, that is called with each action's name just before the
        action is invoked.  C{None} removes the tracer.
        """
        self._tracer = tracer

    def process(self, event):
        """
        Deliver C{event}: run the actions of the matching transition in order
        and then enter its next state, or report the pair to the actions'
        C{unhandledTransition} and stay put.

        :raises ReentrantDispatch: if called from inside an action.
        """
        if self._dispatching:
            raise ReentrantDispatch(self._state, self._processing, event)
        outcome = self._table.outcomeFor(self._state, event)
        self._dispatching = True
        self._processing = event
        try:
            if isinstance(outcome, Unhandled):
                self._actions.unhandledTransition(outcome.state, outcome.event)
                return
            outTracer = None
            if self._tracer:
                outTracer = self._tracer(outcome.state, outcome.event,
                                         outcome.nextState)
            for action in outcome.actions:
                if outTracer:
                    outTracer(action)
                getattr(self._actions, action)()
            self._state = outcome.nextState
        finally:
            self._dispatching = False
            self._processing = None

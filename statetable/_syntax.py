# -*- test-case-name: statetable._test.test_syntax -*-

"""
Compile the textual FSM description language into a L{TransitionTable}.

A description looks like this::

    Actions: Turnstile
    FSM: OneCoinTurnstile
    Initial: Locked
    {
        Locked   Coin  Unlocked  unlock
        Locked   Pass  Locked    alarm
        Unlocked {
            Coin  -       thankyou
            Pass  Locked  lock
        }
    }

Each transition is a state, an event, a next state (C{-} to stay put), and
either a single action, a braced list of actions, or C{-} for none.

The parser is itself a L{StateMachine}: tokens are its events, and the
actions it runs build up an L{FsmSyntax}.
"""

import io
import re

import attr

from ._core import StateMachine, TransitionTable, Transition


@attr.s(frozen=True)
class Token(object):
    kind = attr.ib()
    value = attr.ib()
    line = attr.ib()
    position = attr.ib()


NAME = "NAME"
OPEN_BRACE = "OPEN_BRACE"
CLOSED_BRACE = "CLOSED_BRACE"
OPEN_PAREN = "OPEN_PAREN"
CLOSED_PAREN = "CLOSED_PAREN"
OPEN_ANGLE = "OPEN_ANGLE"
CLOSED_ANGLE = "CLOSED_ANGLE"
DASH = "DASH"
COLON = "COLON"
EOF = "EOF"

_punctuation = {
    "{": OPEN_BRACE,
    "}": CLOSED_BRACE,
    "(": OPEN_PAREN,
    ")": CLOSED_PAREN,
    "<": OPEN_ANGLE,
    ">": CLOSED_ANGLE,
    "-": DASH,
    "*": DASH,
    ":": COLON,
}

_whitespace = re.compile(r"\s+|//.*")
_name = re.compile(r"\w+")


def lex(text):
    """
    Split C{text} into L{Token}s.  Characters that begin no token yield a
    token of kind C{None}.  The last token is always C{EOF}.

    Lines and positions are 1-based.
    """
    lineNumber = 0
    for lineNumber, line in enumerate(text.split("\n"), 1):
        position = 0
        while position < len(line):
            match = _whitespace.match(line, position)
            if match:
                position = match.end()
                continue
            character = line[position]
            if character in _punctuation:
                yield Token(_punctuation[character], character,
                            lineNumber, position + 1)
                position += 1
                continue
            match = _name.match(line, position)
            if match:
                yield Token(NAME, match.group(), lineNumber, position + 1)
                position = match.end()
                continue
            yield Token(None, character, lineNumber, position + 1)
            position += 1
    yield Token(EOF, "", max(lineNumber, 1), 0)


@attr.s(frozen=True)
class Header(object):
    name = attr.ib()
    value = attr.ib()


@attr.s
class SubTransition(object):
    """
    C{event} moves to C{nextState} (C{None} means "the same state") after
    running C{actions}.
    """
    event = attr.ib()
    nextState = attr.ib(default=None)
    actions = attr.ib(default=attr.Factory(list))


@attr.s
class StateBlock(object):
    state = attr.ib()
    subTransitions = attr.ib(default=attr.Factory(list))


@attr.s(frozen=True)
class SyntaxErrorRecord(object):
    """
    One problem found while parsing.

    @ivar kind: which part of the grammar the parser was in: C{"HEADER"},
        C{"STATE"}, C{"TRANSITION"}, C{"TRANSITION_GROUP"}, C{"END"}, or
        C{"SYNTAX"} for characters that are not part of any token.
    """
    kind = attr.ib()
    message = attr.ib()
    line = attr.ib()
    position = attr.ib()

    def __str__(self):
        return "Syntax Error Line: {}, Position: {}.  ({}) {}".format(
            self.line, self.position, self.kind, self.message)


@attr.s
class FsmSyntax(object):
    """
    The parsed, but not yet analyzed, form of an FSM description.
    """
    headers = attr.ib(default=attr.Factory(list))
    logic = attr.ib(default=attr.Factory(list))
    errors = attr.ib(default=attr.Factory(list))
    done = attr.ib(default=False)


class FsmSyntaxError(ValueError):
    """
    An FSM description could not be parsed.

    @ivar errors: every L{SyntaxErrorRecord} found, in order.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super(FsmSyntaxError, self).__init__(
            "\n".join(str(error) for error in self.errors))


_errorKinds = {
    "HEADER": "HEADER",
    "HEADER_COLON": "HEADER",
    "HEADER_VALUE": "HEADER",
    "STATE_SPEC": "STATE",
    "STATE_MODIFIER": "STATE",
    "SINGLE_EVENT": "TRANSITION",
    "SINGLE_NEXT_STATE": "TRANSITION",
    "SINGLE_ACTION_GROUP": "TRANSITION",
    "SINGLE_ACTION_GROUP_NAME": "TRANSITION",
    "SUBTRANSITION_GROUP": "TRANSITION_GROUP",
    "GROUP_EVENT": "TRANSITION_GROUP",
    "GROUP_NEXT_STATE": "TRANSITION_GROUP",
    "GROUP_ACTION_GROUP": "TRANSITION_GROUP",
    "GROUP_ACTION_GROUP_NAME": "TRANSITION_GROUP",
    "END": "END",
}


PARSER_TABLE = TransitionTable.fromTransitions("HEADER", [
    ("HEADER", NAME, "HEADER_COLON", ["newHeaderWithName"]),
    ("HEADER", OPEN_BRACE, "STATE_SPEC", []),
    ("HEADER_COLON", COLON, "HEADER_VALUE", []),
    ("HEADER_VALUE", NAME, "HEADER", ["addHeaderWithValue"]),
    ("STATE_SPEC", NAME, "STATE_MODIFIER", ["setStateName"]),
    ("STATE_SPEC", CLOSED_BRACE, "END", ["done"]),
    ("STATE_MODIFIER", NAME, "SINGLE_EVENT", ["setEvent"]),
    ("STATE_MODIFIER", OPEN_BRACE, "SUBTRANSITION_GROUP", []),
    ("SINGLE_EVENT", NAME, "SINGLE_NEXT_STATE", ["setNextState"]),
    ("SINGLE_EVENT", DASH, "SINGLE_NEXT_STATE", []),
    ("SINGLE_NEXT_STATE", NAME, "STATE_SPEC",
     ["addAction", "finishTransition"]),
    ("SINGLE_NEXT_STATE", DASH, "STATE_SPEC", ["finishTransition"]),
    ("SINGLE_NEXT_STATE", OPEN_BRACE, "SINGLE_ACTION_GROUP", []),
    ("SINGLE_ACTION_GROUP", NAME, "SINGLE_ACTION_GROUP_NAME", ["addAction"]),
    ("SINGLE_ACTION_GROUP", CLOSED_BRACE, "STATE_SPEC", ["finishTransition"]),
    ("SINGLE_ACTION_GROUP_NAME", NAME, "SINGLE_ACTION_GROUP_NAME",
     ["addAction"]),
    ("SINGLE_ACTION_GROUP_NAME", CLOSED_BRACE, "STATE_SPEC",
     ["finishTransition"]),
    ("SUBTRANSITION_GROUP", CLOSED_BRACE, "STATE_SPEC", []),
    ("SUBTRANSITION_GROUP", NAME, "GROUP_EVENT", ["setEvent"]),
    ("GROUP_EVENT", NAME, "GROUP_NEXT_STATE", ["setNextState"]),
    ("GROUP_EVENT", DASH, "GROUP_NEXT_STATE", []),
    ("GROUP_NEXT_STATE", NAME, "SUBTRANSITION_GROUP",
     ["addAction", "finishTransition"]),
    ("GROUP_NEXT_STATE", DASH, "SUBTRANSITION_GROUP", ["finishTransition"]),
    ("GROUP_NEXT_STATE", OPEN_BRACE, "GROUP_ACTION_GROUP", []),
    ("GROUP_ACTION_GROUP", NAME, "GROUP_ACTION_GROUP_NAME", ["addAction"]),
    ("GROUP_ACTION_GROUP", CLOSED_BRACE, "SUBTRANSITION_GROUP",
     ["finishTransition"]),
    ("GROUP_ACTION_GROUP_NAME", NAME, "GROUP_ACTION_GROUP_NAME",
     ["addAction"]),
    ("GROUP_ACTION_GROUP_NAME", CLOSED_BRACE, "SUBTRANSITION_GROUP",
     ["finishTransition"]),
    ("END", EOF, "END", []),
])


class SyntaxBuilder(object):
    """
    The actions of L{PARSER_TABLE}; accumulates an L{FsmSyntax}.
    """

    def __init__(self):
        self.fsm = FsmSyntax()
        self._token = None
        self._headerName = None
        self._block = None
        self._subTransition = None

    def setToken(self, token):
        self._token = token

    def newHeaderWithName(self):
        self._headerName = self._token.value

    def addHeaderWithValue(self):
        self.fsm.headers.append(Header(self._headerName, self._token.value))

    def setStateName(self):
        self._block = StateBlock(self._token.value)
        self.fsm.logic.append(self._block)

    def setEvent(self):
        self._subTransition = SubTransition(self._token.value)

    def setNextState(self):
        self._subTransition.nextState = self._token.value

    def addAction(self):
        self._subTransition.actions.append(self._token.value)

    def finishTransition(self):
        self._block.subTransitions.append(self._subTransition)
        self._subTransition = None

    def done(self):
        self.fsm.done = True

    def syntaxError(self):
        self.fsm.errors.append(SyntaxErrorRecord(
            "SYNTAX", "unexpected character {!r}".format(self._token.value),
            self._token.line, self._token.position))

    def unhandledTransition(self, state, event):
        if event == EOF:
            found = "end of input"
        else:
            found = "{} {!r}".format(event, self._token.value)
        self.fsm.errors.append(SyntaxErrorRecord(
            _errorKinds[state], "unexpected {} in {}".format(found, state),
            self._token.line, self._token.position))


def parseFSM(text):
    """
    Parse C{text} without analyzing it.

    :rtype: FsmSyntax
    :raises FsmSyntaxError: if the text does not follow the grammar.
    """
    builder = SyntaxBuilder()
    parser = StateMachine(PARSER_TABLE, builder)
    for token in lex(text):
        builder.setToken(token)
        if token.kind is None:
            builder.syntaxError()
        else:
            parser.process(token.kind)
    if builder.fsm.errors:
        raise FsmSyntaxError(builder.fsm.errors)
    return builder.fsm


INVALID_HEADER = "INVALID_HEADER"
EXTRA_HEADER_IGNORED = "EXTRA_HEADER_IGNORED"
NO_FSM = "NO_FSM"
NO_INITIAL = "NO_INITIAL"
UNDEFINED_STATE = "UNDEFINED_STATE"
UNUSED_STATE = "UNUSED_STATE"
DUPLICATE_TRANSITION = "DUPLICATE_TRANSITION"


@attr.s(frozen=True)
class AnalysisError(object):
    """
    One semantic problem in a parsed FSM description.

    @ivar code: one of the module-level error codes, such as
        L{UNDEFINED_STATE}.

    @ivar extra: whatever the error is about: a header, a state name, or a
        C{"state(event)"} key.
    """
    code = attr.ib()
    extra = attr.ib(default=None)

    def __str__(self):
        if self.extra is None:
            return self.code
        return "{}: {}".format(self.code, self.extra)


class FsmSemanticError(ValueError):
    """
    An FSM description parsed but does not describe a valid machine.

    @ivar errors: every L{AnalysisError} found.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super(FsmSemanticError, self).__init__(
            "\n".join(str(error) for error in self.errors))


@attr.s(frozen=True)
class CompiledFSM(object):
    """
    The result of compiling an FSM description.

    @ivar name: the value of the C{FSM} header.
    @ivar actionsName: the value of the C{Actions} header, or C{None}.
    @ivar table: the L{TransitionTable}.
    """
    name = attr.ib()
    actionsName = attr.ib()
    table = attr.ib()

    def machine(self, actions):
        """
        Create a new L{StateMachine} for this table driving C{actions}.
        """
        return StateMachine(self.table, actions)


_headerNames = ("fsm", "actions", "initial")


def analyze(fsm):
    """
    Check a parsed FSM description and build its table.

    :type fsm: FsmSyntax
    :rtype: CompiledFSM
    :raises FsmSemanticError: if anything is wrong with it.
    """
    errors = []
    headers = {}
    for header in fsm.headers:
        key = header.name.lower()
        if key not in _headerNames:
            errors.append(AnalysisError(INVALID_HEADER, header))
        elif key in headers:
            errors.append(AnalysisError(EXTRA_HEADER_IGNORED, header))
        else:
            headers[key] = header.value
    if "fsm" not in headers:
        errors.append(AnalysisError(NO_FSM))
    if "initial" not in headers:
        errors.append(AnalysisError(NO_INITIAL))

    defined = []
    for block in fsm.logic:
        if block.state not in defined:
            defined.append(block.state)

    used = set()
    initial = headers.get("initial")
    if initial is not None:
        used.add(initial)
        if initial not in defined:
            errors.append(AnalysisError(UNDEFINED_STATE,
                                        "initial: " + initial))

    transitions = []
    seen = set()
    for block in fsm.logic:
        for sub in block.subTransitions:
            nextState = block.state if sub.nextState is None else sub.nextState
            used.add(nextState)
            if nextState not in defined:
                errors.append(AnalysisError(UNDEFINED_STATE, nextState))
            key = (block.state, sub.event)
            if key in seen:
                errors.append(AnalysisError(
                    DUPLICATE_TRANSITION,
                    "{}({})".format(block.state, sub.event)))
                continue
            seen.add(key)
            transitions.append(
                Transition(block.state, sub.event, nextState, sub.actions))

    for state in defined:
        if state not in used:
            errors.append(AnalysisError(UNUSED_STATE, state))

    if errors:
        raise FsmSemanticError(errors)
    return CompiledFSM(
        name=headers["fsm"],
        actionsName=headers.get("actions"),
        table=TransitionTable.fromTransitions(initial, transitions),
    )


def compileFSM(text):
    """
    Parse and analyze an FSM description.

    :rtype: CompiledFSM
    :raises FsmSyntaxError: if the text does not follow the grammar.
    :raises FsmSemanticError: if it parses but is not a valid machine.
    """
    return analyze(parseFSM(text))


def compileFSMFile(path):
    """
    Compile the FSM description in the file at C{path}.
    """
    with io.open(path, encoding="utf-8") as f:
        return compileFSM(f.read())

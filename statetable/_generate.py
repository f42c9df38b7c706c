# -*- test-case-name: statetable._test.test_generate -*-

"""
Generate a Python module from a compiled FSM description.

The module defines a state enum, an event enum, a L{typing.Protocol} for the
actions, the L{TransitionTable}, and a wrapper class with one method per
event; the same shape as L{statetable.TwoCoinTurnstile}.
"""

import argparse
import io
import keyword
import os
import sys

from ._syntax import compileFSMFile


_reservedMethods = frozenset(["state", "process", "setTrace"])
_moduleNames = frozenset(
    ["Enum", "Protocol", "StateMachine", "TransitionTable", "TABLE"])


def _checkIdentifier(kind, name):
    if (not name.isidentifier() or keyword.iskeyword(name)
            or name.startswith("_")):
        raise ValueError(
            "{} {!r} is not usable as a Python name".format(kind, name))


def _orderedStates(table):
    rest = sorted(table.states() - {table.initialState})
    return [table.initialState] + rest


def generatePython(compiled):
    """
    Produce the source of a Python module implementing C{compiled}.

    @param compiled: the machine to generate.
    @type compiled: L{CompiledFSM}
    @rtype: L{str}
    @raise ValueError: if a state, event, action or the machine's name
        cannot be spelled as a Python identifier, or an event would shadow
        one of the wrapper's own methods.
    """
    table = compiled.table
    name = compiled.name
    actionsName = compiled.actionsName or name + "Actions"
    stateEnum = name + "State"
    eventEnum = name + "Event"

    _checkIdentifier("FSM", name)
    _checkIdentifier("Actions", actionsName)
    classNames = [name, actionsName, stateEnum, eventEnum]
    for className in classNames:
        if className in _moduleNames or classNames.count(className) > 1:
            raise ValueError(
                "{!r} clashes with another name in the generated "
                "module".format(className))
    states = _orderedStates(table)
    events = sorted(table.inputAlphabet())
    actions = sorted(table.outputAlphabet())
    for state in states:
        _checkIdentifier("state", state)
    for event in events:
        _checkIdentifier("event", event)
        if event in _reservedMethods:
            raise ValueError(
                "event {!r} would shadow {}.{}".format(event, name, event))
    for action in actions:
        _checkIdentifier("action", action)

    stateIndex = dict((state, n) for n, state in enumerate(states))
    transitions = sorted(table.allTransitions(),
                         key=lambda t: (stateIndex[t.state], t.event))

    lines = [
        "# Generated by statetable-generate.  Do not edit.",
        "from enum import Enum",
        "from typing import Protocol",
        "",
        "from statetable import StateMachine, TransitionTable",
        "",
        "",
        "class {}(Enum):".format(stateEnum),
    ]
    for state in states:
        lines.append("    {} = {!r}".format(state, state))
    lines += [
        "",
        "    def __str__(self):",
        "        return self.value",
        "",
        "",
        "class {}(Enum):".format(eventEnum),
    ]
    for event in events:
        lines.append("    {} = {!r}".format(event, event))
    if not events:
        lines.append("    pass")
    else:
        lines += [
            "",
            "    def __str__(self):",
            "        return self.value",
        ]
    lines += [
        "",
        "",
        "class {}(Protocol):".format(actionsName),
    ]
    for action in actions:
        lines += [
            "    def {}(self) -> None:".format(action),
            "        ...",
            "",
        ]
    lines += [
        "    def unhandledTransition(self, state: {}, event: {}) -> None:"
        .format(stateEnum, eventEnum),
        "        ...",
        "",
        "",
        "TABLE = TransitionTable.fromTransitions({}.{}, [".format(
            stateEnum, table.initialState),
    ]
    for t in transitions:
        lines.append("    ({s}.{}, {e}.{}, {s}.{}, {!r}),".format(
            t.state, t.event, t.nextState, list(t.actions),
            s=stateEnum, e=eventEnum))
    lines += [
        "])",
        "",
        "",
        "class {}(object):".format(name),
        "    def __init__(self, actions: {}) -> None:".format(actionsName),
        "        self._machine = StateMachine(TABLE, actions)",
        "",
        "    @property",
        "    def state(self) -> {}:".format(stateEnum),
        "        return self._machine.state",
        "",
        "    def process(self, event: {}) -> None:".format(eventEnum),
        "        self._machine.process(event)",
        "",
        "    def setTrace(self, tracer) -> None:",
        "        self._machine.setTrace(tracer)",
    ]
    for event in events:
        lines += [
            "",
            "    def {}(self) -> None:".format(event),
            "        self.process({}.{})".format(eventEnum, event),
        ]
    return "\n".join(lines) + "\n"


def tool(_progname=sys.argv[0],
         _argv=sys.argv[1:],
         _compile=compileFSMFile,
         _print=print):
    """
    Entry point for command line utility.
    """

    DESCRIPTION = """
    Generate a Python module implementing an FSM description file.
    """
    argumentParser = argparse.ArgumentParser(
        prog=_progname,
        description=DESCRIPTION)
    argumentParser.add_argument('path',
                                help="An FSM description file.")
    argumentParser.add_argument('--quiet', '-q',
                                help="suppress output",
                                default=False,
                                action="store_true")
    argumentParser.add_argument('--output-directory', '-o',
                                help="Where to write the module.",
                                default=".")
    argumentParser.add_argument('--module-name', '-m',
                                help="The module's name; defaults to the"
                                " FSM header, lower-cased.",
                                default=None)
    args = argumentParser.parse_args(_argv)

    report = _print
    if args.quiet:
        def _print(*args):
            pass

    try:
        compiled = _compile(args.path)
        source = generatePython(compiled)
    except ValueError as e:
        report(args.path, "...failed to generate")
        report(str(e))
        return 1
    moduleName = args.module_name or compiled.name.lower()
    target = os.path.join(args.output_directory, moduleName + ".py")
    with io.open(target, "w", encoding="utf-8") as f:
        f.write(source)
    _print(compiled.name, "...wrote", target)
    return 0

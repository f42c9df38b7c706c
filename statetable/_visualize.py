# -*- test-case-name: statetable._test.test_visualize -*-
import argparse
import sys

import graphviz

from ._syntax import FsmSemanticError, FsmSyntaxError, compileFSMFile


def _gvquote(s):
    return '"{}"'.format(s.replace('"', r'\"'))


def _gvhtml(s):
    return '<{}>'.format(s)


def elementMaker(name, *children, **attrs):
    """
    Construct a string from the HTML element description.
    """
    formattedAttrs = ' '.join('{}={}'.format(key, _gvquote(str(value)))
                              for key, value in sorted(attrs.items()))
    formattedChildren = ''.join(children)
    return u'<{name} {attrs}>{children}</{name}>'.format(
        name=name,
        attrs=formattedAttrs,
        children=formattedChildren)


def tableMaker(inputLabel, outputLabels, port, _E=elementMaker):
    """
    Construct an HTML table to label a state transition.
    """
    colspan = {}
    if outputLabels:
        colspan['colspan'] = str(len(outputLabels))

    inputLabelCell = _E("td",
                        _E("font",
                           inputLabel,
                           face="menlo-italic"),
                        color="purple",
                        port=port,
                        **colspan)

    pointSize = {"point-size": "9"}
    outputLabelCells = [_E("td",
                           _E("font",
                              outputLabel,
                              **pointSize),
                           color="pink")
                        for outputLabel in outputLabels]

    rows = [_E("tr", inputLabelCell)]

    if outputLabels:
        rows.append(_E("tr", *outputLabelCells))

    return _E("table", *rows)


def _sortKey(transition):
    return (str(transition.state), str(transition.event))


def makeDigraph(table, stateAsString=str,
                inputAsString=str,
                outputAsString=str):
    """
    Produce a L{graphviz.Digraph} object from a transition table.
    """
    digraph = graphviz.Digraph(graph_attr={'pack': 'true',
                                           'dpi': '100'},
                               node_attr={'fontname': 'Menlo'},
                               edge_attr={'fontname': 'Menlo'})

    nodes = set()

    def maybeAddState(state):
        name = stateAsString(state)
        if name in nodes:
            return name
        if state == table.initialState:
            stateShape = "bold"
            fontName = "Menlo-Bold"
        else:
            stateShape = ""
            fontName = "Menlo"
        digraph.node(name,
                     fontname=fontName,
                     shape="ellipse",
                     style=stateShape,
                     color="blue")
        nodes.add(name)
        return name

    maybeAddState(table.initialState)
    for n, transition in enumerate(sorted(table.allTransitions(),
                                          key=_sortKey)):
        inState = maybeAddState(transition.state)
        outState = maybeAddState(transition.nextState)
        thisTransition = "t{}".format(n)

        port = "tableport"
        label = tableMaker(inputAsString(transition.event),
                           [outputAsString(action)
                            for action in transition.actions],
                           port=port)

        digraph.node(thisTransition,
                     label=_gvhtml(label), margin="0.2", shape="none")

        digraph.edge(inState,
                     '{}:{}:w'.format(thisTransition, port),
                     arrowhead="none")
        digraph.edge('{}:{}:e'.format(thisTransition, port),
                     outState)

    return digraph


def tool(_progname=sys.argv[0],
         _argv=sys.argv[1:],
         _compile=compileFSMFile,
         _print=print):
    """
    Entry point for command line utility.
    """

    DESCRIPTION = """
    Visualize an FSM description file as a graphviz graph.
    """
    EPILOG = """
    You must have the graphviz tool suite installed.  Please visit
    http://www.graphviz.org for more information.
    """
    argumentParser = argparse.ArgumentParser(
        prog=_progname,
        description=DESCRIPTION,
        epilog=EPILOG)
    argumentParser.add_argument('path',
                                help="An FSM description file.")
    argumentParser.add_argument('--quiet', '-q',
                                help="suppress output",
                                default=False,
                                action="store_true")
    argumentParser.add_argument('--dot-directory', '-d',
                                help="Where to write out .dot files.",
                                default=".statetable_visualize")
    argumentParser.add_argument('--image-directory', '-i',
                                help="Where to write out image files.",
                                default=".statetable_visualize")
    argumentParser.add_argument('--image-type', '-t',
                                help="The image format.",
                                choices=graphviz.FORMATS,
                                default='png')
    argumentParser.add_argument('--view', '-v',
                                help="View rendered graphs with"
                                " default image viewer",
                                default=False,
                                action="store_true")
    args = argumentParser.parse_args(_argv)

    explicitlySaveDot = (args.dot_directory
                         and (not args.image_directory
                              or args.image_directory != args.dot_directory))
    report = _print
    if args.quiet:
        def _print(*args):
            pass

    try:
        compiled = _compile(args.path)
    except (FsmSyntaxError, FsmSemanticError) as e:
        report(args.path, "...failed to compile")
        report(str(e))
        return 1
    name = compiled.name
    _print(name, '...compiled from', args.path)

    digraph = compiled.table.asDigraph()

    if explicitlySaveDot:
        digraph.save(filename="{}.dot".format(name),
                     directory=args.dot_directory)
        _print(name, "...wrote dot into", args.dot_directory)

    if args.image_directory:
        deleteDot = not args.dot_directory or explicitlySaveDot
        digraph.format = args.image_type
        digraph.render(filename="{}.dot".format(name),
                       directory=args.image_directory,
                       view=args.view,
                       cleanup=deleteDot)
        if deleteDot:
            msg = "...wrote image into"
        else:
            msg = "...wrote image and dot into"
        _print(name, msg, args.image_directory)
    return 0

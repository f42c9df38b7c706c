from statetable import StateMachine, TransitionTable

# A one-coin turnstile declared directly as a table.
table = TransitionTable.fromTransitions("locked", [
    # state     event         next state  actions
    ("locked",   "fare_paid",  "unlocked", ["disengage_lock"]),
    ("unlocked", "arm_turned", "locked",   ["engage_lock"]),
    ("locked",   "arm_turned", "locked",   ["nope"]),
])


class Lock(object):
    "A sample I/O device."

    def engage_lock(self):
        print("Locked.")

    def disengage_lock(self):
        print("Unlocked.")

    def nope(self):
        print("**Clunk!**  The turnstile doesn't move.")

    def unhandledTransition(self, state, event):
        print("Ignoring {} while {}.".format(event, state))


def tracer(oldState, event, newState):
    print("{} --{}--> {}".format(oldState, event, newState))


turner = StateMachine(table, Lock())
turner.setTrace(tracer)
turner.process("fare_paid")
turner.process("arm_turned")
turner.process("arm_turned")
turner.process("fare_paid")
turner.process("fare_paid")
turner.process("arm_turned")

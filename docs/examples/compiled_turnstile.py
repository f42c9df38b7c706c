import os

from statetable import compileFSMFile

here = os.path.dirname(os.path.abspath(__file__))
compiled = compileFSMFile(os.path.join(here, "turnstile.sm"))


class Printer(object):
    def __getattr__(self, name):
        def action(*args):
            print(name, *args)
        return action


machine = compiled.machine(Printer())
for event in "Coin Coin Pass Pass Reset Reset".split():
    machine.process(event)
print("ended in", machine.state)

from statetable import TwoCoinTurnstile


class Gate(object):
    "A sample I/O device."

    def unlock(self):
        print("Unlocked.")

    def lock(self):
        print("Locked.")

    def alarmOn(self):
        print("**WEE-OOO**  Pay your fare!")

    def alarmOff(self):
        print("Alarm silenced.")

    def thankyou(self):
        print("Thank you for the donation.")

    def unhandledTransition(self, state, event):
        print("**Clunk!**  {} does nothing while {}.".format(event, state))


turner = TwoCoinTurnstile(Gate())
turner.Coin()
turner.Coin()
turner.Coin()
turner.Pass()
turner.Coin()
turner.Pass()
turner.Coin()
turner.Reset()

# counter.py
import threading


class InvocationCounter:
    """Process-wide invocation sequence. Starts at 0, first call returns 1.

    Memory only: a new execution environment starts counting again.
    """

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def increment_and_fetch(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        return self._value


INVOCATION_COUNT = InvocationCounter()

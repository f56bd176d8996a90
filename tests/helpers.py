"""Shared helpers for watcher tests."""


class ScriptedSleep:
    """Stand-in for time.sleep that mutates files between poll cycles.

    Each call runs the next scripted step. Once the script is used up a few
    idle calls are allowed, then the test fails instead of hanging.
    """

    def __init__(self, *steps, idle_limit: int = 5):
        self._steps = list(steps)
        self._idle_left = idle_limit
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)
        if self._steps:
            self._steps.pop(0)()
            return
        self._idle_left -= 1
        if self._idle_left < 0:
            raise AssertionError("watch loop did not stop")


def append(path, data):
    if isinstance(data, str):
        data = data.encode("utf-8")
    with open(path, "ab") as fh:
        fh.write(data)


def rotate(path, data=b""):
    """Rename ``path`` to an archive name and create a fresh file in its place."""
    path.rename(path.with_suffix(".archive"))
    path.write_bytes(data.encode("utf-8") if isinstance(data, str) else data)

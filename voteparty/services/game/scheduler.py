from typing import Callable, Optional


class RoundTimer:
    """One cancellable once-a-second countdown.

    Every ``arm`` cancels the previous countdown and hands out a new
    generation number. The background worker stops as soon as the
    generation it was started with is no longer current, and every tick it
    delivers carries that generation so the receiver can drop stale ones.

    - ``start_task(fn, *args)`` runs ``fn`` in the background
      (``socketio.start_background_task`` at runtime)
    - ``sleep(seconds)`` must cooperate with the server's async mode
      (``socketio.sleep``)
    - ``on_tick(generation)`` is called once per elapsed second
    """

    def __init__(self, start_task: Callable, sleep: Callable[[float], None], on_tick: Callable[[int], None],
                 interval: float = 1.0):
        self._start_task = start_task
        self._sleep = sleep
        self._on_tick = on_tick
        self.interval = interval
        self.generation = 0
        self.active = False

    def arm(self) -> int:
        self.cancel()
        self.active = True
        self._start_task(self._worker, self.generation)
        return self.generation

    def cancel(self) -> None:
        self.generation += 1
        self.active = False

    def is_current(self, generation: Optional[int]) -> bool:
        return self.active and generation == self.generation

    def _worker(self, generation: int) -> None:
        while self.is_current(generation):
            self._sleep(self.interval)
            if not self.is_current(generation):
                return
            self._on_tick(generation)

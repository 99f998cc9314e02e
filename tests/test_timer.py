from voteparty.services.game.scheduler import RoundTimer


class CapturingTasks:
    def __init__(self):
        self.tasks = []

    def start(self, fn, *args):
        self.tasks.append((fn, args))

    def run(self, index=-1):
        fn, args = self.tasks[index]
        fn(*args)


def test_arm_cancels_previous_countdown():
    tasks = CapturingTasks()
    timer = RoundTimer(tasks.start, lambda _: None, lambda generation: None)
    first = timer.arm()
    second = timer.arm()
    assert second != first
    assert not timer.is_current(first)
    assert timer.is_current(second)
    assert len(tasks.tasks) == 2


def test_worker_ticks_until_cancelled():
    tasks = CapturingTasks()
    ticks = []
    timer = None

    def on_tick(generation):
        ticks.append(generation)
        if len(ticks) == 3:
            timer.cancel()

    timer = RoundTimer(tasks.start, lambda _: None, on_tick)
    generation = timer.arm()
    tasks.run()
    assert ticks == [generation] * 3
    assert not timer.active


def test_superseded_worker_stops_without_ticking():
    tasks = CapturingTasks()
    ticks = []
    timer = RoundTimer(tasks.start, lambda _: None, ticks.append)

    def sleep(_):
        # a new round is armed while the first worker sleeps
        if len(tasks.tasks) == 1:
            timer.arm()

    timer._sleep = sleep
    timer.arm()
    tasks.run(0)
    assert ticks == []
    assert timer.active


def test_sleep_interval_is_passed_through():
    tasks = CapturingTasks()
    slept = []
    timer = None

    def sleep(seconds):
        slept.append(seconds)
        timer.cancel()

    timer = RoundTimer(tasks.start, sleep, lambda generation: None)
    timer.arm()
    tasks.run()
    assert slept == [1.0]

from robot_slalom.motion import blend
from robot_slalom.state import SlalomConfig


class ControlLoop:
    """Один цикл управления: смешать намерения, отдать команду, сдвинуть счётчик.

    Args:
        state: общее ControllerState
        config: SlalomConfig (частота цикла)
        emit: приёмник команды, вызывается с MotionIntent каждый цикл
        logger: логгер узла (get_logger()) или None
    """

    def __init__(self, state, config=None, emit=None, logger=None):
        self.state = state
        self.config = config or SlalomConfig()
        self.emit = emit
        self.logger = logger

    @property
    def period(self):
        return self.config.period

    @property
    def finished(self):
        with self.state.lock:
            return self.state.should_terminate

    def tick(self):
        with self.state.lock:
            # Финиш уже достигнут - больше команд не выдаём
            if self.state.should_terminate:
                return None
            command = blend(self.state.goal_intent,
                            self.state.target_intent,
                            self.state.avoidance_intent)
            cycle = self.state.cycle_number

        if self.logger is not None:
            self.logger.debug(f"Cycle {cycle}: {command.describe()}")
        if self.emit is not None:
            self.emit(command)

        with self.state.lock:
            self.state.cycle_number += 1
        return command

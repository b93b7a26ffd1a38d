from robot_slalom.depth import nearest_sample
from robot_slalom.state import SlalomConfig


class ObstacleAvoidanceMonitor:
    """Превращает кадры глубины в намерение избегания препятствий.

    Держит гистерезис выбора стороны объезда: сторона меняется только при
    входе в режим избегания и не чаще раза в side_switch_cycles циклов.
    """

    def __init__(self, state, config=None, logger=None):
        self.state = state
        self.config = config or SlalomConfig()
        self.logger = logger

    def on_depth_frame(self, samples):
        cfg = self.config
        # Ближайшая точка считается вне блокировки, состояние меняется под ней
        closest = nearest_sample(samples)

        with self.state.lock:
            state = self.state
            state.avoidance_intent.reset()

            # Пустой кадр - препятствий нет
            if closest is None:
                state.in_avoidance = False
                return

            d = closest.forward_distance
            if d >= cfg.avoidance_distance:
                state.in_avoidance = False
                return

            if not state.in_avoidance and self._may_switch_side():
                state.prefer_left_side = not state.prefer_left_side
                state.last_side_switch_cycle = state.cycle_number
                if self.logger is not None:
                    self.logger.info(
                        f"Changing sides to {'left' if state.prefer_left_side else 'right'} "
                        f"at cycle {state.cycle_number}")
            state.in_avoidance = True

            # Чем ближе препятствие, тем медленнее (вплоть до заднего хода) и круче поворот
            linear = d - cfg.avoidance_linear_offset
            angular = cfg.avoidance_angular_base - d
            # Препятствие слева от центра - поворачиваем направо
            if closest.lateral_offset < 0:
                angular = -angular
            state.avoidance_intent.update(linear, angular, cfg.avoidance_weight)

    def _may_switch_side(self):
        elapsed = self.state.cycles_since_side_switch()
        return elapsed is None or elapsed > self.config.side_switch_cycles

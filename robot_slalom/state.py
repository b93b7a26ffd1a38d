import threading
from dataclasses import dataclass

from robot_slalom.motion import MotionIntent


@dataclass(frozen=True)
class SlalomConfig:
    # Частота главного цикла управления (Гц)
    control_rate_hz: float = 10.0

    # ---- ИЗБЕГАНИЕ ПРЕПЯТСТВИЙ ----
    # Ближе этой дистанции (м) - препятствие
    avoidance_distance: float = 0.65
    # linear = d - offset: замедление и задний ход при очень близком препятствии
    avoidance_linear_offset: float = 0.4
    # angular = base - d
    avoidance_angular_base: float = 1.0
    # Вес избегания доминирует над остальными намерениями
    avoidance_weight: int = 1000
    # Минимум циклов между сменами стороны объезда
    side_switch_cycles: int = 20

    # ---- СЛЕЖЕНИЕ ЗА КОНУСОМ ----
    # Столбец пикселя, на котором центрируем цель (объезд справа / слева)
    center_right_px: float = 175.0
    center_left_px: float = 425.0
    # Полуширина мёртвой зоны вокруг центра (пиксели)
    dead_zone_px: float = 10.0
    tracking_linear_speed: float = 0.4
    tracking_angular_rate: float = 0.7
    tracking_weight: int = 3
    # Площадь маркера финиша, после которой останавливаемся
    marker_area_threshold: float = 30000.0

    # ---- ЦЕЛЬ ----
    # Постоянное намерение "медленно вперёд"
    goal_linear_speed: float = 0.2
    goal_angular_rate: float = 0.0
    goal_weight: int = 1

    def __post_init__(self):
        if self.control_rate_hz <= 0:
            raise ValueError(f"control_rate_hz must be positive, got {self.control_rate_hz}")
        if self.avoidance_distance <= 0:
            raise ValueError(f"avoidance_distance must be positive, got {self.avoidance_distance}")
        if self.side_switch_cycles < 0:
            raise ValueError(f"side_switch_cycles must be non-negative, got {self.side_switch_cycles}")
        if self.dead_zone_px < 0:
            raise ValueError(f"dead_zone_px must be non-negative, got {self.dead_zone_px}")
        if self.marker_area_threshold <= 0:
            raise ValueError(
                f"marker_area_threshold must be positive, got {self.marker_area_threshold}")
        for name in ('avoidance_weight', 'tracking_weight', 'goal_weight'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    @property
    def period(self):
        return 1.0 / self.control_rate_hz

    def goal_intent(self):
        return MotionIntent(self.goal_linear_speed, self.goal_angular_rate, self.goal_weight)


class ControllerState:
    """Общее состояние контроллера, одно на процесс.

    Изменяется только циклом управления и двумя мониторами. Каждое обновление
    намерения и каждое чтение для смешивания выполняются под self.lock.
    """

    def __init__(self, config=None):
        config = config or SlalomConfig()
        self.lock = threading.Lock()

        # Счётчик циклов управления
        self.cycle_number = 0
        # Цикл последней смены стороны объезда (None - ещё не менялась)
        self.last_side_switch_cycle = None
        # Препятствие сейчас ближе порога
        self.in_avoidance = False
        # Объезжать препятствия слева (True) или справа (False)
        self.prefer_left_side = True
        # Флаг завершения: выставляется один раз и больше не сбрасывается
        self.should_terminate = False

        # Последние намерения каждого источника
        self.avoidance_intent = MotionIntent()
        self.target_intent = MotionIntent()
        self.goal_intent = config.goal_intent()

    def cycles_since_side_switch(self):
        if self.last_side_switch_cycle is None:
            return None
        return self.cycle_number - self.last_side_switch_cycle

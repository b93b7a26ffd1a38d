"""Взвешенное смешивание намерений движения.

Каждый источник решений (цель, конусы, избегание препятствий) выражает своё
мнение о скорости робота как MotionIntent: линейная скорость, угловая
скорость и вес (уверенность / приоритет). Итоговая команда получается
взвешенным средним всех намерений.
"""


class MotionIntent:
    """Предложение одного источника: (linear_speed, angular_rate, weight).

    Нулевой вес означает "нет мнения" и ничего не вносит при смешивании.
    """

    __slots__ = ('linear_speed', 'angular_rate', 'weight')

    def __init__(self, linear_speed=0.0, angular_rate=0.0, weight=0):
        self.linear_speed = 0.0
        self.angular_rate = 0.0
        self.weight = 0
        self.update(linear_speed, angular_rate, weight)

    def update(self, linear_speed, angular_rate, weight):
        # Перезаписать все три значения сразу
        if weight < 0:
            raise ValueError(f"Intent weight must be non-negative, got {weight}")
        self.linear_speed = float(linear_speed)
        self.angular_rate = float(angular_rate)
        self.weight = int(weight)

    def reset(self):
        reset(self)

    def is_zero(self):
        return self.weight == 0

    def describe(self):
        return (f"Motion Vector:\n\tLinear: {self.linear_speed:.2f}"
                f"\n\tAngular: {self.angular_rate:.2f}\n\tWeight: {self.weight}")

    def __eq__(self, other):
        if not isinstance(other, MotionIntent):
            return NotImplemented
        return (self.linear_speed == other.linear_speed
                and self.angular_rate == other.angular_rate
                and self.weight == other.weight)

    def __repr__(self):
        return (f"MotionIntent(linear_speed={self.linear_speed!r}, "
                f"angular_rate={self.angular_rate!r}, weight={self.weight!r})")


def combine(a: MotionIntent, b: MotionIntent) -> MotionIntent:
    """Взвешенное среднее двух намерений.

    Если суммарный вес равен нулю, результат - нулевое намерение
    (деление на ноль исключено проверкой веса).
    """
    total = a.weight + b.weight
    if total == 0:
        return MotionIntent()
    linear = (a.weight * a.linear_speed + b.weight * b.linear_speed) / total
    angular = (a.weight * a.angular_rate + b.weight * b.angular_rate) / total
    return MotionIntent(linear, angular, total)


def blend(*intents: MotionIntent) -> MotionIntent:
    # Свёртка слева направо, нулевое намерение - нейтральный элемент
    result = MotionIntent()
    for intent in intents:
        result = combine(result, intent)
    return result


def reset(intent: MotionIntent):
    intent.linear_speed = 0.0
    intent.angular_rate = 0.0
    intent.weight = 0

from collections import namedtuple
from enum import Enum

from robot_slalom.state import SlalomConfig


class ColorClass(str, Enum):
    TARGET = 'target'   # конус, который надо объехать
    MARKER = 'marker'   # знак финиша


DetectedRegion = namedtuple('DetectedRegion', ['color_class', 'horizontal_center', 'area'])


class TargetTracker:
    """Узел слежения за цветными областями (blobs) с камеры.

    По каждому кадру обнаружений строит намерение центрирования на самом
    большом конусе и выставляет флаг завершения, если виден достаточно
    крупный маркер финиша.
    """

    def __init__(self, state, config=None, logger=None):
        self.state = state
        self.config = config or SlalomConfig()
        self.logger = logger

    def center_around(self):
        """Столбец пикселя, на котором держим конус.

        Зависит от стороны объезда, чтобы слежение и избегание не мешали
        друг другу.
        """
        if self.state.prefer_left_side:
            return self.config.center_left_px
        return self.config.center_right_px

    def on_detection_frame(self, regions):
        cfg = self.config
        regions = list(regions)

        with self.state.lock:
            state = self.state
            state.target_intent.reset()
            center_around = self.center_around()

            # Найти самый большой конус (при равенстве остаётся первый)
            largest = None
            for region in regions:
                if region.color_class == ColorClass.TARGET:
                    if largest is None or region.area > largest.area:
                        largest = region
                if region.color_class == ColorClass.MARKER and region.area > cfg.marker_area_threshold:
                    if not state.should_terminate and self.logger is not None:
                        self.logger.info(f"Finish marker seen (area={region.area:.0f})")
                    state.should_terminate = True

            if not regions or largest is None:
                return

            angular = 0.0
            # Обе проверки выполняются: в мёртвой зоне побеждает вторая
            if largest.horizontal_center < center_around + cfg.dead_zone_px:
                angular = cfg.tracking_angular_rate
            if largest.horizontal_center > center_around - cfg.dead_zone_px:
                angular = -cfg.tracking_angular_rate
            state.target_intent.update(cfg.tracking_linear_speed, angular, cfg.tracking_weight)


def classify_detection(detection, target_class, marker_class):
    # Класс берётся из гипотезы с наибольшей уверенностью
    if not detection.results:
        return None
    best = max(detection.results, key=lambda r: r.hypothesis.score)
    class_id = best.hypothesis.class_id
    if class_id == target_class:
        return ColorClass.TARGET
    if class_id == marker_class:
        return ColorClass.MARKER
    return None


def regions_from_detections(detections, target_class, marker_class):
    """Преобразовать обнаружения vision_msgs/Detection2D в DetectedRegion.

    Центр области - bbox.center.position.x, площадь - size_x * size_y.
    Обнаружения других классов пропускаются.
    """
    regions = []
    for det in detections:
        color = classify_detection(det, target_class, marker_class)
        if color is None:
            continue
        regions.append(DetectedRegion(
            color_class=color,
            horizontal_center=float(det.bbox.center.position.x),
            area=float(det.bbox.size_x * det.bbox.size_y)))
    return regions

from collections import namedtuple

import cv2
import numpy as np


# Ближайшая точка кадра глубины: поперечное смещение (м, < 0 - слева от центра)
# и дистанция вперёд (м)
DepthSample = namedtuple('DepthSample', ['lateral_offset', 'forward_distance'])


def depth_to_meters(depth, encoding):
    """Привести кадр глубины к float32 в метрах.

    Поддерживаются два формата глубины:
    - 32FC1: 32-битные float значения в метрах
    - 16UC1: 16-битные unsigned int значения в миллиметрах
    """
    if encoding == '32FC1':
        return np.asarray(depth, dtype=np.float32)
    if encoding == '16UC1':
        return np.asarray(depth, dtype=np.float32) / 1000.0
    raise ValueError(f"Unsupported depth encoding: {encoding}")


def nearest_depth_sample(depth, encoding, focal_length_px, max_range=10.0):
    """Найти ближайший валидный пиксель кадра глубины.

    Args:
        depth: изображение глубины (H x W)
        encoding: '32FC1' или '16UC1'
        focal_length_px: фокусное расстояние камеры глубины в пикселях
        max_range: пиксели дальше (или равные) этого значения отбрасываются

    Returns:
        DepthSample ближайшей точки или None, если валидных пикселей нет
    """
    meters = depth_to_meters(depth, encoding)
    if meters.ndim != 2 or meters.size == 0:
        return None

    # Маска: валидные (не inf/NaN), положительные и ближе максимальной дистанции
    valid = np.isfinite(meters) & (meters > 0.0) & (meters < max_range)
    if not np.any(valid):
        return None

    # minMaxLoc не любит NaN даже под маской - заменить их заранее
    clean = np.where(valid, meters, max_range).astype(np.float32)
    min_val, _, min_loc, _ = cv2.minMaxLoc(clean, valid.astype(np.uint8))
    u = min_loc[0]

    # Смещение по X в метрах: (u - cx) * z / fx
    cx = 0.5 * (meters.shape[1] - 1)
    lateral = (u - cx) * min_val / float(focal_length_px)
    return DepthSample(lateral_offset=float(lateral), forward_distance=float(min_val))


def nearest_sample(samples):
    # Точка с минимальной дистанцией вперёд; отбрасываются только точки без
    # конечной дистанции (NaN-смещение считается "не слева")
    pts = np.asarray(list(samples), dtype=np.float64).reshape(-1, 2)
    pts = pts[np.isfinite(pts[:, 1])]
    if pts.shape[0] == 0:
        return None
    idx = int(np.argmin(pts[:, 1]))
    return DepthSample(lateral_offset=float(pts[idx, 0]), forward_distance=float(pts[idx, 1]))


def samples_from_depth_image(bridge, msg, focal_length_px, max_range, logger=None):
    """Кадр глубины (sensor_msgs/Image) -> список из ближайшей точки.

    Ошибки конвертации и неподдерживаемые кодировки дают пустой кадр
    (нет новых данных), предупреждение уходит в логгер узла.
    """
    try:
        # Конвертировать ROS Image сообщение в OpenCV формат
        depth = bridge.imgmsg_to_cv2(msg, desired_encoding=msg.encoding)
    except Exception as e:
        if logger is not None:
            logger.warn(f"CvBridge error: {e}")
        return []

    try:
        sample = nearest_depth_sample(depth, msg.encoding, focal_length_px, max_range)
    except ValueError as e:
        if logger is not None:
            logger.warn(f"Depth frame dropped: {e}")
        return []
    return [] if sample is None else [sample]

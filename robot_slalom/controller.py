from dataclasses import fields

import rclpy
from rclpy.node import Node
from geometry_msgs.msg import Twist
from sensor_msgs.msg import Image
from std_msgs.msg import String
from vision_msgs.msg import Detection2DArray
from cv_bridge import CvBridge

from robot_slalom.avoidance import ObstacleAvoidanceMonitor
from robot_slalom.control_loop import ControlLoop
from robot_slalom.depth import samples_from_depth_image
from robot_slalom.state import ControllerState, SlalomConfig
from robot_slalom.tracker import TargetTracker, regions_from_detections


class SlalomController(Node):
    def __init__(self):
        super().__init__('slalom_controller')
        # Мост для конвертации между ROS Image и OpenCV форматами
        self.bridge = CvBridge()

        # Топики
        self.declare_parameter('depth_topic', 'depth/image')
        self.declare_parameter('blobs_topic', 'blobs')
        self.declare_parameter('cmd_vel_topic', 'cmd_vel_mux/input/teleop')
        self.declare_parameter('finish_topic', 'robot_finish')
        # Имена классов обнаружений: конус и маркер финиша
        self.declare_parameter('target_class', 'orange')
        self.declare_parameter('marker_class', 'blue')
        # Фокусное расстояние камеры глубины (пиксели) и максимальная дистанция (м)
        self.declare_parameter('focal_length_px', 570.0)
        self.declare_parameter('depth_max_range', 10.0)
        # Отправить нулевую скорость после финиша
        self.declare_parameter('stop_on_finish', True)

        # Константы закона управления читаются один раз при старте
        self.config = self.read_config()
        self.state = ControllerState(self.config)
        logger = self.get_logger()
        self.avoidance = ObstacleAvoidanceMonitor(self.state, self.config, logger)
        self.tracker = TargetTracker(self.state, self.config, logger)
        self.control = ControlLoop(self.state, self.config, self.publish_command, logger)

        self.target_class = self.get_parameter('target_class').value
        self.marker_class = self.get_parameter('marker_class').value

        # Подписка на поток глубины для избегания препятствий
        self.depth_sub = self.create_subscription(
            Image, self.get_parameter('depth_topic').value, self.depth_callback, 1)
        # Подписка на обнаруженные цветные области (конусы и маркер)
        self.blobs_sub = self.create_subscription(
            Detection2DArray, self.get_parameter('blobs_topic').value, self.blobs_callback, 100)

        # Основной издатель команд управления для робота
        self.publisher_cmd_vel_ = self.create_publisher(
            Twist, self.get_parameter('cmd_vel_topic').value, 10)
        self.finish_pub = self.create_publisher(
            String, self.get_parameter('finish_topic').value, 10)

        # Главный цикл управления с частотой control_rate_hz
        self.timer = self.create_timer(self.control.period, self.loop)
        self.done = False

    def read_config(self):
        # Объявить каждое поле SlalomConfig как параметр со значением по умолчанию
        defaults = SlalomConfig()
        values = {}
        for field in fields(SlalomConfig):
            default = getattr(defaults, field.name)
            values[field.name] = type(default)(self.declare_parameter(field.name, default).value)
        return SlalomConfig(**values)

    def depth_callback(self, msg: Image):
        # Пустой кадр при ошибке конвертации - как "нет препятствий"
        samples = samples_from_depth_image(
            self.bridge, msg,
            float(self.get_parameter('focal_length_px').value),
            float(self.get_parameter('depth_max_range').value),
            self.get_logger())
        self.avoidance.on_depth_frame(samples)

    def blobs_callback(self, msg: Detection2DArray):
        self.tracker.on_detection_frame(
            regions_from_detections(msg.detections, self.target_class, self.marker_class))

    def publish_command(self, intent):
        msg = Twist()
        msg.linear.x = float(intent.linear_speed)
        msg.angular.z = float(intent.angular_rate)
        self.publisher_cmd_vel_.publish(msg)

    def loop(self):
        if self.done:
            return
        # Флаг финиша проверяется до цикла: начатый цикл всегда доходит до публикации
        if self.control.finished:
            self.finish()
            return
        self.control.tick()

    def finish(self):
        self.done = True
        self.timer.cancel()
        if self.get_parameter('stop_on_finish').value:
            self.publisher_cmd_vel_.publish(Twist())
        msg = String()
        msg.data = f"Slalom finished after {self.state.cycle_number} cycles"
        self.finish_pub.publish(msg)
        self.get_logger().info(msg.data)


def main(args=None):
    rclpy.init(args=args)
    node = SlalomController()
    try:
        # Крутимся, пока не увидим маркер финиша
        while rclpy.ok() and not node.done:
            rclpy.spin_once(node)
    except KeyboardInterrupt:
        pass
    node.destroy_node()
    rclpy.try_shutdown()


if __name__ == '__main__':
    main()

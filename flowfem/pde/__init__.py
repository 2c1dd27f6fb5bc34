from .obstacle_flow_2d import ObstacleChannelFlow

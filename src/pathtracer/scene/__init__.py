"""Scene module for object storage, nearest-hit queries and demo scenes.

Components:
    manager: Object and Scene containers
    intersection: SceneHit records and NaN-safe nearest-hit selection
    presets: Named demonstration scenes with matching cameras
"""

from .intersection import SceneHit, closest_hit
from .manager import Object, Scene
from .presets import SCENE_NAMES, get_scene

__all__ = [
    "Object",
    "Scene",
    "SceneHit",
    "closest_hit",
    "SCENE_NAMES",
    "get_scene",
]

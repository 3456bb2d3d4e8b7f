import logging

from kepler_orbit.physics.orbit import default_scene_elements, position_at, radius_at

logging.basicConfig(level=logging.INFO)

elements = default_scene_elements()

for t in [0, 15, 30, 45, 60, 90, 120]:
    r = position_at(elements, float(t))
    print(t, r, radius_at(elements, float(t)))

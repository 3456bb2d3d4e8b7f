import logging
import math

from kepler_orbit.objects.body import OrbitingBody
from kepler_orbit.physics.orbit import OrbitalElements, default_scene_elements
from kepler_orbit.simulation.scenario import Scenario
from kepler_orbit.simulation.engine import Engine
from kepler_orbit.simulation.systems.state_recorder import StateRecorderSystem
from kepler_orbit.visualization.export_log import export_playback_bundle
from kepler_orbit.visualization.plotly_viewer import render_orbit_scene, render_animated_body

logging.basicConfig(level=logging.INFO)

scenario = Scenario(name="Keplerian Playback Demo")

scenario.add_body(OrbitingBody(
    body_id="SAT-001",
    name="ReferenceSat",
    elements=default_scene_elements(),
))
scenario.add_body(OrbitingBody(
    body_id="SAT-002",
    name="HighEccSat",
    elements=OrbitalElements(a=1.5, e=0.95, inc_rad=math.radians(60.0), raan_rad=0.0,
                             omega_rad=math.radians(20.0), period_s=120.0, tau_s=30.0, num_points=200),
))

engine = Engine(dt_s=0.5, systems=[StateRecorderSystem()])
log = engine.run(scenario, t_start_s=0.0, t_end_s=120.0)

scene_path = render_orbit_scene(scenario.bodies["SAT-001"].elements, out_html="out/orbit_scene.html",
                                t_s=30.0, show_stages=True, show_auxiliary_circle=True)
anim_path = render_animated_body(scenario, log, body_id="SAT-002", out_html="out/orbit_animated.html")
bundle_path = export_playback_bundle(scenario, log, out_path="out/playback_bundle.json")

print("Wrote:")
print(" -", scene_path)
print(" -", anim_path)
print(" -", bundle_path)
print(f"\n{len(log.events)} solver events recorded.")

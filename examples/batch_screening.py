"""debrisguard Batch Screening: screen a debris field against a spacecraft.

Runs both the immediate-threat scan and the 24-hour prediction scan, then
prints every alert with its suggested maneuver.
"""

import numpy as np

from debrisguard import (
    OrbitalElementSet,
    TrackedObject,
    analyze_conjunction,
    detect_immediate_threats,
    predict_future_collisions,
)

iss = TrackedObject.spacecraft(
    "ISS",
    position_km=[6791.0, 0.0, 0.0],
    velocity_km_s=[0.0, 7.66, 0.0],
    name="ISS (ZARYA)",
    craft_type="ISS",
    size_m=100.0,
)

# A ring of debris fragments close to the station, circular at ISS altitude
elements = OrbitalElementSet(
    inclination_deg=0.0,
    raan_deg=0.0,
    eccentricity=0.0,
    arg_perigee_deg=0.0,
    mean_anomaly_deg=0.0,
    mean_motion_rev_per_day=15.5,
    epoch=iss.state.epoch,
)
debris = [
    TrackedObject.debris(
        f"DEB-{i}",
        position_km=iss.state.position_km + np.array([offset, 0.0, 0.0]),
        velocity_km_s=[0.0, 7.6, 0.01 * i],
        size_m=0.1 * (i + 1),
        elements=elements,
    )
    for i, offset in enumerate([3.0, 12.0, 40.0])
]

for alert in detect_immediate_threats(debris, [iss], threshold_km=25.0):
    m = alert.suggested_maneuver
    print(f"NOW    {alert.debris_id:6} {alert.risk_level.value:8} "
          f"{alert.estimated_distance_km:7.2f} km  Pc={alert.probability:.2e}"
          + (f"  burn {m.delta_v_m_s:.2f} m/s {m.direction}" if m else ""))

future = predict_future_collisions(debris, [iss], hours_ahead=24)
print(f"{len(future)} predicted approaches in the next 24 h")

result = analyze_conjunction(debris[0], iss)
if result is not None:
    print(f"Closest approach {result.miss_distance_km:.2f} km at {result.tca:%Y-%m-%d %H:%M} "
          f"(p={result.probability:.2e})")

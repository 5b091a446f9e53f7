"""debrisguard Quickstart: read an element set and propagate a debris orbit."""

from debrisguard import OrbitalElementSet, TrackedObject, generate_trajectory

# COSMOS 1408 DEB
line1 = "1 51087U 82092HY  24045.40000000  .00013000  00000-0  73000-3 0  9999"
line2 = "2 51087  82.5600 120.3400 0050000 200.0000 160.0000 15.15000000 50000"

elements = OrbitalElementSet.from_tle(line1, line2)
debris = TrackedObject.debris(
    "51087",
    position_km=[6800.0, 0.0, 0.0],
    velocity_km_s=[0.0, 7.6, 0.0],
    name="COSMOS 1408 DEB",
    size_m=0.3,
    elements=elements,
)

track = generate_trajectory(debris, hours_ahead=6, step_count=36)

print(f"Object:  {debris.name}")
print(f"Incl:    {elements.inclination_deg:.4f}°")
print(f"Ecc:     {elements.eccentricity:.7f}")
print(f"Period:  {track.period_min:.1f} min")
print(f"Apogee:  {track.apogee_km:.1f} km")
print(f"Perigee: {track.perigee_km:.1f} km")
for sv in track.states[::6]:
    print(f"{sv.epoch:%H:%M} | r={sv.radius_km:.2f} km")

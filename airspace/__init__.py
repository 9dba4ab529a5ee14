"""Drone airspace restriction service.

Computes, for a search disk around a point, the applicable restriction
polygons (merged per facility and clipped to the disk) and the remaining
allowed-flight area.
"""

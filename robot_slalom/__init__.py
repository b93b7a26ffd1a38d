"""
Robot Slalom Package
Reactive slalom controller: drives around colored cones while avoiding close
obstacles from the depth camera, and stops at the finish marker.
"""

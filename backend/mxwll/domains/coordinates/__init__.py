"""
Coordinates domain

Geographic coordinates of observers on the ground.
"""

from mxwll.domains.coordinates.models.coordinate_model import GeoCoordinate

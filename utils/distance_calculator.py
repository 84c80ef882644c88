# ==================== UTILS/DISTANCE_CALCULATOR.PY ====================
from geopy.distance import geodesic


class DistanceCalculator:
    """Great-circle distances between coordinates"""

    @staticmethod
    def get_distance_km(lat1, lng1, lat2, lng2):
        """Get distance in kilometers"""
        coord1 = (lat1, lng1)
        coord2 = (lat2, lng2)
        return geodesic(coord1, coord2).km

    @staticmethod
    def spots_within(spots, latitude, longitude, radius_km):
        """Spots with coordinates inside the radius, nearest first.

        Each returned spot carries a ``distance`` attribute (km, 2 places).
        """
        nearby = []
        for spot in spots:
            if spot.latitude is None or spot.longitude is None:
                continue
            distance = DistanceCalculator.get_distance_km(latitude, longitude, spot.latitude, spot.longitude)
            if distance <= radius_km:
                spot.distance = round(distance, 2)
                nearby.append(spot)
        return sorted(nearby, key=lambda s: s.distance)

# ============================= PARKING/FILTERS.PY =============================
import django_filters
from .models import ParkingSpot, Slot


class ParkingSpotFilter(django_filters.FilterSet):
    """Filtering for parking spots"""

    price_min = django_filters.NumberFilter(
        field_name='price_per_hour',
        lookup_expr='gte',
        label='Minimum Price Per Hour'
    )
    price_max = django_filters.NumberFilter(
        field_name='price_per_hour',
        lookup_expr='lte',
        label='Maximum Price Per Hour'
    )

    class Meta:
        model = ParkingSpot
        fields = {
            'name': ['exact', 'icontains'],
            'is_available': ['exact'],
            'difficulty_level': ['exact'],
        }


class SlotFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(field_name='slot_type', choices=Slot.TYPE_CHOICES)

    class Meta:
        model = Slot
        fields = ['parking_spot', 'status', 'floor']

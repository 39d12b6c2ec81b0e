import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )
    min_quantity = django_filters.NumberFilter(
        field_name="quantity", lookup_expr="gte"
    )

    class Meta:
        model = Order
        fields = ["status", "start_date", "end_date", "min_quantity"]

import django_filters

from modules.datastore.models import Inventory, Product


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    category = django_filters.CharFilter(field_name="category__name", lookup_expr="iexact")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["name", "category", "min_price", "max_price"]


class InventoryFilter(django_filters.FilterSet):
    max_quantity = django_filters.NumberFilter(field_name="quantity", lookup_expr="lte")
    min_quantity = django_filters.NumberFilter(field_name="quantity", lookup_expr="gte")

    class Meta:
        model = Inventory
        fields = ["max_quantity", "min_quantity"]

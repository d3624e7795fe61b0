import django_filters
from .models import GoalDefinition


class GoalDefinitionFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(lookup_expr='icontains', label="Nazwa zawiera")
    owner_id = django_filters.NumberFilter(field_name='owner_id', label="Właściciel")
    is_active = django_filters.BooleanFilter(field_name='is_active', label="Aktywne")
    interval_type = django_filters.ChoiceFilter(
        choices=GoalDefinition.IntervalChoices.choices,
        label="Interwał"
    )

    class Meta:
        model = GoalDefinition
        fields = ['is_active', 'interval_type', 'name']

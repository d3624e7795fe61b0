from django.contrib import admin
from .models import GoalDefinition, PeriodInstance


class PeriodInstanceInline(admin.TabularInline):
    model = PeriodInstance
    extra = 0
    fields = ('start_date', 'end_date', 'target', 'completed_amount')
    ordering = ('-start_date',)


@admin.register(GoalDefinition)
class GoalDefinitionAdmin(admin.ModelAdmin):
    list_display = ('name', 'owner', 'interval_type', 'base_target', 'is_active', 'created_at')
    list_filter = ('interval_type', 'is_active')
    search_fields = ('name', 'description')
    inlines = [PeriodInstanceInline]


@admin.register(PeriodInstance)
class PeriodInstanceAdmin(admin.ModelAdmin):
    list_display = ('definition', 'start_date', 'end_date', 'target', 'completed_amount')
    list_filter = ('definition__interval_type',)
    date_hierarchy = 'start_date'

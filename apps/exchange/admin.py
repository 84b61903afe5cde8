"""
Django Admin configuration for Exchange app.
"""

from django.contrib import admin

from apps.exchange.infrastructure.persistence.models import ExchangeRateRecord


@admin.register(ExchangeRateRecord)
class ExchangeRateRecordAdmin(admin.ModelAdmin):
    """Admin interface for stored exchange rates."""

    list_display = (
        'get_currency_pair',
        'rate',
        'source',
        'timestamp',
    )
    list_filter = (
        'from_currency',
        'to_currency',
        'source',
    )
    search_fields = (
        'from_currency',
        'to_currency',
        'source',
    )
    readonly_fields = ('id', 'created_at', 'updated_at')
    date_hierarchy = 'timestamp'
    ordering = ('-timestamp', 'from_currency')

    fieldsets = (
        ('Exchange Rate', {
            'fields': (
                'from_currency',
                'to_currency',
                'rate',
                'source',
                'timestamp',
            )
        }),
        ('Metadata', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Currency Pair', ordering='from_currency')
    def get_currency_pair(self, obj):
        """Display currency pair in format FROM/TO."""
        return f"{obj.from_currency}/{obj.to_currency}"

    def save_model(self, request, obj, form, change):
        obj.from_currency = obj.from_currency.strip().upper()
        obj.to_currency = obj.to_currency.strip().upper()
        super().save_model(request, obj, form, change)

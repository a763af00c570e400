# ==========================================
# apps/expenses/admin.py
# ==========================================

from django.contrib import admin
from apps.expenses.models import Expense, ExpenseShare, Payment


class ExpenseShareInline(admin.TabularInline):
    model = ExpenseShare
    extra = 0
    fields = ['participant', 'amount']
    readonly_fields = ['participant', 'amount']
    can_delete = False


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """Admin interface for Expenses."""
    
    list_display = [
        'description',
        'trip',
        'amount',
        'currency',
        'paid_by',
        'expense_date',
        'created_by'
    ]
    list_filter = ['currency', 'expense_date']
    search_fields = ['description', 'trip__name']
    readonly_fields = ['split_type', 'created_at', 'updated_at']
    inlines = [ExpenseShareInline]
    date_hierarchy = 'expense_date'
    
    def get_queryset(self, request):
        return super().get_queryset(request).select_related('trip', 'paid_by', 'created_by')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin interface for Payments."""
    
    list_display = [
        'trip',
        'from_participant',
        'to_participant',
        'amount',
        'currency',
        'paid_at'
    ]
    list_filter = ['currency', 'paid_at']
    search_fields = ['trip__name', 'from_participant__name', 'to_participant__name']
    readonly_fields = ['created_at']
    
    def get_queryset(self, request):
        return super().get_queryset(request).select_related(
            'trip', 'from_participant', 'to_participant'
        )

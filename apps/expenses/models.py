# ==========================================
# apps/expenses/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid

from apps.trips.models import Currency


class SplitType(models.TextChoices):
    EQUAL = 'EQUAL', 'Equal'


class Expense(models.Model):
    """Shared cost recorded against a trip."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    trip = models.ForeignKey('trips.Trip', on_delete=models.CASCADE, related_name='expenses')
    description = models.CharField(max_length=500)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.CLP)
    
    # Participants referenced here must belong to the same trip
    paid_by = models.ForeignKey(
        'trips.TripParticipant',
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name='paid_expenses'
    )
    expense_date = models.DateField(default=timezone.localdate)
    split_type = models.CharField(max_length=10, choices=SplitType.choices, default=SplitType.EQUAL)
    
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_expenses'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['trip', 'currency'], name='expenses_trip_currency_idx'),
            models.Index(fields=['trip', 'expense_date'], name='expenses_trip_date_idx'),
        ]
        ordering = ['-expense_date', '-created_at']
    
    def __str__(self):
        return f"{self.description} - {self.amount} {self.currency}"


class ExpenseShare(models.Model):
    """One participant's part of an expense."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense = models.ForeignKey(Expense, on_delete=models.CASCADE, related_name='shares')
    participant = models.ForeignKey(
        'trips.TripParticipant',
        on_delete=models.RESTRICT,
        related_name='expense_shares'
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    
    class Meta:
        db_table = 'expense_shares'
        unique_together = [['expense', 'participant']]
    
    def __str__(self):
        return f"{self.participant.name}: {self.amount}"


class Payment(models.Model):
    """Direct transfer between two participants of a trip."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    trip = models.ForeignKey('trips.Trip', on_delete=models.CASCADE, related_name='payments')
    from_participant = models.ForeignKey(
        'trips.TripParticipant',
        on_delete=models.RESTRICT,
        related_name='payments_sent'
    )
    to_participant = models.ForeignKey(
        'trips.TripParticipant',
        on_delete=models.RESTRICT,
        related_name='payments_received'
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.CLP)
    paid_at = models.DateTimeField(default=timezone.now)
    
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='recorded_payments'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['trip', 'currency'], name='payments_trip_currency_idx'),
        ]
        ordering = ['-paid_at']
    
    def __str__(self):
        return f"{self.from_participant.name} -> {self.to_participant.name}: {self.amount} {self.currency}"

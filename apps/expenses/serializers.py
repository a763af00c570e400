from decimal import Decimal
from rest_framework import serializers
from .models import Expense, ExpenseShare, Payment
from apps.accounts.serializers import UserPublicSerializer
from apps.trips.models import Currency


# =============================================================================
# Input Serializers
# =============================================================================

class TripFilterSerializer(serializers.Serializer):
    trip = serializers.UUIDField()


class ExpenseCreateSerializer(serializers.Serializer):
    """
    Validate input for recording an equal-split expense.

    The first entry of participant_ids absorbs the rounding remainder.
    """
    
    trip = serializers.UUIDField()
    description = serializers.CharField(max_length=500)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    paid_by = serializers.UUIDField(required=False, allow_null=True)
    expense_date = serializers.DateField(required=False)
    participant_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1)
    
    def validate_description(self, value):
        if not value.strip():
            raise serializers.ValidationError("Description is required")
        return value.strip()


class PaymentCreateSerializer(serializers.Serializer):
    trip = serializers.UUIDField()
    from_participant = serializers.UUIDField()
    to_participant = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    paid_at = serializers.DateTimeField(required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class ExpenseShareSerializer(serializers.ModelSerializer):
    
    participant_name = serializers.CharField(source='participant.name', read_only=True)
    
    class Meta:
        model = ExpenseShare
        fields = ['participant', 'participant_name', 'amount']
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    """Expense with its shares."""
    
    paid_by_name = serializers.CharField(source='paid_by.name', read_only=True, default=None)
    shares = ExpenseShareSerializer(many=True, read_only=True)
    created_by = UserPublicSerializer(read_only=True)
    
    class Meta:
        model = Expense
        fields = [
            'id',
            'trip',
            'description',
            'amount',
            'currency',
            'paid_by',
            'paid_by_name',
            'expense_date',
            'split_type',
            'shares',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    
    from_name = serializers.CharField(source='from_participant.name', read_only=True)
    to_name = serializers.CharField(source='to_participant.name', read_only=True)
    
    class Meta:
        model = Payment
        fields = [
            'id',
            'trip',
            'from_participant',
            'from_name',
            'to_participant',
            'to_name',
            'amount',
            'currency',
            'paid_at',
            'created_at',
        ]
        read_only_fields = fields


class ParticipantBalanceSerializer(serializers.Serializer):
    participant_id = serializers.UUIDField()
    name = serializers.CharField()
    paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    owes = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class SettlementTransferSerializer(serializers.Serializer):
    from_id = serializers.UUIDField()
    from_name = serializers.CharField()
    to_id = serializers.UUIDField()
    to_name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    currency = serializers.CharField()


class SettlementSerializer(serializers.Serializer):
    """Balances per currency and suggested transfers."""
    
    balances = serializers.DictField(
        child=serializers.ListField(child=ParticipantBalanceSerializer())
    )
    settlements = SettlementTransferSerializer(many=True)
    currencies = serializers.ListField(child=serializers.CharField())

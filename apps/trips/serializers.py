from rest_framework import serializers
from .models import Trip, TripParticipant, TripRole, ParticipantKind, Currency
from apps.accounts.serializers import UserPublicSerializer


class TripParticipantSerializer(serializers.ModelSerializer):
    """Participant with optional linked user."""
    
    user = UserPublicSerializer(read_only=True)
    
    class Meta:
        model = TripParticipant
        fields = ['id', 'name', 'kind', 'role', 'user', 'joined_at']
        read_only_fields = fields


class TripSerializer(serializers.ModelSerializer):
    """Main serializer for trips."""
    
    created_by = UserPublicSerializer(read_only=True)
    participants = TripParticipantSerializer(many=True, read_only=True)
    my_role = serializers.SerializerMethodField()
    
    class Meta:
        model = Trip
        fields = [
            'id',
            'name',
            'description',
            'destination',
            'start_date',
            'end_date',
            'default_currency',
            'created_by',
            'participants',
            'my_role',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
    
    def get_my_role(self, obj):
        """Current user's role in the trip."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class TripListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views (expects annotated counts)."""
    
    created_by = UserPublicSerializer(read_only=True)
    participant_count = serializers.IntegerField(read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    my_role = serializers.SerializerMethodField()
    
    class Meta:
        model = Trip
        fields = [
            'id',
            'name',
            'description',
            'destination',
            'start_date',
            'end_date',
            'default_currency',
            'created_by',
            'participant_count',
            'item_count',
            'my_role',
            'created_at',
        ]
        read_only_fields = fields
    
    def get_my_role(self, obj):
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class TripWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating and updating trips."""
    
    default_currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    
    class Meta:
        model = Trip
        fields = [
            'name',
            'description',
            'destination',
            'start_date',
            'end_date',
            'default_currency',
        ]
    
    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({
                'end_date': 'End date cannot be before start date'
            })
        return attrs


class AddParticipantSerializer(serializers.Serializer):
    """Add a registered user by email, or a ghost by name."""
    
    kind = serializers.ChoiceField(
        choices=ParticipantKind.choices,
        default=ParticipantKind.REGISTERED
    )
    email = serializers.EmailField(required=False)
    name = serializers.CharField(max_length=100, required=False)
    role = serializers.ChoiceField(
        choices=[TripRole.EDITOR, TripRole.VIEWER],
        default=TripRole.VIEWER
    )
    
    def validate(self, attrs):
        if attrs['kind'] == ParticipantKind.REGISTERED and not attrs.get('email'):
            raise serializers.ValidationError({'email': 'Email is required'})
        if attrs['kind'] == ParticipantKind.GHOST and not attrs.get('name', '').strip():
            raise serializers.ValidationError({'name': 'Name is required'})
        return attrs


class UpdateParticipantRoleSerializer(serializers.Serializer):
    participant_id = serializers.UUIDField()
    role = serializers.ChoiceField(choices=TripRole.choices)


class RemoveParticipantSerializer(serializers.Serializer):
    participant_id = serializers.UUIDField()

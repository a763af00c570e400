from rest_framework import serializers
from .models import ProposedItem, ItemCategory, ItemStatus, ItemCheck, VoteValue
from apps.accounts.serializers import UserPublicSerializer


class ProposedItemSerializer(serializers.ModelSerializer):
    """Item with its vote tally."""
    
    created_by = UserPublicSerializer(read_only=True)
    approvals = serializers.SerializerMethodField()
    rejections = serializers.SerializerMethodField()
    check_count = serializers.SerializerMethodField()
    my_vote = serializers.SerializerMethodField()
    
    class Meta:
        model = ProposedItem
        fields = [
            'id',
            'trip',
            'title',
            'category',
            'status',
            'description',
            'location',
            'external_url',
            'image_url',
            'created_by',
            'approvals',
            'rejections',
            'check_count',
            'my_vote',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
    
    # Counts come from get_trip_items annotations when available
    def get_approvals(self, obj):
        if hasattr(obj, 'approvals'):
            return obj.approvals
        return obj.votes.filter(value=VoteValue.APPROVE).count()
    
    def get_rejections(self, obj):
        if hasattr(obj, 'rejections'):
            return obj.rejections
        return obj.votes.filter(value=VoteValue.REJECT).count()
    
    def get_check_count(self, obj):
        if hasattr(obj, 'check_count'):
            return obj.check_count
        return obj.checks.count()
    
    def get_my_vote(self, obj):
        if hasattr(obj, 'my_vote'):
            return obj.my_vote
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            vote = obj.votes.filter(user=request.user).first()
            return vote.value if vote else None
        return None


class ItemCreateSerializer(serializers.Serializer):
    """Serializer for proposing an item."""
    
    trip = serializers.UUIDField()
    title = serializers.CharField(max_length=255)
    category = serializers.ChoiceField(choices=ItemCategory.choices)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    location = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    external_url = serializers.URLField(required=False, allow_blank=True, default='')
    image_url = serializers.URLField(required=False, allow_blank=True, default='')
    
    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required")
        return value.strip()


class ItemFilterSerializer(serializers.Serializer):
    trip = serializers.UUIDField()
    status = serializers.ChoiceField(choices=ItemStatus.choices, required=False)
    category = serializers.ChoiceField(choices=ItemCategory.choices, required=False)


class VoteSerializer(serializers.Serializer):
    value = serializers.ChoiceField(choices=VoteValue.choices)


class VoteTallySerializer(serializers.Serializer):
    approvals = serializers.IntegerField()
    rejections = serializers.IntegerField()
    required = serializers.IntegerField(allow_null=True)
    eligible_participants = serializers.IntegerField()


class VoteResultSerializer(serializers.Serializer):
    """Outcome of a vote."""
    
    item_id = serializers.UUIDField()
    status = serializers.CharField(source='new_status')
    vote_value = serializers.CharField()
    tally = VoteTallySerializer()


class CheckRequestSerializer(serializers.Serializer):
    photo_url = serializers.URLField(required=False, allow_blank=True, default='')


class ItemCheckSerializer(serializers.ModelSerializer):
    
    user = UserPublicSerializer(read_only=True)
    
    class Meta:
        model = ItemCheck
        fields = ['id', 'item', 'user', 'photo_url', 'created_at', 'updated_at']
        read_only_fields = fields

# ==========================================
# apps/proposals/models.py
# ==========================================

from django.db import models
import uuid


class ItemCategory(models.TextChoices):
    PLACE = 'PLACE', 'Place'
    FOOD = 'FOOD', 'Food'


class ItemStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'


class VoteValue(models.TextChoices):
    APPROVE = 'APPROVE', 'Approve'
    REJECT = 'REJECT', 'Reject'


class ProposedItem(models.Model):
    """
    A place or food suggestion put to the trip's vote.

    Status only moves PENDING -> APPROVED or PENDING -> REJECTED and is
    never changed again afterwards.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    trip = models.ForeignKey('trips.Trip', on_delete=models.CASCADE, related_name='items')
    title = models.CharField(max_length=255)
    category = models.CharField(max_length=10, choices=ItemCategory.choices)
    status = models.CharField(
        max_length=10,
        choices=ItemStatus.choices,
        default=ItemStatus.PENDING,
        db_index=True
    )
    description = models.TextField(blank=True)
    location = models.CharField(max_length=500, blank=True)
    external_url = models.URLField(blank=True)
    image_url = models.URLField(blank=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='proposed_items'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'proposed_items'
        indexes = [
            models.Index(fields=['trip', 'status'], name='items_trip_status_idx'),
            models.Index(fields=['created_by', 'created_at'], name='items_creator_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.title} ({self.status})"
    
    @property
    def is_pending(self):
        return self.status == ItemStatus.PENDING


class Vote(models.Model):
    """One user's stance on one item. Re-voting overwrites the value."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.ForeignKey(ProposedItem, on_delete=models.CASCADE, related_name='votes')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='votes')
    value = models.CharField(max_length=10, choices=VoteValue.choices)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'votes'
        unique_together = [['user', 'item']]
        indexes = [
            models.Index(fields=['item', 'value'], name='votes_item_value_idx'),
        ]
    
    def __str__(self):
        return f"{self.user} {self.value} {self.item.title}"


class ItemCheck(models.Model):
    """A participant's "we went there" mark on an approved item."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.ForeignKey(ProposedItem, on_delete=models.CASCADE, related_name='checks')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='item_checks')
    photo_url = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'item_checks'
        unique_together = [['user', 'item']]
        ordering = ['created_at']
    
    def __str__(self):
        return f"{self.user} checked {self.item.title}"

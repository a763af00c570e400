# ==========================================
# apps/trips/models.py
# ==========================================

from django.db import models
from apps.accounts.models import UserStatus
import uuid


class Currency(models.TextChoices):
    CLP = 'CLP', 'Chilean Peso'
    JPY = 'JPY', 'Japanese Yen'
    USD = 'USD', 'US Dollar'
    EUR = 'EUR', 'Euro'
    GBP = 'GBP', 'Pound Sterling'
    KRW = 'KRW', 'South Korean Won'
    CNY = 'CNY', 'Chinese Yuan'
    THB = 'THB', 'Thai Baht'


class TripRole(models.TextChoices):
    ADMIN = 'ADMIN', 'Admin'
    EDITOR = 'EDITOR', 'Editor'
    VIEWER = 'VIEWER', 'Viewer'


class ParticipantKind(models.TextChoices):
    REGISTERED = 'REGISTERED', 'Registered'
    GHOST = 'GHOST', 'Ghost'


class Trip(models.Model):
    """A trip shared by a group of participants."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    destination = models.CharField(max_length=500, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    default_currency = models.CharField(
        max_length=3,
        choices=Currency.choices,
        default=Currency.CLP
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_trips'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'trips'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='trips_creator_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return self.name
    
    def get_participant(self, user):
        if user is None or not user.is_authenticated:
            return None
        return self.participants.filter(user=user).first()
    
    def has_member(self, user):
        return self.get_participant(user) is not None
    
    def get_user_role(self, user):
        participant = self.get_participant(user)
        return participant.role if participant else None
    
    def is_admin(self, user):
        return self.get_user_role(user) == TripRole.ADMIN
    
    def can_edit(self, user):
        return self.get_user_role(user) in [TripRole.ADMIN, TripRole.EDITOR]


class TripParticipantQuerySet(models.QuerySet):
    
    def eligible_voters(self):
        """REGISTERED participants whose account is ACTIVE."""
        return self.filter(
            kind=ParticipantKind.REGISTERED,
            user__status=UserStatus.ACTIVE,
        )


class TripParticipant(models.Model):
    """
    Member of a trip.

    REGISTERED participants are linked to a user and can vote. GHOST
    participants have no login; they only take part in expense splitting.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    trip = models.ForeignKey(Trip, on_delete=models.CASCADE, related_name='participants')
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='trip_participations'
    )
    name = models.CharField(max_length=100)
    kind = models.CharField(
        max_length=20,
        choices=ParticipantKind.choices,
        default=ParticipantKind.REGISTERED
    )
    role = models.CharField(max_length=20, choices=TripRole.choices, default=TripRole.VIEWER)
    joined_at = models.DateTimeField(auto_now_add=True)
    
    objects = TripParticipantQuerySet.as_manager()
    
    class Meta:
        db_table = 'trip_participants'
        unique_together = [['trip', 'user']]
        indexes = [
            models.Index(fields=['trip', 'role'], name='trip_part_role_idx'),
            models.Index(fields=['trip', 'kind'], name='trip_part_kind_idx'),
        ]
        ordering = ['joined_at']
    
    def __str__(self):
        return f"{self.name} in {self.trip.name} ({self.role})"

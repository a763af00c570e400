from rest_framework import permissions


class IsTripAdmin(permissions.BasePermission):
    """
    Permission: User must be an ADMIN participant of the trip.
    """
    
    def has_object_permission(self, request, view, obj):
        # obj is a Trip instance
        return obj.is_admin(request.user)


class IsTripParticipant(permissions.BasePermission):
    """
    Permission: User must be a participant of the trip.
    """
    
    def has_object_permission(self, request, view, obj):
        # obj is a Trip instance
        return obj.has_member(request.user)

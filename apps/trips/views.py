from rest_framework import viewsets, status, serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import Trip, ParticipantKind
from .serializers import (
    TripSerializer,
    TripListSerializer,
    TripWriteSerializer,
    TripParticipantSerializer,
    AddParticipantSerializer,
    UpdateParticipantRoleSerializer,
    RemoveParticipantSerializer,
)

from apps.trips.services import (
    create_trip,
    get_user_trips,
    update_trip,
    delete_trip,
    add_registered_participant,
    add_ghost_participant,
    update_participant_role,
    remove_participant,
    get_trip_participants,
    # Exceptions
    NotParticipantError,
    InsufficientPermissionsError,
    UserNotFoundError,
    InactiveUserError,
    AlreadyParticipantError,
    ParticipantNotFoundError,
    LastAdminError,
    ParticipantInUseError,
)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class RemoveParticipantResponseSerializer(serializers.Serializer):
    items_recalculated = serializers.IntegerField()


class TripPagination(PageNumberPagination):
    """Custom pagination for trips."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class TripViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Trip CRUD operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Trips the user takes part in
    create: Create a trip (creator becomes ADMIN)
    retrieve: Trip with participants
    partial_update: Update a trip (admin only)
    destroy: Delete a trip (admin only)
    """

    serializer_class = TripSerializer
    lookup_value_regex = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'
    permission_classes = [IsAuthenticated]
    pagination_class = TripPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """Return only trips where user is a participant."""
        if self.action == 'list':
            return get_user_trips(user=self.request.user)
        return Trip.objects.filter(
            participants__user=self.request.user
        ).select_related('created_by').prefetch_related('participants__user').distinct()

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return TripListSerializer
        elif self.action in ['create', 'partial_update']:
            return TripWriteSerializer
        return TripSerializer

    def create(self, request, *args, **kwargs):
        """Create a new trip."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        trip = create_trip(created_by=request.user, **serializer.validated_data)

        output_serializer = TripSerializer(trip, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        """Update trip details (admin only)."""
        trip = self.get_object()
        serializer = self.get_serializer(trip, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            trip = update_trip(trip_id=trip.id, user=request.user, **serializer.validated_data)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        output_serializer = TripSerializer(trip, context={'request': request})
        return Response(output_serializer.data)

    def destroy(self, request, *args, **kwargs):
        """Delete a trip (admin only)."""
        trip = self.get_object()
        try:
            delete_trip(trip_id=trip.id, user=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=AddParticipantSerializer,
        responses={
            200: TripParticipantSerializer(many=True),
            201: TripParticipantSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=['trips'],
    )
    @action(detail=True, methods=['get', 'post'])
    def participants(self, request, pk=None):
        """List participants, or add one (admin only)."""
        trip = self.get_object()

        if request.method == 'GET':
            participants = get_trip_participants(trip_id=trip.id, user=request.user)
            serializer = TripParticipantSerializer(participants, many=True)
            return Response(serializer.data)

        serializer = AddParticipantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            if data['kind'] == ParticipantKind.GHOST:
                participant = add_ghost_participant(
                    trip_id=trip.id,
                    name=data['name'],
                    role=data['role'],
                    added_by=request.user,
                )
            else:
                participant = add_registered_participant(
                    trip_id=trip.id,
                    email=data['email'],
                    role=data['role'],
                    added_by=request.user,
                )
        except (NotParticipantError, InsufficientPermissionsError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except UserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InactiveUserError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except AlreadyParticipantError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        output_serializer = TripParticipantSerializer(participant)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=UpdateParticipantRoleSerializer,
        responses={
            200: TripParticipantSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=['trips'],
    )
    @action(detail=True, methods=['post'])
    def update_participant_role(self, request, pk=None):
        """Change a participant's role (admin only)."""
        trip = self.get_object()
        serializer = UpdateParticipantRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            participant = update_participant_role(
                trip_id=trip.id,
                participant_id=serializer.validated_data['participant_id'],
                new_role=serializer.validated_data['role'],
                updated_by=request.user,
            )
        except (NotParticipantError, InsufficientPermissionsError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except ParticipantNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except LastAdminError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        output_serializer = TripParticipantSerializer(participant)
        return Response(output_serializer.data)

    @extend_schema(
        request=RemoveParticipantSerializer,
        responses={
            200: RemoveParticipantResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=['trips'],
    )
    @action(detail=True, methods=['delete'])
    def remove_participant(self, request, pk=None):
        """Remove a participant (admin only)."""
        trip = self.get_object()
        serializer = RemoveParticipantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            items_changed = remove_participant(
                trip_id=trip.id,
                participant_id=serializer.validated_data['participant_id'],
                removed_by=request.user,
            )
        except (NotParticipantError, InsufficientPermissionsError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except ParticipantNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (LastAdminError, ParticipantInUseError) as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response({'items_recalculated': items_changed})

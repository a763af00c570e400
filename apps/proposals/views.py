from rest_framework import viewsets, status, serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import ProposedItem
from .serializers import (
    ProposedItemSerializer,
    ItemCreateSerializer,
    ItemFilterSerializer,
    VoteSerializer,
    VoteResultSerializer,
    CheckRequestSerializer,
    ItemCheckSerializer,
)

from apps.proposals.services import (
    create_item,
    cast_vote,
    get_trip_items,
    delete_item,
    check_item,
    # Exceptions
    ItemNotFoundError,
    OwnItemVoteError,
    ItemNotPendingError,
    ItemNotApprovedError,
    DuplicateItemError,
    TripAccessError,
)
from apps.trips.services import TripNotFoundError


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class NotPendingResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    status = serializers.CharField()


class ItemPagination(PageNumberPagination):
    """Custom pagination for items."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class ItemViewSet(viewsets.ModelViewSet):
    """
    ViewSet for proposed items.

    list: Items of a trip (?trip=) with tallies
    create: Propose an item (trip ADMIN or EDITOR)
    retrieve: Item detail
    destroy: Delete an item (creator or trip admin)
    vote: Cast or change a vote
    check: Mark an approved item as visited
    """

    serializer_class = ProposedItemSerializer
    lookup_value_regex = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'
    permission_classes = [IsAuthenticated]
    pagination_class = ItemPagination
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        """Items of trips the user takes part in."""
        return ProposedItem.objects.filter(
            trip__participants__user=self.request.user
        ).select_related('created_by').distinct()

    @extend_schema(
        parameters=[
            OpenApiParameter('trip', str, required=True),
            OpenApiParameter('status', str),
            OpenApiParameter('category', str),
        ],
        responses={
            200: ProposedItemSerializer(many=True),
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=['items'],
    )
    def list(self, request, *args, **kwargs):
        """List a trip's items."""
        filters = ItemFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        try:
            items = get_trip_items(
                trip_id=filters.validated_data['trip'],
                user=request.user,
                status=filters.validated_data.get('status'),
                category=filters.validated_data.get('category'),
            )
        except TripNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except TripAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        page = self.paginate_queryset(items)
        if page is not None:
            serializer = ProposedItemSerializer(page, many=True, context={'request': request})
            return self.get_paginated_response(serializer.data)

        serializer = ProposedItemSerializer(items, many=True, context={'request': request})
        return Response(serializer.data)

    @extend_schema(
        request=ItemCreateSerializer,
        responses={
            201: ProposedItemSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=['items'],
    )
    def create(self, request, *args, **kwargs):
        """Propose an item; the creator's approval is recorded with it."""
        serializer = ItemCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data.copy()
        trip_id = data.pop('trip')

        try:
            item = create_item(trip_id=trip_id, user=request.user, **data)
        except TripNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except TripAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except DuplicateItemError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        output_serializer = ProposedItemSerializer(item, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        """Delete an item (creator or trip admin)."""
        item = self.get_object()
        try:
            delete_item(item_id=item.id, user=request.user)
        except ItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except TripAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=VoteSerializer,
        responses={
            200: VoteResultSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: NotPendingResponseSerializer,
        },
        tags=['items'],
    )
    @action(detail=True, methods=['post'])
    def vote(self, request, pk=None):
        """Cast or change a vote on a pending item."""
        serializer = VoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = cast_vote(
                item_id=pk,
                user=request.user,
                value=serializer.validated_data['value'],
            )
        except ItemNotFoundError:
            return Response({'error': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)
        except (OwnItemVoteError, TripAccessError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except ItemNotPendingError as e:
            return Response(
                {'error': str(e), 'status': e.current_status},
                status=status.HTTP_409_CONFLICT
            )

        return Response(VoteResultSerializer(result).data)

    @extend_schema(
        request=CheckRequestSerializer,
        responses={
            200: ItemCheckSerializer,
            201: ItemCheckSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=['items'],
    )
    @action(detail=True, methods=['post'])
    def check(self, request, pk=None):
        """Mark an approved item as visited."""
        serializer = CheckRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item_check, created = check_item(
                item_id=pk,
                user=request.user,
                photo_url=serializer.validated_data['photo_url'],
            )
        except ItemNotFoundError:
            return Response({'error': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)
        except TripAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except ItemNotApprovedError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(
            ItemCheckSerializer(item_check).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

from rest_framework import viewsets, status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Expense, Payment
from .serializers import (
    TripFilterSerializer,
    ExpenseCreateSerializer,
    PaymentCreateSerializer,
    ExpenseSerializer,
    PaymentSerializer,
    SettlementSerializer,
)

from apps.expenses.services import (
    create_expense,
    get_trip_expenses,
    delete_expense,
    create_payment,
    get_trip_payments,
    delete_payment,
    get_trip_settlement,
    # Exceptions
    ExpenseNotFoundError,
    PaymentNotFoundError,
    IneligibleSplitParticipantError,
    SameParticipantPaymentError,
    InvalidAmountError,
)
from apps.trips.services import (
    TripNotFoundError,
    NotParticipantError,
    InsufficientPermissionsError,
)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _error_response(exc):
    """Translate a domain exception into an error response."""
    if isinstance(exc, (TripNotFoundError, ExpenseNotFoundError, PaymentNotFoundError)):
        return Response({'error': str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, (NotParticipantError, InsufficientPermissionsError)):
        return Response({'error': str(exc)}, status=status.HTTP_403_FORBIDDEN)
    if isinstance(exc, IneligibleSplitParticipantError):
        return Response(
            {'error': str(exc), 'code': exc.code},
            status=status.HTTP_400_BAD_REQUEST
        )
    return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)


DOMAIN_ERRORS = (
    TripNotFoundError,
    NotParticipantError,
    InsufficientPermissionsError,
    ExpenseNotFoundError,
    PaymentNotFoundError,
    IneligibleSplitParticipantError,
    SameParticipantPaymentError,
    InvalidAmountError,
    ValueError,
)


class LedgerPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class ExpenseViewSet(viewsets.ModelViewSet):
    """
    ViewSet for trip expenses.

    list: Expenses of a trip (?trip=)
    create: Record an equal-split expense (trip ADMIN or EDITOR)
    retrieve: Expense detail
    destroy: Delete an expense (creator or trip admin)
    """

    serializer_class = ExpenseSerializer
    lookup_value_regex = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'
    permission_classes = [IsAuthenticated]
    pagination_class = LedgerPagination
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        return Expense.objects.filter(
            trip__participants__user=self.request.user
        ).select_related('paid_by', 'created_by').prefetch_related('shares__participant').distinct()

    @extend_schema(
        parameters=[OpenApiParameter('trip', str, required=True)],
        responses={200: ExpenseSerializer(many=True), 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['expenses'],
    )
    def list(self, request, *args, **kwargs):
        filters = TripFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        try:
            expenses = get_trip_expenses(trip_id=filters.validated_data['trip'], user=request.user)
        except DOMAIN_ERRORS as e:
            return _error_response(e)

        page = self.paginate_queryset(expenses)
        if page is not None:
            return self.get_paginated_response(ExpenseSerializer(page, many=True).data)
        return Response(ExpenseSerializer(expenses, many=True).data)

    @extend_schema(
        request=ExpenseCreateSerializer,
        responses={
            201: ExpenseSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=['expenses'],
    )
    def create(self, request, *args, **kwargs):
        """Record an expense split equally among participant_ids."""
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            expense = create_expense(
                trip_id=data['trip'],
                user=request.user,
                description=data['description'],
                amount=data['amount'],
                participant_ids=data['participant_ids'],
                currency=data.get('currency'),
                paid_by_id=data.get('paid_by'),
                expense_date=data.get('expense_date'),
            )
        except DOMAIN_ERRORS as e:
            return _error_response(e)

        expense = self.get_queryset().get(id=expense.id)
        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        expense = self.get_object()
        try:
            delete_expense(expense_id=expense.id, user=request.user)
        except DOMAIN_ERRORS as e:
            return _error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PaymentViewSet(viewsets.ModelViewSet):
    """
    ViewSet for direct payments between participants.

    list: Payments of a trip (?trip=)
    create: Record a payment (trip ADMIN or EDITOR)
    destroy: Delete a payment (trip admin)
    """

    serializer_class = PaymentSerializer
    lookup_value_regex = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'
    permission_classes = [IsAuthenticated]
    pagination_class = LedgerPagination
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        return Payment.objects.filter(
            trip__participants__user=self.request.user
        ).select_related('from_participant', 'to_participant').distinct()

    @extend_schema(
        parameters=[OpenApiParameter('trip', str, required=True)],
        responses={200: PaymentSerializer(many=True), 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['expenses'],
    )
    def list(self, request, *args, **kwargs):
        filters = TripFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        try:
            payments = get_trip_payments(trip_id=filters.validated_data['trip'], user=request.user)
        except DOMAIN_ERRORS as e:
            return _error_response(e)

        page = self.paginate_queryset(payments)
        if page is not None:
            return self.get_paginated_response(PaymentSerializer(page, many=True).data)
        return Response(PaymentSerializer(payments, many=True).data)

    @extend_schema(
        request=PaymentCreateSerializer,
        responses={
            201: PaymentSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=['expenses'],
    )
    def create(self, request, *args, **kwargs):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            payment = create_payment(
                trip_id=data['trip'],
                user=request.user,
                from_participant_id=data['from_participant'],
                to_participant_id=data['to_participant'],
                amount=data['amount'],
                currency=data.get('currency'),
                paid_at=data.get('paid_at'),
            )
        except DOMAIN_ERRORS as e:
            return _error_response(e)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        payment = self.get_object()
        try:
            delete_payment(payment_id=payment.id, user=request.user)
        except DOMAIN_ERRORS as e:
            return _error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    parameters=[OpenApiParameter('trip', str, required=True)],
    responses={200: SettlementSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    tags=['expenses'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def trip_settlement(request):
    """
    Balances per currency and suggested transfers for a trip.

    GET /api/expenses/settlement/?trip=<uuid>
    """
    filters = TripFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)

    try:
        result = get_trip_settlement(trip_id=filters.validated_data['trip'], user=request.user)
    except DOMAIN_ERRORS as e:
        return _error_response(e)

    return Response(SettlementSerializer(result).data)

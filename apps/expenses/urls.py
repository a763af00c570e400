from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'expenses'

# Note: payments must be registered BEFORE empty prefix to avoid URL conflicts
router = DefaultRouter()
router.register(r'payments', views.PaymentViewSet, basename='payment')
router.register(r'', views.ExpenseViewSet, basename='expense')

urlpatterns = [
    # GET    /api/expenses/?trip=            - List trip expenses
    # POST   /api/expenses/                  - Record expense (equal split)
    # GET    /api/expenses/{id}/             - Expense detail
    # DELETE /api/expenses/{id}/             - Delete expense (creator or trip admin)

    # GET    /api/expenses/payments/?trip=   - List trip payments
    # POST   /api/expenses/payments/         - Record payment
    # DELETE /api/expenses/payments/{id}/    - Delete payment (trip admin)

    # GET    /api/expenses/settlement/?trip= - Balances and suggested transfers
    path('settlement/', views.trip_settlement, name='settlement'),

    path('', include(router.urls)),
]

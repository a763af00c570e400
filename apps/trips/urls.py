from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'trips'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.TripViewSet, basename='trip')

urlpatterns = [
    # Trip ViewSet routes
    # GET    /api/trips/              - List user's trips
    # POST   /api/trips/              - Create trip
    # GET    /api/trips/{id}/         - Trip details
    # PATCH  /api/trips/{id}/         - Update trip (admin)
    # DELETE /api/trips/{id}/         - Delete trip (admin)

    # Custom trip actions
    # GET    /api/trips/{id}/participants/               - List participants
    # POST   /api/trips/{id}/participants/               - Add participant (admin)
    # POST   /api/trips/{id}/update_participant_role/    - Change role (admin)
    # DELETE /api/trips/{id}/remove_participant/         - Remove participant (admin)

    path('', include(router.urls)),
]

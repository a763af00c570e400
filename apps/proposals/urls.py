from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'proposals'

router = DefaultRouter()
router.register(r'', views.ItemViewSet, basename='item')

urlpatterns = [
    # GET    /api/items/?trip=       - List trip items with tallies
    # POST   /api/items/             - Propose item (trip admin/editor)
    # GET    /api/items/{id}/        - Item detail
    # DELETE /api/items/{id}/        - Delete item (creator or trip admin)
    # POST   /api/items/{id}/vote/   - Cast vote
    # POST   /api/items/{id}/check/  - Check in on approved item
    path('', include(router.urls)),
]

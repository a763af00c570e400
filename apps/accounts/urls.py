from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),
    path('user/delete/', views.delete_account, name='delete-account'),

    # Electorate changes
    path('users/<uuid:pk>/status/', views.update_user_status, name='user-status'),
]

# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTENTICAÇÃO ===
    path('auth/register', views.register_view, name='register'),
    path('auth/login', views.login_view, name='login'),
    path('auth/me', views.me_view, name='me'),
    path('auth/change-password', views.change_password_view, name='change_password'),

    # === MONITORAMENTO ===
    path('health', views.health_check, name='health'),
]

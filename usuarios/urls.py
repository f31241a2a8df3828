from django.urls import path

from . import views

app_name = "usuarios"

urlpatterns = [
    path(
        '',
        views.LoginUser.as_view(),
        name='login',
    ),
    path(
        'registro/',
        views.UserRegisterView.as_view(),
        name='registro',
    ),
    path(
        'salir/',
        views.LogoutView.as_view(),
        name='logout',
    ),
]
